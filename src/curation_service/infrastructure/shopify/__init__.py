"""Shopify Admin GraphQL client used to resolve and browse products."""

from typing import Any, Protocol

import httpx
import structlog

from curation_service.config import Settings, get_settings
from curation_service.errors import ProductCatalogUnavailable, ResolutionFailure
from curation_service.models import ProductPage, ProductRef

logger = structlog.get_logger()

PRODUCT_FIELDS = """
    title
    handle
    featuredImage { url }
    priceRangeV2 { minVariantPrice { amount, currencyCode } }
    variants(first: 1) { nodes { id } }
"""

PRODUCT_BY_HANDLE_QUERY = f"""
query ($query: String!) {{
  products(first: 1, query: $query) {{
    nodes {{ {PRODUCT_FIELDS} }}
  }}
}}
"""

PRODUCT_SEARCH_QUERY = f"""
query ($first: Int!, $query: String, $cursor: String) {{
  products(first: $first, query: $query, after: $cursor) {{
    pageInfo {{ hasNextPage, endCursor }}
    nodes {{ {PRODUCT_FIELDS} }}
  }}
}}
"""


class ProductResolver(Protocol):
    """Lookup of products in the upstream catalog."""

    async def resolve_by_handle(self, handle: str) -> ProductRef | None: ...

    async def search_products(
        self, query: str | None = None, cursor: str | None = None
    ) -> ProductPage: ...


def product_from_node(node: dict[str, Any]) -> ProductRef:
    """Map a GraphQL product node to a ProductRef snapshot."""
    image = (node.get("featuredImage") or {}).get("url")
    price = ((node.get("priceRangeV2") or {}).get("minVariantPrice")) or {}
    variants = ((node.get("variants") or {}).get("nodes")) or []
    return ProductRef(
        name=node.get("title") or node["handle"],
        handle=node["handle"],
        image=image,
        price=price.get("amount"),
        currency=price.get("currencyCode"),
        variant_id=variants[0]["id"] if variants else None,
    )


class ShopifyClient:
    """Thin async client over the Shopify Admin GraphQL API."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self.settings = settings
        self.client = client or httpx.AsyncClient(timeout=settings.shopify_timeout)

    async def close(self) -> None:
        await self.client.aclose()

    async def _graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.post(
            self.settings.shopify_graphql_url,
            json={"query": query, "variables": variables},
            headers={
                "Content-Type": "application/json",
                "X-Shopify-Access-Token": self.settings.shopify_admin_token,
            },
        )
        response.raise_for_status()
        payload = response.json()
        if payload.get("errors"):
            raise ValueError(str(payload["errors"]))
        return payload.get("data") or {}

    async def resolve_by_handle(self, handle: str) -> ProductRef | None:
        """
        Resolve a product handle into a display snapshot.

        Returns None when no product has this handle. Transport, HTTP and
        GraphQL errors raise ResolutionFailure.
        """
        try:
            data = await self._graphql(PRODUCT_BY_HANDLE_QUERY, {"query": f"handle:{handle}"})
        except (httpx.HTTPError, ValueError) as e:
            raise ResolutionFailure(handle, str(e)) from e

        nodes = (data.get("products") or {}).get("nodes") or []
        for node in nodes:
            if node.get("handle") == handle:
                return product_from_node(node)
        return None

    async def search_products(
        self, query: str | None = None, cursor: str | None = None
    ) -> ProductPage:
        """Browse the catalog by title, one page at a time."""
        variables = {
            "first": self.settings.shopify_search_page_size,
            "query": f"title:*{query}*" if query else None,
            "cursor": cursor,
        }
        try:
            data = await self._graphql(PRODUCT_SEARCH_QUERY, variables)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Shopify product search failed", query=query, error=str(e))
            raise ProductCatalogUnavailable(f"Product search failed: {e}") from e

        products = data.get("products") or {}
        page_info = products.get("pageInfo") or {}
        return ProductPage(
            items=[product_from_node(node) for node in products.get("nodes") or []],
            next_cursor=page_info.get("endCursor") if page_info.get("hasNextPage") else None,
        )


_shopify_client: ShopifyClient | None = None


def get_product_resolver() -> ProductResolver:
    """Get or create the global Shopify client (FastAPI dependency)."""
    global _shopify_client
    if _shopify_client is None:
        settings = get_settings()
        if not settings.shopify_store:
            logger.warning("SHOPIFY_STORE is not set, product resolution will fail")
        _shopify_client = ShopifyClient(settings)
    return _shopify_client


async def close_product_resolver() -> None:
    global _shopify_client
    if _shopify_client is not None:
        await _shopify_client.close()
        _shopify_client = None
