"""Admin endpoints for curating catalogs and reading engagement stats."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from curation_service.api.deps import (
    AnalyticsDep,
    CatalogDep,
    QuizDep,
    RegistryDep,
    SettingsDep,
    require_admin,
)
from curation_service.infrastructure.shopify import ProductResolver, get_product_resolver
from curation_service.models import (
    CamelModel,
    ProductPage,
    ProductRef,
    QuizStatsSummary,
    SeedResult,
    StatsSummary,
    dump_catalog,
)
from curation_service.services.catalog import ProductListStore
from shared.constants import QUIZ_CURATION

logger = structlog.get_logger()

router = APIRouter(dependencies=[Depends(require_admin)])

ResolverDep = Annotated[ProductResolver, Depends(get_product_resolver)]
StoreQuery = Annotated[str, Query(description="Store id (br, global)")]


# =============================================================================
# Request / Response Models
# =============================================================================


class ProductInput(CamelModel):
    """Product as picked in the admin product browser."""

    title: str
    handle: str = Field(..., min_length=1)
    image: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    variant_id: str | None = None

    def to_ref(self) -> ProductRef:
        return ProductRef(
            name=self.title,
            handle=self.handle,
            image=self.image,
            price=self.price,
            currency=self.currency,
            variant_id=self.variant_id,
        )


class SaveProductRequest(BaseModel):
    store: str
    category: str
    product: ProductInput


class ReorderRequest(BaseModel):
    store: str
    category: str
    order: list[str]


class SeedRequest(BaseModel):
    store: str
    curation: dict[str, list[str]] | None = Field(
        None, description="Quiz category id -> product handles; defaults to the built-in table"
    )


class MutationResponse(BaseModel):
    success: bool
    data: dict[str, list[dict[str, Any]]]


# =============================================================================
# Stores & Products
# =============================================================================


@router.get("/stores")
async def list_stores(registry: RegistryDep) -> list[dict]:
    """List configured stores with their category sets."""
    return [store.to_dict() for store in registry]


@router.get("/categories")
async def list_categories(store: StoreQuery, registry: RegistryDep) -> list[str]:
    return list(registry.get(store).categories)


@router.get("/quiz/categories")
async def list_quiz_categories(store: StoreQuery, registry: RegistryDep) -> list[str]:
    return list(registry.get(store).quiz_categories)


@router.get("/products", response_model=ProductPage, response_model_by_alias=True)
async def search_products(
    resolver: ResolverDep,
    search: Annotated[str | None, Query(description="Title filter")] = None,
    cursor: Annotated[str | None, Query(description="Cursor from the previous page")] = None,
) -> ProductPage:
    """Browse the upstream product catalog to pick products for curation."""
    return await resolver.search_products(search or None, cursor)


# =============================================================================
# Catalog mutations (shared by recommendations and quiz)
# =============================================================================


async def _save(lists: ProductListStore, body: SaveProductRequest) -> MutationResponse:
    catalog = await lists.add(body.store, body.category, body.product.to_ref())
    return MutationResponse(success=True, data=dump_catalog(catalog))


async def _remove(lists: ProductListStore, store: str, category: str, handle: str) -> MutationResponse:
    catalog = await lists.remove(store, category, handle)
    return MutationResponse(success=True, data=dump_catalog(catalog))


async def _reorder(lists: ProductListStore, body: ReorderRequest) -> MutationResponse:
    catalog = await lists.reorder(body.store, body.category, body.order)
    return MutationResponse(success=True, data=dump_catalog(catalog))


@router.get("/recommendations")
async def get_recommendations(store: StoreQuery, catalogs: CatalogDep) -> dict[str, list[dict]]:
    return dump_catalog(await catalogs.list_catalog(store))


@router.post("/recommendations", response_model=MutationResponse)
async def save_recommendation(body: SaveProductRequest, catalogs: CatalogDep) -> MutationResponse:
    """Add a product to the end of a category; duplicates are ignored."""
    return await _save(catalogs, body)


@router.delete("/recommendations", response_model=MutationResponse)
async def remove_recommendation(
    store: StoreQuery,
    category: Annotated[str, Query()],
    handle: Annotated[str, Query()],
    catalogs: CatalogDep,
) -> MutationResponse:
    return await _remove(catalogs, store, category, handle)


@router.post("/recommendations/reorder", response_model=MutationResponse)
async def reorder_recommendations(body: ReorderRequest, catalogs: CatalogDep) -> MutationResponse:
    """Replace a category's order; handles left out of ``order`` are removed."""
    return await _reorder(catalogs, body)


@router.get("/quiz")
async def get_quiz_catalog(store: StoreQuery, quizzes: QuizDep) -> dict[str, list[dict]]:
    return dump_catalog(await quizzes.list_catalog(store))


@router.post("/quiz", response_model=MutationResponse)
async def save_quiz_product(body: SaveProductRequest, quizzes: QuizDep) -> MutationResponse:
    return await _save(quizzes, body)


@router.delete("/quiz", response_model=MutationResponse)
async def remove_quiz_product(
    store: StoreQuery,
    category: Annotated[str, Query()],
    handle: Annotated[str, Query()],
    quizzes: QuizDep,
) -> MutationResponse:
    return await _remove(quizzes, store, category, handle)


@router.post("/quiz/reorder", response_model=MutationResponse)
async def reorder_quiz_products(body: ReorderRequest, quizzes: QuizDep) -> MutationResponse:
    return await _reorder(quizzes, body)


@router.post("/quiz/seed", response_model=SeedResult, response_model_by_alias=True)
async def seed_quiz_catalog(
    body: SeedRequest,
    quizzes: QuizDep,
    resolver: ResolverDep,
    settings: SettingsDep,
) -> SeedResult:
    """
    Rebuild a store's quiz catalog from a curation table.

    Products are resolved through Shopify. Handles that cannot be resolved
    are skipped and reported under ``failed``. The existing quiz catalog is
    replaced as a whole.
    """
    curation = body.curation if body.curation is not None else QUIZ_CURATION
    return await quizzes.seed(
        body.store,
        curation,
        resolver,
        max_concurrency=settings.shopify_max_concurrency,
    )


# =============================================================================
# Stats
# =============================================================================


@router.get("/stats", response_model=StatsSummary, response_model_by_alias=True)
async def get_stats(
    store: StoreQuery,
    analytics: AnalyticsDep,
    day: Annotated[date | None, Query(description="UTC day; lifetime totals when omitted")] = None,
) -> StatsSummary:
    """
    Get recommendations widget engagement.

    Returns views, clicks and add-to-cart totals plus one row per product,
    sorted by clicks.
    """
    return await analytics.read_stats(store, day)


@router.get("/quiz/stats", response_model=QuizStatsSummary, response_model_by_alias=True)
async def get_quiz_stats(
    store: StoreQuery,
    analytics: AnalyticsDep,
    day: Annotated[date | None, Query(description="UTC day; lifetime totals when omitted")] = None,
) -> QuizStatsSummary:
    """Get quiz starts, completions, completion rate and per-product engagement."""
    return await analytics.read_quiz_stats(store, day)
