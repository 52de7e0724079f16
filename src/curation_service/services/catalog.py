"""Curated product lists per store and category.

The whole catalog of a store lives in one KV value. Every mutation reads it,
changes it in memory and writes it back; concurrent writers to the same store
race and the last write wins.
"""

from typing import Literal

import structlog

from curation_service.errors import InvalidCategoryError
from curation_service.infrastructure.kv import KeyValueStore
from curation_service.models import Catalog, ProductRef, dump_catalog, load_catalog
from curation_service.stores import StoreConfig, StoreRegistry

logger = structlog.get_logger()

DuplicatePolicy = Literal["keep_first", "replace"]


class ProductListStore:
    """Category -> ordered product list, stored as one value per store."""

    namespace = "catalog"

    def __init__(
        self,
        kv: KeyValueStore,
        registry: StoreRegistry,
        duplicate_policy: DuplicatePolicy = "keep_first",
    ):
        self.kv = kv
        self.registry = registry
        self.duplicate_policy = duplicate_policy

    def storage_key(self, store: StoreConfig) -> str:
        return store.catalog_key

    def categories(self, store: StoreConfig) -> tuple[str, ...]:
        return store.categories

    def _check_category(self, store: StoreConfig, category: str) -> None:
        if category not in self.categories(store):
            raise InvalidCategoryError(category, store.id)

    async def _load(self, store: StoreConfig) -> Catalog:
        return load_catalog(await self.kv.get(self.storage_key(store)))

    async def _save(self, store: StoreConfig, catalog: Catalog) -> None:
        await self.kv.set(self.storage_key(store), dump_catalog(catalog))

    async def list_catalog(self, store_id: str) -> Catalog:
        """Return the full category -> products mapping of a store."""
        store = self.registry.get(store_id)
        return await self._load(store)

    async def add(self, store_id: str, category: str, product: ProductRef) -> Catalog:
        """
        Append a product to the end of a category.

        A product whose handle is already present is left in place. Under the
        ``keep_first`` policy the stored fields are kept; under ``replace``
        the stored entry is overwritten at the same position.
        """
        store = self.registry.get(store_id)
        self._check_category(store, category)

        catalog = await self._load(store)
        products = catalog.setdefault(category, [])
        index = next((i for i, p in enumerate(products) if p.handle == product.handle), None)

        if index is None:
            products.append(product)
            await self._save(store, catalog)
            logger.info(
                "Product added",
                namespace=self.namespace,
                store=store.id,
                category=category,
                handle=product.handle,
            )
        elif self.duplicate_policy == "replace":
            products[index] = product
            await self._save(store, catalog)
            logger.info(
                "Product replaced",
                namespace=self.namespace,
                store=store.id,
                category=category,
                handle=product.handle,
            )
        else:
            logger.debug(
                "Product already curated",
                namespace=self.namespace,
                store=store.id,
                category=category,
                handle=product.handle,
            )
        return catalog

    async def remove(self, store_id: str, category: str, handle: str) -> Catalog:
        """Remove a product from a category; a missing handle is not an error."""
        store = self.registry.get(store_id)
        catalog = await self._load(store)
        if category in catalog:
            catalog[category] = [p for p in catalog[category] if p.handle != handle]
        await self._save(store, catalog)
        logger.info(
            "Product removed",
            namespace=self.namespace,
            store=store.id,
            category=category,
            handle=handle,
        )
        return catalog

    async def reorder(self, store_id: str, category: str, order: list[str]) -> Catalog:
        """
        Rebuild a category in the given handle order.

        Handles not currently stored are ignored and stored products missing
        from ``order`` are dropped, so callers must send the complete order.
        """
        store = self.registry.get(store_id)
        self._check_category(store, category)

        catalog = await self._load(store)
        by_handle = {p.handle: p for p in catalog.get(category, [])}
        reordered: list[ProductRef] = []
        for handle in order:
            product = by_handle.pop(handle, None)
            if product is not None:
                reordered.append(product)

        if by_handle:
            logger.info(
                "Reorder dropped products",
                namespace=self.namespace,
                store=store.id,
                category=category,
                handles=sorted(by_handle),
            )
        catalog[category] = reordered
        await self._save(store, catalog)
        return catalog


class CatalogStore(ProductListStore):
    """Main recommendations catalog."""
