"""Quiz catalog: product lists per quiz outcome, plus bulk seeding."""

import asyncio

import structlog

from curation_service.errors import ResolutionFailure
from curation_service.infrastructure.shopify import ProductResolver
from curation_service.models import Catalog, ProductRef, SeedResult
from curation_service.services.catalog import ProductListStore
from curation_service.stores import StoreConfig

logger = structlog.get_logger()


class QuizCatalogStore(ProductListStore):
    """Quiz outcome -> ordered product list, stored under the store's quiz key."""

    namespace = "quiz"

    def storage_key(self, store: StoreConfig) -> str:
        return store.quiz_key

    def categories(self, store: StoreConfig) -> tuple[str, ...]:
        return store.quiz_categories

    async def seed(
        self,
        store_id: str,
        curation: dict[str, list[str]],
        resolver: ProductResolver,
        max_concurrency: int = 5,
    ) -> SeedResult:
        """
        Replace the quiz catalog of a store from a curation table.

        Every distinct handle is resolved once. Handles that fail to resolve
        are logged and left out of their categories; the rest keep the order
        given in ``curation``. The stored quiz catalog is overwritten, not
        merged.

        Args:
            store_id: Store whose quiz catalog is replaced
            curation: Quiz category id -> ordered product handles
            resolver: Product catalog used to build the snapshots
            max_concurrency: Upper bound on in-flight resolutions

        Returns:
            Requested vs. resolved handle counts and per-category sizes
        """
        store = self.registry.get(store_id)
        for category in curation:
            self._check_category(store, category)

        handles = list(dict.fromkeys(h for hs in curation.values() for h in hs))
        logger.info("Seeding quiz catalog", store=store.id, handles=len(handles))

        sem = asyncio.Semaphore(max_concurrency)

        async def resolve(handle: str) -> ProductRef | None:
            async with sem:
                try:
                    product = await resolver.resolve_by_handle(handle)
                except ResolutionFailure as e:
                    logger.warning("Skipping unresolved handle", handle=handle, error=e.reason)
                    return None
            if product is None:
                logger.warning("Skipping unknown handle", handle=handle)
            return product

        results = await asyncio.gather(*(resolve(h) for h in handles))
        resolved = {h: p for h, p in zip(handles, results) if p is not None}

        catalog: Catalog = {
            category: [resolved[h] for h in dict.fromkeys(hs) if h in resolved]
            for category, hs in curation.items()
        }
        await self._save(store, catalog)

        result = SeedResult(
            store=store.id,
            requested=len(handles),
            resolved=len(resolved),
            failed=[h for h in handles if h not in resolved],
            categories={category: len(products) for category, products in catalog.items()},
        )
        logger.info(
            "Quiz catalog seeded",
            store=store.id,
            requested=result.requested,
            resolved=result.resolved,
        )
        return result
