"""Store registry: static configuration of every storefront/market."""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from curation_service.config import get_settings
from curation_service.errors import UnknownStoreError
from shared.constants import CATALOG_CATEGORIES, QUIZ_CATEGORIES


class StoreId(str, Enum):
    """Known storefronts."""

    BR = "br"
    GLOBAL = "global"


STORE_DISPLAY_NAMES = {
    StoreId.BR: "KZ Music Store Brasil",
    StoreId.GLOBAL: "KZ Music Store Global",
}


@dataclass(frozen=True)
class StoreConfig:
    """Configuration of one storefront. Immutable after startup."""

    id: str
    display_name: str
    categories: tuple[str, ...]
    quiz_categories: tuple[str, ...]
    catalog_key: str
    quiz_key: str
    stats_prefix: str

    def has_category(self, category: str) -> bool:
        return category in self.categories

    def has_quiz_category(self, category: str) -> bool:
        return category in self.quiz_categories

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "categories": list(self.categories),
            "quizCategories": list(self.quiz_categories),
        }


def build_store_config(
    store_id: StoreId,
    namespace: str,
    categories: tuple[str, ...] = CATALOG_CATEGORIES,
    quiz_categories: tuple[str, ...] = QUIZ_CATEGORIES,
) -> StoreConfig:
    """Build the configuration and KV key layout for one store."""
    sid = store_id.value
    return StoreConfig(
        id=sid,
        display_name=STORE_DISPLAY_NAMES[store_id],
        categories=categories,
        quiz_categories=quiz_categories,
        catalog_key=f"{namespace}:recommendations:{sid}",
        quiz_key=f"{namespace}:quiz:{sid}",
        stats_prefix=f"{namespace}:stats:{sid}",
    )


class StoreRegistry:
    """
    Lookup of store configurations by id.

    ``get`` rejects unknown ids and is used by the admin surface.
    ``resolve`` falls back to the primary store and is used by the public
    read and tracking paths, where an unknown or missing id must never fail
    the request.
    """

    def __init__(self, stores: list[StoreConfig], primary: str):
        self._stores = {store.id: store for store in stores}
        if primary not in self._stores:
            raise ValueError(f"Primary store '{primary}' is not registered")
        self.primary = primary

    def __iter__(self):
        return iter(self._stores.values())

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, store_id: object) -> bool:
        return store_id in self._stores

    @property
    def primary_store(self) -> StoreConfig:
        return self._stores[self.primary]

    def get(self, store_id: str) -> StoreConfig:
        try:
            return self._stores[store_id]
        except KeyError:
            raise UnknownStoreError(store_id) from None

    def resolve(self, store_id: str | None) -> StoreConfig:
        """Return the store for ``store_id``, defaulting to the primary store."""
        if store_id and store_id in self._stores:
            return self._stores[store_id]
        return self.primary_store


@lru_cache
def get_store_registry() -> StoreRegistry:
    """Get the process-wide store registry built from settings."""
    settings = get_settings()
    return StoreRegistry(
        [build_store_config(store_id, settings.key_namespace) for store_id in StoreId],
        primary=settings.primary_store,
    )
