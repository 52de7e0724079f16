"""Unit tests for the curated catalog store."""

import pytest

from curation_service.errors import InvalidCategoryError, UnknownStoreError
from curation_service.infrastructure.memory import MemoryKeyValueStore
from curation_service.services.catalog import CatalogStore
from curation_service.stores import StoreRegistry


@pytest.fixture
def catalogs(kv: MemoryKeyValueStore, registry: StoreRegistry) -> CatalogStore:
    return CatalogStore(kv, registry)


def handles(catalog: dict, category: str) -> list[str]:
    return [p.handle for p in catalog.get(category, [])]


class TestListCatalog:
    """Reading a store's catalog."""

    @pytest.mark.asyncio
    async def test_missing_key_is_empty(self, catalogs: CatalogStore) -> None:
        assert await catalogs.list_catalog("br") == {}

    @pytest.mark.asyncio
    async def test_unknown_store_rejected(self, catalogs: CatalogStore) -> None:
        with pytest.raises(UnknownStoreError):
            await catalogs.list_catalog("xx")

    @pytest.mark.asyncio
    async def test_stores_are_isolated(self, catalogs: CatalogStore, product_factory) -> None:
        await catalogs.add("br", "DJs", product_factory("a"))
        assert await catalogs.list_catalog("global") == {}

    @pytest.mark.asyncio
    async def test_persisted_in_camel_case(
        self, catalogs: CatalogStore, kv: MemoryKeyValueStore, product_factory
    ) -> None:
        await catalogs.add(
            "br",
            "DJs",
            product_factory("a", "Alpha", price="10.50", currency="BRL", variant_id="gid://shopify/ProductVariant/1"),
        )
        stored = await kv.get("kz:recommendations:br")
        assert stored == {
            "DJs": [
                {
                    "name": "Alpha",
                    "handle": "a",
                    "image": None,
                    "price": "10.50",
                    "currency": "BRL",
                    "variantId": "gid://shopify/ProductVariant/1",
                }
            ]
        }


class TestAdd:
    """Appending products to a category."""

    @pytest.mark.asyncio
    async def test_appends_in_order(self, catalogs: CatalogStore, product_factory) -> None:
        await catalogs.add("br", "DJs", product_factory("a"))
        catalog = await catalogs.add("br", "DJs", product_factory("b"))
        assert handles(catalog, "DJs") == ["a", "b"]
        assert handles(await catalogs.list_catalog("br"), "DJs") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_duplicate_handle_keeps_first(self, catalogs: CatalogStore, product_factory) -> None:
        await catalogs.add("br", "DJs", product_factory("a", "First"))
        await catalogs.add("br", "DJs", product_factory("a", "Second"))

        products = (await catalogs.list_catalog("br"))["DJs"]
        assert len(products) == 1
        assert products[0].name == "First"

    @pytest.mark.asyncio
    async def test_same_handle_allowed_in_other_category(
        self, catalogs: CatalogStore, product_factory
    ) -> None:
        await catalogs.add("br", "DJs", product_factory("a"))
        catalog = await catalogs.add("br", "Gamers", product_factory("a"))
        assert handles(catalog, "DJs") == ["a"]
        assert handles(catalog, "Gamers") == ["a"]

    @pytest.mark.asyncio
    async def test_replace_policy_overwrites_in_place(
        self, kv: MemoryKeyValueStore, registry: StoreRegistry, product_factory
    ) -> None:
        catalogs = CatalogStore(kv, registry, duplicate_policy="replace")
        await catalogs.add("br", "DJs", product_factory("a", "First"))
        await catalogs.add("br", "DJs", product_factory("b"))
        await catalogs.add("br", "DJs", product_factory("a", "Second"))

        products = (await catalogs.list_catalog("br"))["DJs"]
        assert [p.handle for p in products] == ["a", "b"]
        assert products[0].name == "Second"

    @pytest.mark.asyncio
    async def test_invalid_category_rejected_and_catalog_unchanged(
        self, catalogs: CatalogStore, product_factory
    ) -> None:
        await catalogs.add("br", "DJs", product_factory("a"))
        before = await catalogs.list_catalog("br")

        with pytest.raises(InvalidCategoryError):
            await catalogs.add("br", "Violinistas", product_factory("b"))

        assert await catalogs.list_catalog("br") == before


class TestRemove:
    """Removing products from a category."""

    @pytest.mark.asyncio
    async def test_removes_matching_handle(self, catalogs: CatalogStore, product_factory) -> None:
        for h in ("a", "b", "c"):
            await catalogs.add("br", "DJs", product_factory(h))
        catalog = await catalogs.remove("br", "DJs", "b")
        assert handles(catalog, "DJs") == ["a", "c"]

    @pytest.mark.asyncio
    async def test_missing_handle_is_noop(self, catalogs: CatalogStore, product_factory) -> None:
        await catalogs.add("br", "DJs", product_factory("a"))
        catalog = await catalogs.remove("br", "DJs", "zzz")
        assert handles(catalog, "DJs") == ["a"]

    @pytest.mark.asyncio
    async def test_missing_category_is_noop(self, catalogs: CatalogStore) -> None:
        assert await catalogs.remove("br", "DJs", "a") == {}


class TestReorder:
    """Rebuilding a category from a handle order."""

    @pytest.mark.asyncio
    async def test_omitted_handles_dropped(self, catalogs: CatalogStore, product_factory) -> None:
        for h in ("A", "B", "C"):
            await catalogs.add("br", "DJs", product_factory(h))
        catalog = await catalogs.reorder("br", "DJs", ["C", "A"])
        assert handles(catalog, "DJs") == ["C", "A"]
        assert handles(await catalogs.list_catalog("br"), "DJs") == ["C", "A"]

    @pytest.mark.asyncio
    async def test_unknown_handles_yield_empty(self, catalogs: CatalogStore, product_factory) -> None:
        for h in ("A", "B", "C"):
            await catalogs.add("br", "DJs", product_factory(h))
        catalog = await catalogs.reorder("br", "DJs", ["Z"])
        assert handles(catalog, "DJs") == []

    @pytest.mark.asyncio
    async def test_repeated_handles_kept_once(self, catalogs: CatalogStore, product_factory) -> None:
        for h in ("A", "B"):
            await catalogs.add("br", "DJs", product_factory(h))
        catalog = await catalogs.reorder("br", "DJs", ["B", "A", "B"])
        assert handles(catalog, "DJs") == ["B", "A"]

    @pytest.mark.asyncio
    async def test_keeps_stored_fields(self, catalogs: CatalogStore, product_factory) -> None:
        await catalogs.add("br", "DJs", product_factory("A", "Alpha", price="1.00"))
        await catalogs.add("br", "DJs", product_factory("B", "Beta"))
        catalog = await catalogs.reorder("br", "DJs", ["B", "A"])
        assert catalog["DJs"][1].name == "Alpha"
        assert str(catalog["DJs"][1].price) == "1.00"

    @pytest.mark.asyncio
    async def test_invalid_category_rejected(self, catalogs: CatalogStore) -> None:
        with pytest.raises(InvalidCategoryError):
            await catalogs.reorder("br", "Violinistas", ["A"])
