"""Pytest configuration and fixtures."""

import base64
from datetime import date
from typing import Any

import pytest
from fastapi.testclient import TestClient

from curation_service.config import Settings, get_settings
from curation_service.errors import ResolutionFailure
from curation_service.infrastructure.kv import get_kv_store
from curation_service.infrastructure.memory import MemoryKeyValueStore
from curation_service.infrastructure.shopify import get_product_resolver
from curation_service.main import create_app
from curation_service.models import ProductPage, ProductRef
from curation_service.stores import StoreId, StoreRegistry, build_store_config, get_store_registry

ADMIN_PASSWORD = "test-admin-pass"
STOREFRONT_ORIGIN = "https://kzmusicstore.com.br"


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResolver:
    """Product resolver returning canned products."""

    def __init__(self, products: dict[str, ProductRef] | None = None, broken: set[str] | None = None):
        self.products = products or {}
        self.broken = broken or set()
        self.calls: list[str] = []

    async def resolve_by_handle(self, handle: str) -> ProductRef | None:
        self.calls.append(handle)
        if handle in self.broken:
            raise ResolutionFailure(handle, "upstream timeout")
        return self.products.get(handle)

    async def search_products(self, query: str | None = None, cursor: str | None = None) -> ProductPage:
        items = [p for p in self.products.values() if not query or query.lower() in p.name.lower()]
        return ProductPage(items=items, next_cursor=None)


def make_product(handle: str, name: str | None = None, **fields: Any) -> ProductRef:
    return ProductRef(name=name or handle.replace("-", " ").title(), handle=handle, **fields)


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        app_env="test",
        debug=True,
        kv_backend="memory",
        admin_password=ADMIN_PASSWORD,
        shopify_store="test-shop.myshopify.com",
        shopify_admin_token="test-token",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv(clock: FakeClock) -> MemoryKeyValueStore:
    return MemoryKeyValueStore(clock=clock)


@pytest.fixture
def registry() -> StoreRegistry:
    return StoreRegistry(
        [build_store_config(store_id, "kz") for store_id in StoreId],
        primary="br",
    )


@pytest.fixture
def fixed_day() -> date:
    return date(2026, 3, 14)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver(
        {
            "fone-kz-edx-pro": make_product("fone-kz-edx-pro", "KZ EDX Pro", price="99.90", currency="BRL"),
            "fone-kz-zsn-pro-x": make_product("fone-kz-zsn-pro-x", "KZ ZSN Pro X", price="189.90", currency="BRL"),
            "fone-kz-castor": make_product("fone-kz-castor", "KZ Castor", price="149.90", currency="BRL"),
        }
    )


@pytest.fixture
def app(test_settings: Settings, kv: MemoryKeyValueStore, registry: StoreRegistry, resolver: FakeResolver) -> Any:
    """Create test application."""

    def get_test_settings() -> Settings:
        return test_settings

    async def get_test_kv() -> MemoryKeyValueStore:
        return kv

    app = create_app()
    app.dependency_overrides[get_settings] = get_test_settings
    app.dependency_overrides[get_kv_store] = get_test_kv
    app.dependency_overrides[get_store_registry] = lambda: registry
    app.dependency_overrides[get_product_resolver] = lambda: resolver
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = base64.b64encode(f"admin:{ADMIN_PASSWORD}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def storefront_headers() -> dict[str, str]:
    return {"Origin": STOREFRONT_ORIGIN}


@pytest.fixture
def product_factory():
    """Factory building ProductRef snapshots from a handle."""
    return make_product
