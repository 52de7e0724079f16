"""Domain models for curated catalogs and engagement statistics.

Serialized field names are camelCase so the stored JSON matches what the
storefront widgets read (``variantId``, ``addToCart``, ``completionRate``).
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductRef(CamelModel):
    """Snapshot of a product taken when it was curated."""

    name: str
    handle: str
    image: str | None = None
    price: Decimal | None = None
    currency: str | None = None
    variant_id: str | None = None


Catalog = dict[str, list[ProductRef]]

catalog_adapter: TypeAdapter[Catalog] = TypeAdapter(Catalog)


def load_catalog(raw: object) -> Catalog:
    """Parse a stored catalog value; anything absent becomes an empty mapping."""
    if not raw:
        return {}
    return catalog_adapter.validate_python(raw)


def dump_catalog(catalog: Catalog) -> dict[str, list[dict]]:
    return {
        category: [p.model_dump(mode="json", by_alias=True) for p in products]
        for category, products in catalog.items()
    }


class ProductPage(CamelModel):
    """One page of product search results from the upstream catalog."""

    items: list[ProductRef]
    next_cursor: str | None = None


class ProductStats(CamelModel):
    handle: str
    title: str
    clicks: int = 0
    add_to_cart: int = 0


class StatsSummary(CamelModel):
    """Counters for the recommendations widget funnel."""

    views: int = 0
    clicks: int = 0
    add_to_cart: int = 0
    products: list[ProductStats] = Field(default_factory=list)
    day: str | None = None


class QuizStatsSummary(CamelModel):
    """Counters for the personality quiz funnel."""

    starts: int = 0
    completions: int = 0
    completion_rate: str = "0"
    products: list[ProductStats] = Field(default_factory=list)
    day: str | None = None


class SeedResult(CamelModel):
    """Outcome of a bulk quiz catalog seed."""

    store: str
    requested: int
    resolved: int
    failed: list[str] = Field(default_factory=list)
    categories: dict[str, int] = Field(default_factory=dict)
