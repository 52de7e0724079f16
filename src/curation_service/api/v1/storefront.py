"""Public read endpoints serving curated lists to the storefront widgets."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from curation_service.api.deps import (
    CatalogDep,
    QuizDep,
    RegistryDep,
    SettingsDep,
    require_storefront_origin,
)
from curation_service.models import dump_catalog

router = APIRouter(dependencies=[Depends(require_storefront_origin)])


def cache_control(max_age: int, stale: int) -> str:
    return f"public, s-maxage={max_age}, max-age={max_age}, stale-while-revalidate={stale}"


@router.get("/recommendations")
async def get_recommendations(
    response: Response,
    catalogs: CatalogDep,
    registry: RegistryDep,
    settings: SettingsDep,
    store: Annotated[str | None, Query(description="Store id (br, global)")] = None,
) -> dict[str, list[dict]]:
    """
    Get the curated recommendations of a store, grouped by category.

    Unknown or missing store ids fall back to the primary store. The
    response is cacheable at the edge; admin edits show up once the cached
    copy expires.
    """
    store_config = registry.resolve(store)
    catalog = await catalogs.list_catalog(store_config.id)
    response.headers["Cache-Control"] = cache_control(
        settings.recommendations_cache_seconds, settings.recommendations_stale_seconds
    )
    return dump_catalog(catalog)


@router.get("/quiz")
async def get_quiz_catalog(
    response: Response,
    quizzes: QuizDep,
    registry: RegistryDep,
    settings: SettingsDep,
    store: Annotated[str | None, Query(description="Store id (br, global)")] = None,
) -> dict[str, list[dict]]:
    """Get the quiz outcome -> products mapping of a store."""
    store_config = registry.resolve(store)
    catalog = await quizzes.list_catalog(store_config.id)
    response.headers["Cache-Control"] = cache_control(
        settings.quiz_cache_seconds, settings.quiz_stale_seconds
    )
    return dump_catalog(catalog)
