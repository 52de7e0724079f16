"""FastAPI dependencies shared by the public and admin routers."""

import re
import secrets
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from curation_service.config import Settings, get_settings
from curation_service.infrastructure.kv import KeyValueStore, get_kv_store
from curation_service.services import (
    AnalyticsAggregator,
    CatalogStore,
    QuizCatalogStore,
    RateLimiter,
)
from curation_service.stores import StoreRegistry, get_store_registry

logger = structlog.get_logger()

basic_auth = HTTPBasic(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]
KVDep = Annotated[KeyValueStore, Depends(get_kv_store)]
RegistryDep = Annotated[StoreRegistry, Depends(get_store_registry)]


def get_catalog_store(kv: KVDep, registry: RegistryDep, settings: SettingsDep) -> CatalogStore:
    return CatalogStore(kv, registry, duplicate_policy=settings.duplicate_handle_policy)


def get_quiz_store(kv: KVDep, registry: RegistryDep, settings: SettingsDep) -> QuizCatalogStore:
    return QuizCatalogStore(kv, registry, duplicate_policy=settings.duplicate_handle_policy)


def get_analytics(kv: KVDep, registry: RegistryDep) -> AnalyticsAggregator:
    return AnalyticsAggregator(kv, registry)


def get_rate_limiter(kv: KVDep, settings: SettingsDep) -> RateLimiter:
    return RateLimiter(
        kv,
        limit=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
        key_prefix=f"{settings.key_namespace}:ratelimit",
    )


def is_origin_allowed(origin: str | None, settings: Settings, allow_missing: bool) -> bool:
    """Check a request Origin against the storefront domains."""
    if not origin:
        return allow_missing
    if origin in settings.cors_origins:
        return True
    return bool(settings.cors_origin_regex and re.match(settings.cors_origin_regex, origin))


def require_storefront_origin(request: Request, settings: SettingsDep) -> None:
    """Reject browser requests from foreign sites; direct requests pass."""
    if not is_origin_allowed(request.headers.get("origin"), settings, allow_missing=True):
        raise HTTPException(status_code=403, detail="Forbidden")


def require_tracking_origin(request: Request, settings: SettingsDep) -> None:
    """Tracking beacons must come from a storefront page."""
    if not is_origin_allowed(request.headers.get("origin"), settings, allow_missing=False):
        raise HTTPException(status_code=403, detail="Forbidden")


def client_address(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop set by the edge proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def require_admin(
    settings: SettingsDep,
    credentials: Annotated[HTTPBasicCredentials | None, Depends(basic_auth)],
) -> None:
    """Password-only HTTP Basic check; the username is ignored."""
    valid = (
        credentials is not None
        and bool(settings.admin_password)
        and secrets.compare_digest(
            credentials.password.encode(), settings.admin_password.encode()
        )
    )
    if not valid:
        logger.info("Admin authentication failed")
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Basic"},
        )


CatalogDep = Annotated[CatalogStore, Depends(get_catalog_store)]
QuizDep = Annotated[QuizCatalogStore, Depends(get_quiz_store)]
AnalyticsDep = Annotated[AnalyticsAggregator, Depends(get_analytics)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
