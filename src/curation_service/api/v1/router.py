"""API v1 router that aggregates all endpoint routers."""

from fastapi import APIRouter

from curation_service.api.v1 import admin, health, storefront, tracking

api_router = APIRouter()

# Include all routers
api_router.include_router(
    health.router,
    tags=["Health"],
)

api_router.include_router(
    storefront.router,
    tags=["Storefront"],
)

api_router.include_router(
    tracking.router,
    tags=["Tracking"],
)

api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"],
)
