"""Public engagement tracking endpoint."""

import orjson
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError, field_validator

from curation_service.api.deps import (
    AnalyticsDep,
    RateLimiterDep,
    client_address,
    require_tracking_origin,
)
from curation_service.errors import InvalidEventError

logger = structlog.get_logger()

router = APIRouter()


class TrackRequest(BaseModel):
    """Tracking beacon sent by the storefront widgets."""

    event: str | None = Field(
        None,
        description="view, click, add_to_cart, quiz_start, quiz_complete, quiz_click or quiz_atc",
    )
    handle: str | None = Field(None, description="Product handle for product events")
    title: str | None = Field(None, description="Product title shown in the widget")
    store: str | None = Field(None, description="Store id; unknown ids count for the primary store")

    @field_validator("event", "handle", "title", "store", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str | None:
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return None


class TrackResponse(BaseModel):
    ok: bool = True


@router.post(
    "/track",
    response_model=TrackResponse,
    dependencies=[Depends(require_tracking_origin)],
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": TrackRequest.model_json_schema()}},
        }
    },
)
async def track_event(
    request: Request,
    analytics: AnalyticsDep,
    limiter: RateLimiterDep,
) -> TrackResponse:
    """
    Record a widget engagement event.

    The body is read as JSON whatever the content type, since
    ``navigator.sendBeacon`` posts strings as ``text/plain``.

    Tracking must never break the storefront: once the request has passed
    the origin, event-name and rate-limit checks, any failure while counting
    is logged and the event is dropped, and the response is still ``ok``.
    """
    address = client_address(request)
    try:
        allowed = await limiter.allow(address)
    except Exception as e:
        logger.warning("Rate limiter unavailable, admitting request", error=str(e))
        allowed = True
    if not allowed:
        raise HTTPException(status_code=429, detail="Too many requests")

    try:
        body = TrackRequest.model_validate(orjson.loads(await request.body()))
    except (orjson.JSONDecodeError, ValidationError) as e:
        logger.info("Unreadable tracking payload ignored", error=str(e))
        return TrackResponse()

    try:
        await analytics.record(body.store, body.event or "", handle=body.handle, title=body.title)
    except InvalidEventError:
        raise HTTPException(status_code=400, detail="Invalid event") from None
    except Exception as e:
        logger.warning("Tracking event dropped", event_name=body.event, error=str(e))

    return TrackResponse()
