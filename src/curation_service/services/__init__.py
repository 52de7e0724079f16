"""Business logic services."""

from curation_service.services.analytics import AnalyticsAggregator, TrackingEvent
from curation_service.services.catalog import CatalogStore, ProductListStore
from curation_service.services.quiz import QuizCatalogStore
from curation_service.services.rate_limit import RateLimiter

__all__ = [
    "AnalyticsAggregator",
    "CatalogStore",
    "ProductListStore",
    "QuizCatalogStore",
    "RateLimiter",
    "TrackingEvent",
]
