"""Engagement counters for the recommendations widget and the quiz.

Every event is counted twice: once in the lifetime scope and once in the
current UTC day's scope. The KV commands of one event are issued together
and are not atomic as a group.
"""

import asyncio
from collections.abc import Callable
from datetime import date, datetime, timezone
from enum import Enum

import structlog

from curation_service.errors import InvalidEventError
from curation_service.infrastructure.kv import KeyValueStore
from curation_service.models import ProductStats, QuizStatsSummary, StatsSummary
from curation_service.stores import StoreConfig, StoreRegistry
from shared.constants import HANDLE_MAX_LENGTH, STRIPPED_CHARACTERS, TITLE_MAX_LENGTH

logger = structlog.get_logger()

_STRIP_TABLE = str.maketrans("", "", STRIPPED_CHARACTERS)


class TrackingEvent(str, Enum):
    """Events accepted by the tracking endpoint."""

    VIEW = "view"
    CLICK = "click"
    ADD_TO_CART = "add_to_cart"
    QUIZ_START = "quiz_start"
    QUIZ_COMPLETE = "quiz_complete"
    QUIZ_CLICK = "quiz_click"
    QUIZ_ATC = "quiz_atc"


class Counter(str, Enum):
    """Key suffixes under a store's stats prefix."""

    VIEWS = "views"
    CLICKS = "clicks"
    ADD_TO_CART = "add_to_cart"
    PRODUCT_CLICKS = "product_clicks"
    PRODUCT_ATC = "product_atc"
    PRODUCT_TITLES = "product_titles"
    QUIZ_STARTS = "quiz:starts"
    QUIZ_COMPLETIONS = "quiz:completions"
    QUIZ_PRODUCT_CLICKS = "quiz:product_clicks"
    QUIZ_PRODUCT_ATC = "quiz:product_atc"
    QUIZ_PRODUCT_TITLES = "quiz:product_titles"


# event -> (scalar counter, per-product hash, title hash)
EVENT_COUNTERS: dict[TrackingEvent, tuple[Counter | None, Counter | None, Counter | None]] = {
    TrackingEvent.VIEW: (Counter.VIEWS, None, None),
    TrackingEvent.CLICK: (Counter.CLICKS, Counter.PRODUCT_CLICKS, Counter.PRODUCT_TITLES),
    TrackingEvent.ADD_TO_CART: (Counter.ADD_TO_CART, Counter.PRODUCT_ATC, Counter.PRODUCT_TITLES),
    TrackingEvent.QUIZ_START: (Counter.QUIZ_STARTS, None, None),
    TrackingEvent.QUIZ_COMPLETE: (Counter.QUIZ_COMPLETIONS, None, None),
    TrackingEvent.QUIZ_CLICK: (None, Counter.QUIZ_PRODUCT_CLICKS, Counter.QUIZ_PRODUCT_TITLES),
    TrackingEvent.QUIZ_ATC: (None, Counter.QUIZ_PRODUCT_ATC, Counter.QUIZ_PRODUCT_TITLES),
}


def sanitize(value: object, max_length: int) -> str | None:
    """Truncate and strip markup-sensitive characters from untrusted input."""
    if value is None or value == "":
        return None
    cleaned = str(value)[:max_length].translate(_STRIP_TABLE)
    return cleaned or None


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def completion_rate(starts: int, completions: int) -> str:
    """Percentage of started quizzes that were completed, one decimal place."""
    if starts <= 0:
        return "0"
    return f"{completions / starts * 100:.1f}"


def stats_key(prefix: str, counter: Counter, day: date | None = None) -> str:
    """KV key of a counter in the lifetime scope, or in one day's scope."""
    if day is None:
        return f"{prefix}:{counter.value}"
    return f"{prefix}:daily:{day.isoformat()}:{counter.value}"


def _to_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0


def join_product_stats(
    clicks: dict[str, str], atc: dict[str, str], titles: dict[str, str]
) -> list[ProductStats]:
    """Join per-product hashes into rows sorted by clicks, highest first."""
    handles = list(dict.fromkeys([*clicks, *atc]))
    rows = [
        ProductStats(
            handle=handle,
            title=titles.get(handle) or handle,
            clicks=_to_int(clicks.get(handle)),
            add_to_cart=_to_int(atc.get(handle)),
        )
        for handle in handles
    ]
    rows.sort(key=lambda row: row.clicks, reverse=True)
    return rows


class AnalyticsAggregator:
    """Records engagement events and reads back aggregated counters."""

    def __init__(
        self,
        kv: KeyValueStore,
        registry: StoreRegistry,
        today: Callable[[], date] = utc_today,
    ):
        self.kv = kv
        self.registry = registry
        self.today = today

    async def record(
        self,
        store_id: str | None,
        event: str,
        handle: str | None = None,
        title: str | None = None,
    ) -> bool:
        """
        Record one engagement event.

        Unknown store ids are counted under the primary store. Product events
        without a handle are ignored.

        Returns:
            True when counters were written, False when the event was ignored

        Raises:
            InvalidEventError: if ``event`` is not a known tracking event
        """
        try:
            tracking_event = TrackingEvent(event)
        except ValueError:
            raise InvalidEventError(str(event)) from None

        store = self.registry.resolve(store_id)
        safe_handle = sanitize(handle, HANDLE_MAX_LENGTH)
        safe_title = sanitize(title, TITLE_MAX_LENGTH)

        counter, product_hash, title_hash = EVENT_COUNTERS[tracking_event]
        if product_hash is not None and not safe_handle:
            logger.debug("Ignoring product event without handle", event=event, store=store.id)
            return False

        ops = []
        for day in (None, self.today()):
            if counter is not None:
                ops.append(self.kv.incr(stats_key(store.stats_prefix, counter, day)))
            if product_hash is not None:
                ops.append(self.kv.hincrby(stats_key(store.stats_prefix, product_hash, day), safe_handle, 1))
                ops.append(
                    self.kv.hset(
                        stats_key(store.stats_prefix, title_hash, day),
                        safe_handle,
                        safe_title or safe_handle,
                    )
                )
        await asyncio.gather(*ops)
        return True

    async def _counters(self, store: StoreConfig, day: date | None, *counters: Counter) -> list[int]:
        values = await asyncio.gather(
            *(self.kv.get(stats_key(store.stats_prefix, c, day)) for c in counters)
        )
        return [_to_int(v) for v in values]

    async def _hashes(
        self, store: StoreConfig, day: date | None, *counters: Counter
    ) -> list[dict[str, str]]:
        return list(
            await asyncio.gather(
                *(self.kv.hgetall(stats_key(store.stats_prefix, c, day)) for c in counters)
            )
        )

    async def read_stats(self, store_id: str, day: date | None = None) -> StatsSummary:
        """Widget funnel counters, lifetime unless ``day`` is given."""
        store = self.registry.get(store_id)
        (views, clicks, add_to_cart), (product_clicks, product_atc, titles) = await asyncio.gather(
            self._counters(store, day, Counter.VIEWS, Counter.CLICKS, Counter.ADD_TO_CART),
            self._hashes(store, day, Counter.PRODUCT_CLICKS, Counter.PRODUCT_ATC, Counter.PRODUCT_TITLES),
        )
        return StatsSummary(
            views=views,
            clicks=clicks,
            add_to_cart=add_to_cart,
            products=join_product_stats(product_clicks, product_atc, titles),
            day=day.isoformat() if day else None,
        )

    async def read_quiz_stats(self, store_id: str, day: date | None = None) -> QuizStatsSummary:
        """Quiz funnel counters, lifetime unless ``day`` is given."""
        store = self.registry.get(store_id)
        (starts, completions), (product_clicks, product_atc, titles) = await asyncio.gather(
            self._counters(store, day, Counter.QUIZ_STARTS, Counter.QUIZ_COMPLETIONS),
            self._hashes(
                store,
                day,
                Counter.QUIZ_PRODUCT_CLICKS,
                Counter.QUIZ_PRODUCT_ATC,
                Counter.QUIZ_PRODUCT_TITLES,
            ),
        )
        return QuizStatsSummary(
            starts=starts,
            completions=completions,
            completion_rate=completion_rate(starts, completions),
            products=join_product_stats(product_clicks, product_atc, titles),
            day=day.isoformat() if day else None,
        )
