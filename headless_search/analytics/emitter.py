"""Analytics emitter: hands event records to an external sink, best-effort.

Emission runs synchronously right after the engine commits the state
transition that produced the event. A sink that raises is logged and
ignored; it never blocks or rolls back the transition.
"""

import logging
from collections import deque
from collections.abc import Callable
from typing import Any, TypedDict

from headless_search.analytics.events import AnalyticsEvent
from headless_search.core.logger import logger as search_logger

logger = logging.getLogger(__name__)


class AnalyticsRecord(TypedDict):
    eventType: str
    fields: dict[str, Any]


AnalyticsSink = Callable[[AnalyticsRecord], None]


class LoggingAnalyticsSink:
    """Default sink: writes each record to the module logger."""

    def __call__(self, record: AnalyticsRecord) -> None:
        logger.info("Analytics: %s %s", record["eventType"], record["fields"])


class BufferedAnalyticsSink:
    """Keeps the most recent records in memory for a delivery loop to drain."""

    def __init__(self, max_records: int = 1000):
        self._records: deque[AnalyticsRecord] = deque(maxlen=max_records)

    def __call__(self, record: AnalyticsRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def drain(self) -> list[AnalyticsRecord]:
        records = list(self._records)
        self._records.clear()
        return records


class AnalyticsEmitter:
    """Stamps events with the search context and forwards them to a sink."""

    def __init__(
        self,
        sink: AnalyticsSink | None = None,
        *,
        enabled: bool = True,
        search_hub: str = "",
        pipeline: str = "",
        origin_context: str = "Search",
    ):
        self._sink = sink if sink is not None else LoggingAnalyticsSink()
        self.enabled = enabled
        self._context: dict[str, Any] = {
            "searchHub": search_hub,
            "originContext": origin_context,
            "originLevel2": search_hub,
        }
        if pipeline:
            self._context["pipeline"] = pipeline

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def emit(self, event: AnalyticsEvent) -> None:
        if not self.enabled:
            return
        record: AnalyticsRecord = {
            "eventType": event.event_type.value,
            "fields": {**self._context, **event.fields},
        }
        try:
            self._sink(record)
        except Exception as e:
            logger.warning("Analytics sink failed for %s event: %s", record["eventType"], e)
            return
        search_logger.analytics_event(record["eventType"], record["fields"])
