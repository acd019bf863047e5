"""Analytics emitter: event taxonomy, sinks and UI helpers."""

from headless_search.analytics.emitter import (
    AnalyticsEmitter,
    AnalyticsRecord,
    BufferedAnalyticsSink,
    LoggingAnalyticsSink,
)
from headless_search.analytics.events import AnalyticsEvent, AnalyticsEventType

__all__ = [
    "AnalyticsEmitter",
    "AnalyticsEvent",
    "AnalyticsEventType",
    "AnalyticsRecord",
    "BufferedAnalyticsSink",
    "LoggingAnalyticsSink",
]
