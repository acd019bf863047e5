"""Analytics helpers for UI code: document opens, custom events, context."""

from typing import Any

from headless_search.analytics.events import custom_event
from headless_search.contracts.search_v1 import Result
from headless_search.engine.actions import LogCustomEvent, OpenResult
from headless_search.engine.engine import SearchEngine


def log_document_open(engine: SearchEngine, result: Result) -> None:
    """Log a click on a result. Its rank travels with the result."""
    engine.dispatch(OpenResult(result))


def log_custom_event(
    engine: SearchEngine,
    event_type: str,
    event_value: str,
    metadata: dict[str, str | int | float | bool] | None = None,
) -> None:
    """Application-specific event, e.g. ('resultAction', 'addToFavorites')."""
    engine.dispatch(LogCustomEvent(custom_event(event_type, event_value, metadata)))


def analytics_context(engine: SearchEngine) -> dict[str, Any]:
    state = engine.get_state()
    response = state.last_response
    return {
        "searchHub": engine.config.search_hub,
        "pipeline": engine.config.pipeline or None,
        "lastQuery": state.executed_query if state.last_request else None,
        "totalResults": response.total_count if response else None,
        "searchDuration": response.duration_ms if response else None,
    }
