"""QuerySummary controller: result range, total count and duration."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.controllers.base import Controller
from headless_search.engine.engine import SearchEngine


@dataclass(frozen=True)
class QuerySummaryState:
    query: str
    total_count: int
    first_result: int
    last_result: int
    duration_ms: float
    has_results: bool
    has_query: bool
    has_error: bool
    is_loading: bool
    first_search_executed: bool

    @property
    def duration_seconds(self) -> float:
        return round(self.duration_ms / 1000, 2)


class QuerySummary(Controller):
    @property
    def state(self) -> QuerySummaryState:
        s = self._engine.get_state()
        response = s.last_response
        request = s.last_request
        shown = len(response.results) if response else 0
        first = request.first_result + 1 if request and shown else 0
        return QuerySummaryState(
            query=s.executed_query,
            total_count=response.total_count if response else 0,
            first_result=first,
            last_result=first + shown - 1 if shown else 0,
            duration_ms=response.duration_ms if response else 0.0,
            has_results=shown > 0,
            has_query=bool(s.executed_query.strip()),
            has_error=s.last_error is not None,
            is_loading=s.is_loading,
            first_search_executed=response is not None,
        )


def build_query_summary(engine: SearchEngine) -> QuerySummary:
    return QuerySummary(engine)
