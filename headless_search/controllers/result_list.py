"""ResultList controller: the ranked results of the last merged response."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.contracts.search_v1 import Result
from headless_search.controllers.base import Controller
from headless_search.core.errors import ErrorKind
from headless_search.engine.engine import SearchEngine


@dataclass(frozen=True)
class ResultListState:
    results: tuple[Result, ...]
    is_loading: bool
    error: ErrorKind | None
    error_message: str
    search_response_id: str
    first_search_executed: bool
    more_results_available: bool

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def needs_configuration(self) -> bool:
        """Credentials were rejected; the UI should point at configuration."""
        return self.error == ErrorKind.AUTH


class ResultList(Controller):
    @property
    def state(self) -> ResultListState:
        s = self._engine.get_state()
        response = s.last_response
        request = s.last_request
        shown_until = (request.first_result if request else 0) + (
            len(response.results) if response else 0
        )
        return ResultListState(
            results=response.results if response else (),
            is_loading=s.is_loading,
            error=s.last_error,
            error_message=s.last_error_message,
            search_response_id=response.response_id if response else "",
            first_search_executed=response is not None,
            more_results_available=response is not None and response.total_count > shown_until,
        )


def build_result_list(engine: SearchEngine) -> ResultList:
    return ResultList(engine)
