"""SearchBox controller: query text, submission, suggestions, recent queries."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.controllers.base import Controller
from headless_search.engine.actions import ClearRecentQueries, SetQueryText, SubmitQuery
from headless_search.engine.engine import SearchEngine


@dataclass(frozen=True)
class Suggestion:
    raw_value: str
    highlighted_value: str


@dataclass(frozen=True)
class SearchBoxState:
    value: str
    suggestions: tuple[Suggestion, ...]
    recent_queries: tuple[str, ...]
    is_loading: bool


class SearchBox(Controller):
    """Typing updates text only; ``submit`` runs the search.

    Every text change mints a new suggestion token in the engine; only the
    completions fetched for the latest token are ever shown.
    """

    def __init__(self, engine: SearchEngine, number_of_suggestions: int | None = None):
        super().__init__(engine)
        limit = engine.config.number_of_suggestions
        if number_of_suggestions is not None:
            limit = min(max(number_of_suggestions, 0), limit)
        self._number_of_suggestions = limit

    @property
    def state(self) -> SearchBoxState:
        s = self._engine.get_state()
        suggestions = tuple(
            Suggestion(raw_value=q.expression, highlighted_value=q.highlighted or q.expression)
            for q in s.suggestions[: self._number_of_suggestions]
        )
        return SearchBoxState(
            value=s.query_text,
            suggestions=suggestions,
            recent_queries=s.recent_queries,
            is_loading=s.is_loading,
        )

    def update_text(self, text: str) -> None:
        self._engine.dispatch(SetQueryText(text))

    def clear(self) -> None:
        self._engine.dispatch(SetQueryText(""))

    def submit(self) -> None:
        self._engine.dispatch(SubmitQuery())

    def select_suggestion(self, value: str) -> None:
        self._engine.dispatch(SetQueryText(value))
        self._engine.dispatch(SubmitQuery())

    def clear_recent_queries(self) -> None:
        self._engine.dispatch(ClearRecentQueries())


def build_search_box(
    engine: SearchEngine, number_of_suggestions: int | None = None
) -> SearchBox:
    return SearchBox(engine, number_of_suggestions=number_of_suggestions)
