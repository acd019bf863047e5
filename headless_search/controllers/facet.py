"""Facet controller: value counts for one field plus selection intents."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.contracts.search_v1 import (
    FacetRequest,
    FacetSortCriteria,
    FacetValueCount,
    FacetValueState,
)
from headless_search.controllers.base import Controller
from headless_search.engine.actions import ClearFacet, RegisterFacet, ToggleFacetValue
from headless_search.engine.engine import SearchEngine
from headless_search.engine.state import SearchState

DEFAULT_NUMBER_OF_VALUES = 8
# display windows fetched up front; show more grows inside the fetched values
FETCH_WINDOWS = 4


@dataclass(frozen=True)
class FacetState:
    facet_id: str
    label: str
    values: tuple[FacetValueCount, ...]
    has_active_values: bool
    can_show_more_values: bool
    can_show_less_values: bool
    is_loading: bool


def facet_values(state: SearchState, field: str) -> tuple[FacetValueCount, ...]:
    """All values for ``field`` with state derived from canonical selection.

    Selected values the backend did not return come first with a zero count,
    so every selected value stays visible and can be deselected.
    """
    selected = state.selected_values(field)
    reported = state.last_response.facet_counts.get(field, ()) if state.last_response else ()
    reported_values = {v.value for v in reported}
    missing = tuple(
        FacetValueCount(value=v, count=0, state=FacetValueState.SELECTED)
        for v in sorted(selected - reported_values)
    )
    derived = tuple(
        FacetValueCount(
            value=v.value,
            count=v.count,
            state=FacetValueState.SELECTED if v.value in selected else FacetValueState.IDLE,
        )
        for v in reported
    )
    return missing + derived


class FacetController(Controller):
    def __init__(
        self,
        engine: SearchEngine,
        field: str,
        label: str | None = None,
        number_of_values: int = DEFAULT_NUMBER_OF_VALUES,
        sort_criteria: FacetSortCriteria = FacetSortCriteria.OCCURRENCES,
        max_values: int | None = None,
    ):
        if not field or not field.strip():
            raise ValueError("Facet requires a field")
        super().__init__(engine)
        self._field = field.strip()
        self._label = label or self._field.replace("_", " ").title()
        self._number_of_values = max(number_of_values, 1)
        self._display_limit = self._number_of_values
        if max_values is None:
            max_values = self._number_of_values * FETCH_WINDOWS
        self._max_values = max(max_values, self._number_of_values)
        engine.dispatch(
            RegisterFacet(
                FacetRequest(
                    field=self._field,
                    number_of_values=self._max_values,
                    sort_criteria=sort_criteria,
                )
            )
        )

    @property
    def field(self) -> str:
        return self._field

    @property
    def max_values(self) -> int:
        """How many values the backend is asked for."""
        return self._max_values

    @property
    def state(self) -> FacetState:
        s = self._engine.get_state()
        values = facet_values(s, self._field)
        return FacetState(
            facet_id=self._field,
            label=self._label,
            values=values[: self._display_limit],
            has_active_values=bool(s.selected_values(self._field)),
            can_show_more_values=len(values) > self._display_limit,
            can_show_less_values=self._display_limit > self._number_of_values,
            is_loading=s.is_loading,
        )

    def is_value_selected(self, value: str) -> bool:
        return value in self._engine.get_state().selected_values(self._field)

    def toggle_select(self, value: str) -> None:
        self._engine.dispatch(ToggleFacetValue(self._field, value))

    def deselect_all(self) -> None:
        self._engine.dispatch(ClearFacet(self._field))

    def show_more_values(self) -> None:
        if not self.state.can_show_more_values:
            return
        self._display_limit += self._number_of_values
        self._notify_local()

    def show_less_values(self) -> None:
        if self._display_limit == self._number_of_values:
            return
        self._display_limit = self._number_of_values
        self._notify_local()


def build_facet(
    engine: SearchEngine,
    field: str,
    label: str | None = None,
    number_of_values: int = DEFAULT_NUMBER_OF_VALUES,
    sort_criteria: FacetSortCriteria = FacetSortCriteria.OCCURRENCES,
    max_values: int | None = None,
) -> FacetController:
    return FacetController(
        engine,
        field,
        label=label,
        number_of_values=number_of_values,
        sort_criteria=sort_criteria,
        max_values=max_values,
    )
