"""Sort controller."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from headless_search.contracts.search_v1 import DEFAULT_SORT_CRITERIA, SortCriterion
from headless_search.controllers.base import Controller
from headless_search.engine.actions import SetSortCriterion
from headless_search.engine.engine import SearchEngine


@dataclass(frozen=True)
class SortState:
    criterion: SortCriterion
    sort_criteria: tuple[SortCriterion, ...]
    is_loading: bool


class Sort(Controller):
    def __init__(
        self,
        engine: SearchEngine,
        criteria: Sequence[SortCriterion] = DEFAULT_SORT_CRITERIA,
    ):
        super().__init__(engine)
        self._criteria = tuple(criteria)

    @property
    def state(self) -> SortState:
        s = self._engine.get_state()
        return SortState(
            criterion=s.sort_criterion,
            sort_criteria=self._criteria,
            is_loading=s.is_loading,
        )

    def is_sorted_by(self, criterion: SortCriterion) -> bool:
        return self._engine.get_state().sort_criterion == criterion

    def sort_by(self, criterion: SortCriterion) -> None:
        self._engine.dispatch(SetSortCriterion(criterion))


def build_sort(
    engine: SearchEngine, criteria: Sequence[SortCriterion] = DEFAULT_SORT_CRITERIA
) -> Sort:
    return Sort(engine, criteria=criteria)
