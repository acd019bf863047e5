"""Pager controller: page navigation clamped to the valid page range."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.controllers.base import Controller
from headless_search.engine.actions import SetPage
from headless_search.engine.engine import SearchEngine

DEFAULT_NUMBER_OF_PAGES = 5


@dataclass(frozen=True)
class PagerState:
    current_page: int
    current_pages: tuple[int, ...]
    max_page: int
    page_count: int
    has_previous_page: bool
    has_next_page: bool


def page_window(current: int, page_count: int, size: int) -> tuple[int, ...]:
    """Up to ``size`` consecutive 0-based page indices centred on ``current``.

    The window is shifted (not truncated) at either end of the range, so it
    never holds out-of-range or duplicate indices.
    """
    if page_count <= 0 or size <= 0:
        return ()
    size = min(size, page_count)
    current = min(max(current, 0), page_count - 1)
    start = current - size // 2
    start = min(max(start, 0), page_count - size)
    return tuple(range(start, start + size))


class Pager(Controller):
    def __init__(self, engine: SearchEngine, number_of_pages: int = DEFAULT_NUMBER_OF_PAGES):
        super().__init__(engine)
        self._number_of_pages = max(number_of_pages, 1)

    @property
    def state(self) -> PagerState:
        s = self._engine.get_state()
        return PagerState(
            current_page=s.page_index,
            current_pages=page_window(s.page_index, s.page_count, self._number_of_pages),
            max_page=s.max_page_index,
            page_count=s.page_count,
            has_previous_page=s.page_index > 0,
            has_next_page=s.page_index < s.max_page_index,
        )

    def is_current_page(self, page: int) -> bool:
        return page == self._engine.get_state().page_index

    def select_page(self, page: int) -> None:
        s = self._engine.get_state()
        page = min(max(page, 0), s.max_page_index)
        if page == s.page_index:
            return
        self._engine.dispatch(SetPage(page))

    def next_page(self) -> None:
        s = self._engine.get_state()
        if s.page_index >= s.max_page_index:
            return
        self.select_page(s.page_index + 1)

    def previous_page(self) -> None:
        s = self._engine.get_state()
        if s.page_index <= 0:
            return
        self.select_page(s.page_index - 1)


def build_pager(engine: SearchEngine, number_of_pages: int = DEFAULT_NUMBER_OF_PAGES) -> Pager:
    return Pager(engine, number_of_pages=number_of_pages)
