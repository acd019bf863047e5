"""Canonical search state. Owned by the engine, replaced (never mutated) per action."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from headless_search.contracts.search_v1 import (
    FacetRequest,
    QuerySuggestion,
    SearchRequest,
    SearchResponse,
    SortCriterion,
    relevance_sort,
)
from headless_search.core.errors import ErrorKind


def _empty() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class SearchState:
    query_text: str = ""
    selected_facets: Mapping[str, frozenset[str]] = field(default_factory=_empty)
    sort_criterion: SortCriterion = field(default_factory=relevance_sort)
    page_index: int = 0
    page_size: int = 10
    last_response: SearchResponse | None = None
    request_sequence: int = 0
    pending_request_id: int | None = None
    last_error: ErrorKind | None = None
    last_error_message: str = ""
    pending_request: SearchRequest | None = None
    last_request: SearchRequest | None = None
    facet_requests: Mapping[str, FacetRequest] = field(default_factory=_empty)
    recent_queries: tuple[str, ...] = ()
    recent_queries_max: int = 10
    suggestion_token: int = 0
    suggestions: tuple[QuerySuggestion, ...] = ()
    suggestions_for: str = ""
    search_hub: str = ""
    pipeline: str = ""
    fields_to_include: tuple[str, ...] = ()

    @property
    def is_loading(self) -> bool:
        return self.pending_request_id is not None

    @property
    def executed_query(self) -> str:
        """Query text of the request that produced ``last_response``."""
        return self.last_request.query_text if self.last_request else ""

    @property
    def total_count(self) -> int:
        return self.last_response.total_count if self.last_response else 0

    @property
    def page_count(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size > 0 else 0

    @property
    def max_page_index(self) -> int:
        return max(self.page_count - 1, 0)

    def selected_values(self, field_id: str) -> frozenset[str]:
        return self.selected_facets.get(field_id, frozenset())


def freeze_facets(facets: Mapping[str, frozenset[str]]) -> Mapping[str, frozenset[str]]:
    """Read-only facet mapping without empty selections."""
    return MappingProxyType({k: frozenset(v) for k, v in facets.items() if v})
