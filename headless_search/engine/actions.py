"""Action records: immutable intents consumed exactly once by the engine."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.analytics.events import AnalyticsEvent
from headless_search.contracts.search_v1 import (
    FacetRequest,
    QuerySuggestion,
    Result,
    SearchResponse,
    SortCriterion,
)
from headless_search.core.errors import ErrorKind


@dataclass(frozen=True)
class SetQueryText:
    text: str


@dataclass(frozen=True)
class SubmitQuery:
    pass


@dataclass(frozen=True)
class ExecuteFirstSearch:
    pass


@dataclass(frozen=True)
class ToggleFacetValue:
    field: str
    value: str


@dataclass(frozen=True)
class ClearFacet:
    field: str


@dataclass(frozen=True)
class RegisterFacet:
    facet: FacetRequest


@dataclass(frozen=True)
class SetSortCriterion:
    criterion: SortCriterion


@dataclass(frozen=True)
class SetPage:
    page_index: int


@dataclass(frozen=True)
class SetPageSize:
    page_size: int


@dataclass(frozen=True)
class ApplyCorrection:
    pass


@dataclass(frozen=True)
class OpenResult:
    result: Result


@dataclass(frozen=True)
class LogCustomEvent:
    event: AnalyticsEvent


@dataclass(frozen=True)
class ClearRecentQueries:
    pass


@dataclass(frozen=True)
class ResponseArrived:
    sequence: int
    response: SearchResponse


@dataclass(frozen=True)
class RequestFailed:
    sequence: int
    error: ErrorKind
    message: str = ""


@dataclass(frozen=True)
class SuggestionsArrived:
    token: int
    suggestions: tuple[QuerySuggestion, ...]


Action = (
    SetQueryText
    | SubmitQuery
    | ExecuteFirstSearch
    | ToggleFacetValue
    | ClearFacet
    | RegisterFacet
    | SetSortCriterion
    | SetPage
    | SetPageSize
    | ApplyCorrection
    | OpenResult
    | LogCustomEvent
    | ClearRecentQueries
    | ResponseArrived
    | RequestFailed
    | SuggestionsArrived
)
