"""Search contract v1: shared types for requests, responses and suggestions."""

from headless_search.contracts.search_v1 import (
    Correction,
    FacetRequest,
    FacetValueCount,
    FacetValueState,
    QuerySuggestion,
    Result,
    SearchCause,
    SearchRequest,
    SearchResponse,
    SortCriterion,
    SortOrder,
    SuggestRequest,
)

__all__ = [
    "Correction",
    "FacetRequest",
    "FacetValueCount",
    "FacetValueState",
    "QuerySuggestion",
    "Result",
    "SearchCause",
    "SearchRequest",
    "SearchResponse",
    "SortCriterion",
    "SortOrder",
    "SuggestRequest",
]
