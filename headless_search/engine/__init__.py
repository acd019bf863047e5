"""State container: canonical search state, actions, reducer and the engine."""

from headless_search.engine.actions import (
    ApplyCorrection,
    ClearFacet,
    ClearRecentQueries,
    ExecuteFirstSearch,
    LogCustomEvent,
    OpenResult,
    RegisterFacet,
    RequestFailed,
    ResponseArrived,
    SetPage,
    SetPageSize,
    SetQueryText,
    SetSortCriterion,
    SubmitQuery,
    SuggestionsArrived,
    ToggleFacetValue,
)
from headless_search.engine.engine import SearchEngine, build_search_engine
from headless_search.engine.reducer import Transition, reduce
from headless_search.engine.state import SearchState

__all__ = [
    "ApplyCorrection",
    "ClearFacet",
    "ClearRecentQueries",
    "ExecuteFirstSearch",
    "LogCustomEvent",
    "OpenResult",
    "RegisterFacet",
    "RequestFailed",
    "ResponseArrived",
    "SearchEngine",
    "SearchState",
    "SetPage",
    "SetPageSize",
    "SetQueryText",
    "SetSortCriterion",
    "SubmitQuery",
    "SuggestionsArrived",
    "ToggleFacetValue",
    "Transition",
    "build_search_engine",
    "reduce",
]
