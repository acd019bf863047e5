"""Pure reducer step: (state, action) -> Transition.

The reducer never performs I/O. It returns the next state plus the effects
the engine must run after committing it: at most one search request
snapshot, at most one suggestion fetch, and the analytics events to emit.
Folding ``reduce`` over a sequence of actions reproduces the engine's state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from headless_search.analytics.events import (
    AnalyticsEvent,
    click_event,
    correction_event,
    facet_clear_event,
    facet_event,
    search_event,
)
from headless_search.contracts.search_v1 import (
    QUERY_SUBMISSION_CAUSES,
    FacetValueState,
    SearchCause,
    SearchRequest,
)
from headless_search.engine.actions import (
    Action,
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
from headless_search.engine.state import SearchState, freeze_facets


@dataclass(frozen=True)
class Transition:
    state: SearchState
    changed: bool = False
    request: SearchRequest | None = None
    suggest: tuple[int, str] | None = None
    events: tuple[AnalyticsEvent, ...] = ()
    stale: bool = False


def _unchanged(state: SearchState, *events: AnalyticsEvent) -> Transition:
    return Transition(state=state, events=tuple(events))


def build_request(state: SearchState, cause: SearchCause) -> SearchRequest:
    """Snapshot of the current canonical state for the transport."""
    return SearchRequest(
        query_text=state.query_text,
        selected_facets={k: tuple(sorted(v)) for k, v in sorted(state.selected_facets.items())},
        facets=tuple(state.facet_requests[k] for k in sorted(state.facet_requests)),
        sort_criterion=state.sort_criterion,
        page_index=state.page_index,
        page_size=state.page_size,
        pipeline_id=state.pipeline or None,
        search_hub_id=state.search_hub or None,
        fields_to_include=state.fields_to_include,
        cause=cause,
    )


def _refetch(
    state: SearchState, cause: SearchCause, *events: AnalyticsEvent
) -> Transition:
    sequence = state.request_sequence + 1
    request = build_request(state, cause)
    state = replace(
        state,
        request_sequence=sequence,
        pending_request_id=sequence,
        pending_request=request,
    )
    return Transition(state=state, changed=True, request=request, events=tuple(events))


def remember_query(recent: tuple[str, ...], text: str, limit: int) -> tuple[str, ...]:
    """Most-recent-first, de-duplicated by exact text, capped at ``limit``."""
    if not text or limit <= 0:
        return recent
    return ((text,) + tuple(q for q in recent if q != text))[:limit]


def _facet_value_exists(state: SearchState, field: str, value: str) -> bool:
    # Facets the backend has not reported yet accept any value.
    if state.last_response is None or field not in state.last_response.facet_counts:
        return True
    return any(v.value == value for v in state.last_response.facet_counts[field])


def _set_query_text(state: SearchState, action: SetQueryText) -> Transition:
    if action.text == state.query_text:
        return _unchanged(state)
    token = state.suggestion_token + 1
    if action.text.strip():
        state = replace(state, query_text=action.text, suggestion_token=token)
        return Transition(state=state, changed=True, suggest=(token, action.text))
    state = replace(
        state, query_text=action.text, suggestion_token=token, suggestions=(), suggestions_for=""
    )
    return Transition(state=state, changed=True)


def _submit(state: SearchState, cause: SearchCause) -> Transition:
    recent = state.recent_queries
    if cause == SearchCause.SEARCHBOX_SUBMIT:
        recent = remember_query(recent, state.query_text.strip(), state.recent_queries_max)
    state = replace(
        state,
        page_index=0,
        recent_queries=recent,
        suggestion_token=state.suggestion_token + 1,
        suggestions=(),
        suggestions_for="",
    )
    return _refetch(state, cause)


def _toggle_facet_value(state: SearchState, action: ToggleFacetValue) -> Transition:
    if not action.field or not action.value:
        return _unchanged(state)
    current = state.selected_values(action.field)
    if action.value in current:
        values = current - {action.value}
        new_state = FacetValueState.IDLE
        cause = SearchCause.FACET_DESELECT
    else:
        if not _facet_value_exists(state, action.field, action.value):
            return _unchanged(state)
        values = current | {action.value}
        new_state = FacetValueState.SELECTED
        cause = SearchCause.FACET_SELECT
    facets = dict(state.selected_facets)
    facets[action.field] = values
    state = replace(state, selected_facets=freeze_facets(facets), page_index=0)
    return _refetch(state, cause, facet_event(action.field, action.value, new_state))


def _clear_facet(state: SearchState, action: ClearFacet) -> Transition:
    if not state.selected_values(action.field):
        return _unchanged(state)
    facets = {k: v for k, v in state.selected_facets.items() if k != action.field}
    state = replace(state, selected_facets=freeze_facets(facets), page_index=0)
    return _refetch(state, SearchCause.FACET_CLEAR_ALL, facet_clear_event(action.field))


def _register_facet(state: SearchState, action: RegisterFacet) -> Transition:
    facet = action.facet
    if state.facet_requests.get(facet.field) == facet:
        return _unchanged(state)
    requests = dict(state.facet_requests)
    requests[facet.field] = facet
    return Transition(
        state=replace(state, facet_requests=MappingProxyType(requests)), changed=True
    )


def _set_page(state: SearchState, action: SetPage) -> Transition:
    page = min(max(action.page_index, 0), state.max_page_index)
    if page == state.page_index:
        return _unchanged(state)
    return _refetch(replace(state, page_index=page), SearchCause.PAGER_NUMBER)


def _set_page_size(state: SearchState, action: SetPageSize) -> Transition:
    if action.page_size < 1 or action.page_size == state.page_size:
        return _unchanged(state)
    state = replace(state, page_size=action.page_size, page_index=0)
    return _refetch(state, SearchCause.RESULTS_PER_PAGE)


def _apply_correction(state: SearchState) -> Transition:
    correction = state.last_response.correction if state.last_response else None
    if correction is None or correction.was_automatically_applied:
        return _unchanged(state)
    searched = state.pending_request or state.last_request
    if searched is not None and searched.query_text == correction.corrected_query:
        return _unchanged(state)
    original = correction.original_query or state.executed_query
    state = replace(
        state,
        query_text=correction.corrected_query,
        page_index=0,
        suggestion_token=state.suggestion_token + 1,
        suggestions=(),
        suggestions_for="",
    )
    return _refetch(
        state,
        SearchCause.DID_YOU_MEAN_CLICK,
        correction_event(original, correction.corrected_query),
    )


def _response_arrived(state: SearchState, action: ResponseArrived) -> Transition:
    if action.sequence != state.pending_request_id:
        return Transition(state=state, stale=True)
    request = state.pending_request
    events: tuple[AnalyticsEvent, ...] = ()
    if request is not None and request.cause in QUERY_SUBMISSION_CAUSES:
        events = (search_event(request, action.response),)
    state = replace(
        state,
        last_response=action.response,
        last_request=request,
        pending_request_id=None,
        pending_request=None,
        last_error=None,
        last_error_message="",
    )
    return Transition(state=state, changed=True, events=events)


def _request_failed(state: SearchState, action: RequestFailed) -> Transition:
    if action.sequence != state.pending_request_id:
        return Transition(state=state, stale=True)
    state = replace(
        state,
        pending_request_id=None,
        pending_request=None,
        last_error=action.error,
        last_error_message=action.message,
    )
    return Transition(state=state, changed=True)


def _suggestions_arrived(state: SearchState, action: SuggestionsArrived) -> Transition:
    if action.token != state.suggestion_token:
        return Transition(state=state, stale=True)
    if action.suggestions == state.suggestions and state.suggestions_for == state.query_text:
        return _unchanged(state)
    state = replace(state, suggestions=action.suggestions, suggestions_for=state.query_text)
    return Transition(state=state, changed=True)


def _set_sort_criterion(state: SearchState, action: SetSortCriterion) -> Transition:
    if action.criterion == state.sort_criterion:
        return _unchanged(state)
    state = replace(state, sort_criterion=action.criterion, page_index=0)
    return _refetch(state, SearchCause.SORT_RESULTS)


def _open_result(state: SearchState, action: OpenResult) -> Transition:
    response_id = state.last_response.response_id if state.last_response else ""
    return _unchanged(state, click_event(action.result, state.executed_query, response_id))


def _clear_recent_queries(state: SearchState, action: ClearRecentQueries) -> Transition:
    if not state.recent_queries:
        return _unchanged(state)
    return Transition(state=replace(state, recent_queries=()), changed=True)


_HANDLERS: dict[type, Callable[[SearchState, Any], Transition]] = {
    SetQueryText: _set_query_text,
    SubmitQuery: lambda state, _: _submit(state, SearchCause.SEARCHBOX_SUBMIT),
    ExecuteFirstSearch: lambda state, _: _submit(state, SearchCause.INTERFACE_LOAD),
    ToggleFacetValue: _toggle_facet_value,
    ClearFacet: _clear_facet,
    RegisterFacet: _register_facet,
    SetSortCriterion: _set_sort_criterion,
    SetPage: _set_page,
    SetPageSize: _set_page_size,
    ApplyCorrection: lambda state, _: _apply_correction(state),
    OpenResult: _open_result,
    LogCustomEvent: lambda state, action: _unchanged(state, action.event),
    ClearRecentQueries: _clear_recent_queries,
    ResponseArrived: _response_arrived,
    RequestFailed: _request_failed,
    SuggestionsArrived: _suggestions_arrived,
}


def reduce(state: SearchState, action: Action) -> Transition:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action)
