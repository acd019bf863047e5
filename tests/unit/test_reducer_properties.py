from __future__ import annotations

import asyncio

import pytest
from conftest import FakeTransport, make_response
from hypothesis import given, settings
from hypothesis import strategies as st

from headless_search.analytics.emitter import AnalyticsEmitter
from headless_search.contracts.search_v1 import DEFAULT_SORT_CRITERIA, Correction
from headless_search.core.config import Config
from headless_search.core.errors import ErrorKind
from headless_search.engine.actions import (
    ApplyCorrection,
    ClearFacet,
    RequestFailed,
    ResponseArrived,
    SetPage,
    SetQueryText,
    SetSortCriterion,
    SubmitQuery,
    ToggleFacetValue,
)
from headless_search.engine.engine import SearchEngine
from headless_search.engine.reducer import reduce
from headless_search.engine.state import SearchState

CONFIG = Config.load().replace(
    organization_id="prop-org",
    api_key="prop-key",
    log_to_file=False,
    page_size=10,
    recent_queries_max=4,
    number_of_suggestions=0,
)

FIELDS = ["filetype", "author"]
VALUES = ["pdf", "doc", "ada", "bob"]

RESPONSES = [
    make_response(total=0),
    make_response(total=35, facets={"filetype": [("pdf", 20), ("doc", 15)]}),
    make_response(
        total=12,
        facets={"author": [("ada", 7), ("bob", 5)]},
        correction=Correction(corrected_query="coffee", original_query="cofee"),
    ),
]


def action_strategy():
    return st.one_of(
        st.builds(SetQueryText, st.sampled_from(["", "cofee", "coffee", "tea", "a b"])),
        st.just(SubmitQuery()),
        st.builds(ToggleFacetValue, st.sampled_from(FIELDS), st.sampled_from(VALUES)),
        st.builds(ClearFacet, st.sampled_from(FIELDS)),
        st.builds(SetPage, st.integers(min_value=-2, max_value=6)),
        st.builds(SetSortCriterion, st.sampled_from(DEFAULT_SORT_CRITERIA)),
        st.just(ApplyCorrection()),
        st.builds(
            ResponseArrived,
            st.integers(min_value=0, max_value=8),
            st.sampled_from(RESPONSES),
        ),
        st.builds(
            RequestFailed,
            st.integers(min_value=0, max_value=8),
            st.sampled_from(list(ErrorKind)),
        ),
    )


def _fold(actions) -> SearchState:
    state = SearchState(
        page_size=CONFIG.page_size,
        recent_queries_max=CONFIG.recent_queries_max,
        search_hub=CONFIG.search_hub,
        pipeline=CONFIG.pipeline,
        fields_to_include=CONFIG.fields_to_include,
    )
    for action in actions:
        state = reduce(state, action).state
    return state


@pytest.mark.property
@given(st.lists(action_strategy(), max_size=30))
def test_sequence_is_strictly_increasing(actions):
    state = SearchState(recent_queries_max=CONFIG.recent_queries_max)
    for action in actions:
        t = reduce(state, action)
        if t.request is not None:
            assert t.state.request_sequence == state.request_sequence + 1
            assert t.state.pending_request_id == t.state.request_sequence
        else:
            assert t.state.request_sequence == state.request_sequence
        state = t.state


@pytest.mark.property
@given(st.lists(action_strategy(), max_size=30))
def test_stale_transitions_leave_state_untouched(actions):
    state = SearchState()
    for action in actions:
        t = reduce(state, action)
        if t.stale:
            assert t.state is state
            assert t.changed is False
            assert t.request is None
        state = t.state


@pytest.mark.property
@given(st.lists(action_strategy(), max_size=30))
def test_page_and_recent_queries_stay_bounded(actions):
    state = _fold(actions)
    assert state.page_index >= 0
    assert len(state.recent_queries) <= CONFIG.recent_queries_max
    assert len(set(state.recent_queries)) == len(state.recent_queries)
    assert all(values for values in state.selected_facets.values())


@pytest.mark.property
@settings(max_examples=40, deadline=None)
@given(st.lists(action_strategy(), max_size=20))
def test_engine_state_equals_left_fold(actions):
    async def run() -> SearchState:
        engine = SearchEngine(CONFIG, FakeTransport(), AnalyticsEmitter(enabled=False))
        try:
            for action in actions:
                engine.dispatch(action)
            return engine.get_state()
        finally:
            await engine.close()

    assert asyncio.run(run()) == _fold(actions)
