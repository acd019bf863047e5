from unittest.mock import MagicMock

import pytest
from conftest import FakeTransport, make_response

from headless_search.analytics.emitter import AnalyticsEmitter, BufferedAnalyticsSink
from headless_search.contracts.search_v1 import QuerySuggestion, SearchCause
from headless_search.core.errors import (
    AuthError,
    ConfigurationError,
    ErrorKind,
    NetworkError,
)
from headless_search.engine import build_search_engine
from headless_search.engine.actions import (
    ExecuteFirstSearch,
    SetQueryText,
    SubmitQuery,
    ToggleFacetValue,
)
from headless_search.engine.engine import SearchEngine


def _counter(engine):
    calls = []
    engine.subscribe(lambda: calls.append(engine.get_state()))
    return calls


class TestSequencing:
    @pytest.mark.asyncio
    async def test_out_of_order_responses_keep_latest(self, engine, transport, settle):
        engine.dispatch(SetQueryText("a"))
        engine.dispatch(SubmitQuery())
        engine.dispatch(SetQueryText("b"))
        engine.dispatch(SubmitQuery())
        await settle()

        assert [r.query_text for r in transport.requests] == ["a", "b"]
        transport.futures[1].set_result(make_response(response_id="B"))
        await settle()
        transport.futures[0].set_result(make_response(response_id="A"))
        await settle()

        state = engine.get_state()
        assert state.last_response.response_id == "B"
        assert state.executed_query == "b"
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_one_notification_per_settled_transition(self, engine, transport, settle):
        calls = _counter(engine)
        engine.dispatch(SubmitQuery())
        assert len(calls) == 1
        assert calls[0].is_loading is True

        await settle()
        transport.futures[0].set_result(make_response())
        await settle()
        assert len(calls) == 2
        assert calls[1].is_loading is False

    @pytest.mark.asyncio
    async def test_noop_action_does_not_notify(self, engine):
        calls = _counter(engine)
        engine.dispatch(SetQueryText(""))
        engine.dispatch(ToggleFacetValue("filetype", ""))
        assert calls == []

    @pytest.mark.asyncio
    async def test_stale_response_does_not_notify(self, engine, transport, settle):
        engine.dispatch(SubmitQuery())
        engine.dispatch(SubmitQuery())
        await settle()
        calls = _counter(engine)
        transport.futures[0].set_result(make_response(response_id="old"))
        await settle()
        assert calls == []
        assert engine.get_state().pending_request_id == 2

    @pytest.mark.asyncio
    async def test_wait_idle(self, search_config):
        transport = FakeTransport(lambda request: make_response(total=4))
        async with SearchEngine(search_config, transport) as engine:
            engine.dispatch(SubmitQuery())
            await engine.wait_idle()
            assert engine.get_state().total_count == 4
        assert transport.closed is True

    def test_dispatch_without_event_loop_records_network_error(self, search_config):
        engine = SearchEngine(search_config, FakeTransport())
        engine.dispatch(SubmitQuery())
        state = engine.get_state()
        assert state.last_error == ErrorKind.NETWORK
        assert state.is_loading is False
        assert state.request_sequence == 1


class TestFailures:
    @pytest.mark.asyncio
    async def test_network_error_keeps_previous_results(self, search_config, settle):
        outcomes = [make_response(total=7), NetworkError("connection refused")]
        transport = FakeTransport(lambda request: outcomes.pop(0))
        engine = SearchEngine(search_config, transport)
        engine.dispatch(SubmitQuery())
        await settle()
        calls = _counter(engine)
        engine.dispatch(SubmitQuery())
        await settle()

        # one for the submit, one for the failure
        assert len(calls) == 2
        state = engine.get_state()
        assert state.last_error == ErrorKind.NETWORK
        assert state.last_error_message == "connection refused"
        assert state.total_count == 7
        assert state.is_loading is False
        await engine.close()

    @pytest.mark.asyncio
    async def test_auth_error_is_surfaced(self, search_config, settle):
        transport = FakeTransport(lambda request: AuthError("Invalid API key", 401))
        engine = SearchEngine(search_config, transport)
        engine.dispatch(SubmitQuery())
        await settle()
        assert engine.get_state().last_error == ErrorKind.AUTH
        await engine.close()

    @pytest.mark.asyncio
    async def test_unexpected_exception_maps_to_server_error(self, search_config, settle):
        transport = FakeTransport(lambda request: ValueError("boom"))
        engine = SearchEngine(search_config, transport)
        engine.dispatch(SubmitQuery())
        await settle()
        assert engine.get_state().last_error == ErrorKind.SERVER
        assert engine.get_state().last_error_message == "boom"
        await engine.close()

    @pytest.mark.asyncio
    async def test_subscriber_exception_does_not_block_others(self, engine):
        broken = MagicMock(side_effect=RuntimeError("listener bug"))
        healthy = MagicMock()
        engine.subscribe(broken)
        engine.subscribe(healthy)
        engine.dispatch(SubmitQuery())
        broken.assert_called_once_with()
        healthy.assert_called_once_with()
        assert engine.get_state().is_loading is True

    @pytest.mark.asyncio
    async def test_analytics_sink_failure_does_not_block_transition(
        self, search_config, transport
    ):
        def failing_sink(record):
            raise RuntimeError("collector down")

        engine = SearchEngine(search_config, transport, AnalyticsEmitter(failing_sink))
        calls = _counter(engine)
        engine.dispatch(ToggleFacetValue("filetype", "pdf"))
        assert engine.get_state().selected_values("filetype") == {"pdf"}
        assert len(calls) == 1
        await engine.close()


class TestLifecycle:
    def test_missing_credentials_raise(self, search_config):
        with pytest.raises(ConfigurationError) as exc_info:
            SearchEngine(search_config.replace(api_key=""), FakeTransport())
        assert "SEARCH_API_KEY is not set" in exc_info.value.problems

    def test_build_without_transport_validates_first(self, search_config):
        with pytest.raises(ConfigurationError):
            build_search_engine(search_config.replace(organization_id=""))

    def test_build_applies_overrides(self, search_config):
        sink = BufferedAnalyticsSink()
        engine = build_search_engine(
            search_config,
            transport=FakeTransport(),
            analytics_sink=sink,
            search_hub="SupportHub",
            pipeline="support",
        )
        assert engine.config.search_hub == "SupportHub"
        assert engine.get_state().pipeline == "support"
        assert engine.analytics.context["searchHub"] == "SupportHub"
        assert engine.analytics.context["pipeline"] == "support"

    @pytest.mark.asyncio
    async def test_dispatch_after_close_is_ignored(self, engine, transport):
        await engine.close()
        engine.dispatch(SubmitQuery())
        assert engine.get_state().request_sequence == 0
        assert transport.requests == []
        assert transport.closed is True
        assert engine.is_ready is False

    @pytest.mark.asyncio
    async def test_execute_first_search(self, engine, transport, settle):
        assert engine.is_ready is True
        engine.execute_first_search()
        await settle()
        assert transport.requests[0].cause == SearchCause.INTERFACE_LOAD
        assert engine.get_state().recent_queries == ()

    @pytest.mark.asyncio
    async def test_first_search_emits_search_event(self, engine, transport, records, settle):
        engine.dispatch(ExecuteFirstSearch())
        await settle()
        assert records == []
        transport.futures[0].set_result(make_response(total=3, response_id="uid-9"))
        await settle()

        [record] = records
        assert record["eventType"] == "search"
        assert record["fields"]["actionCause"] == "interfaceLoad"
        assert record["fields"]["numberOfResults"] == 3
        assert record["fields"]["searchQueryUid"] == "uid-9"
        assert record["fields"]["searchHub"] == "TestHub"


class TestSuggestions:
    @pytest.mark.asyncio
    async def test_latest_text_wins(self, engine, transport, settle):
        transport.suggestions = {
            "c": [QuerySuggestion(expression="cat")],
            "co": [QuerySuggestion(expression="coffee")],
        }
        engine.dispatch(SetQueryText("c"))
        engine.dispatch(SetQueryText("co"))
        await settle()

        assert [r.query_text for r in transport.suggest_requests] == ["co"]
        assert transport.suggest_requests[0].count == 5
        assert [s.expression for s in engine.get_state().suggestions] == ["coffee"]

    @pytest.mark.asyncio
    async def test_submit_discards_pending_suggestions(self, engine, transport, settle):
        transport.suggestions = {"co": [QuerySuggestion(expression="coffee")]}
        engine.dispatch(SetQueryText("co"))
        engine.dispatch(SubmitQuery())
        await settle()
        assert engine.get_state().suggestions == ()
