"""Search engine: the single owner of canonical search state.

Flow:
  1. ``dispatch`` queues an action and drains the queue in order
  2. each action goes through the pure reducer
  3. the new state is committed
  4. effects run: search request task, debounced suggestion task, analytics
  5. subscribers are notified once if the state changed

Responses come back as ``ResponseArrived`` / ``RequestFailed`` actions and
are merged only if their sequence number is still the pending one.
"""

from __future__ import annotations

import asyncio
import itertools
from collections import deque
from collections.abc import Callable, Coroutine
from typing import Any

from headless_search.analytics.emitter import AnalyticsEmitter, AnalyticsSink
from headless_search.contracts.search_v1 import SearchRequest, SuggestRequest
from headless_search.core.config import Config
from headless_search.core.config import config as default_config
from headless_search.core.errors import ConfigurationError, ErrorKind, TransportError
from headless_search.core.logger import logger
from headless_search.engine.actions import (
    Action,
    ExecuteFirstSearch,
    RequestFailed,
    ResponseArrived,
    SuggestionsArrived,
)
from headless_search.engine.reducer import reduce
from headless_search.engine.state import SearchState
from headless_search.transport.http import HttpSearchTransport
from headless_search.transport.interface import SearchTransport

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class SearchEngine:
    """Applies actions sequentially and notifies subscribers per settled transition."""

    def __init__(
        self,
        config: Config,
        transport: SearchTransport,
        emitter: AnalyticsEmitter | None = None,
    ):
        problems = config.validate()
        if problems:
            logger.error("Search engine not created: %s", "; ".join(problems))
            raise ConfigurationError(problems)

        self._config = config
        self._transport = transport
        self._emitter = emitter or AnalyticsEmitter(
            enabled=config.analytics_enabled,
            search_hub=config.search_hub,
            pipeline=config.pipeline,
            origin_context=config.origin_context,
        )
        self._state = SearchState(
            page_size=config.page_size,
            recent_queries_max=config.recent_queries_max,
            search_hub=config.search_hub,
            pipeline=config.pipeline,
            fields_to_include=config.fields_to_include,
        )
        self._listeners: dict[int, Listener] = {}
        self._listener_ids = itertools.count()
        self._queue: deque[Action] = deque()
        self._dispatching = False
        self._tasks: set[asyncio.Task] = set()
        self._suggest_task: asyncio.Task | None = None
        self._closed = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def analytics(self) -> AnalyticsEmitter:
        return self._emitter

    @property
    def state(self) -> SearchState:
        return self._state

    def get_state(self) -> SearchState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return not self._closed

    def subscribe(self, listener: Listener) -> Unsubscribe:
        listener_id = next(self._listener_ids)
        self._listeners[listener_id] = listener

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    def dispatch(self, action: Action) -> None:
        if self._closed:
            logger.warning("Dispatch after close ignored: %s", type(action).__name__)
            return
        self._queue.append(action)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                self._apply(self._queue.popleft())
        finally:
            self._dispatching = False

    def execute_first_search(self) -> None:
        self.dispatch(ExecuteFirstSearch())

    def _apply(self, action: Action) -> None:
        transition = reduce(self._state, action)
        if transition.stale:
            if isinstance(action, (ResponseArrived, RequestFailed)):
                logger.stale_response(action.sequence, self._state.pending_request_id)
            return
        self._state = transition.state

        if isinstance(action, ResponseArrived):
            logger.search_response(
                action.sequence, action.response.total_count, action.response.duration_ms
            )
        elif isinstance(action, RequestFailed):
            logger.request_failed(action.sequence, action.error.value, action.message)
            if action.error == ErrorKind.AUTH:
                logger.error(
                    "Search credentials were rejected; check SEARCH_ORGANIZATION_ID and SEARCH_API_KEY"
                )

        if transition.request is not None:
            self._start_search(self._state.request_sequence, transition.request)
        if transition.suggest is not None:
            self._schedule_suggestions(*transition.suggest)
        for event in transition.events:
            self._emitter.emit(event)
        if transition.changed:
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener()
            except Exception:
                logger.exception("Search subscriber raised; continuing")

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task | None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            return None
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _start_search(self, sequence: int, request: SearchRequest) -> None:
        logger.search_request(sequence, request.query_text, request.cause.value, request.page_index)
        if self._spawn(self._execute_search(sequence, request)) is None:
            logger.error("No running event loop; search #%d cannot be sent", sequence)
            self.dispatch(RequestFailed(sequence, ErrorKind.NETWORK, "No running event loop"))

    async def _execute_search(self, sequence: int, request: SearchRequest) -> None:
        try:
            response = await self._transport.execute_search(request)
        except TransportError as e:
            self.dispatch(RequestFailed(sequence, e.kind, e.message))
            return
        except Exception as e:
            logger.exception("Transport raised unexpectedly for search #%d", sequence)
            self.dispatch(RequestFailed(sequence, ErrorKind.SERVER, str(e)))
            return
        self.dispatch(ResponseArrived(sequence, response))

    def _schedule_suggestions(self, token: int, text: str) -> None:
        if self._config.number_of_suggestions <= 0:
            return
        if self._suggest_task is not None and not self._suggest_task.done():
            self._suggest_task.cancel()
        self._suggest_task = self._spawn(self._fetch_suggestions(token, text))

    async def _fetch_suggestions(self, token: int, text: str) -> None:
        await asyncio.sleep(self._config.suggestion_debounce_ms / 1000)
        if token != self._state.suggestion_token:
            return
        request = SuggestRequest(
            query_text=text,
            count=self._config.number_of_suggestions,
            pipeline_id=self._config.pipeline or None,
            search_hub_id=self._config.search_hub or None,
        )
        try:
            suggestions = await self._transport.fetch_suggestions(request)
        except Exception as e:
            logger.debug(f"Suggestion fetch failed for {text!r}: {e}")
            return
        self.dispatch(SuggestionsArrived(token, tuple(suggestions)))

    async def wait_idle(self) -> None:
        """Wait until no search or suggestion task is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._listeners.clear()
        await self._transport.close()

    async def __aenter__(self) -> SearchEngine:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def build_search_engine(
    config: Config | None = None,
    *,
    transport: SearchTransport | None = None,
    analytics_sink: AnalyticsSink | None = None,
    search_hub: str | None = None,
    pipeline: str | None = None,
) -> SearchEngine:
    """Create an engine from configuration; raises ConfigurationError when unusable."""
    cfg = config or default_config
    overrides: dict[str, Any] = {}
    if search_hub:
        overrides["search_hub"] = search_hub
    if pipeline:
        overrides["pipeline"] = pipeline
    if overrides:
        cfg = cfg.replace(**overrides)
    emitter = AnalyticsEmitter(
        analytics_sink,
        enabled=cfg.analytics_enabled,
        search_hub=cfg.search_hub,
        pipeline=cfg.pipeline,
        origin_context=cfg.origin_context,
    )
    if transport is None:
        problems = cfg.validate()
        if problems:
            logger.error("Search engine not created: %s", "; ".join(problems))
            raise ConfigurationError(problems)
        transport = HttpSearchTransport(cfg)
    return SearchEngine(cfg, transport, emitter)
