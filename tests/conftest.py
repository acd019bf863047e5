import asyncio
import os
from collections.abc import Callable, Sequence

import pytest
import pytest_asyncio

os.environ.setdefault("SEARCH_LOG_TO_FILE", "false")

from headless_search.contracts.search_v1 import (  # noqa: E402
    Correction,
    FacetValueCount,
    QuerySuggestion,
    Result,
    SearchRequest,
    SearchResponse,
    SuggestRequest,
)
from headless_search.analytics.emitter import AnalyticsEmitter  # noqa: E402
from headless_search.core.config import Config  # noqa: E402
from headless_search.engine.engine import SearchEngine  # noqa: E402
from headless_search.transport.interface import SearchTransport  # noqa: E402


class FakeTransport(SearchTransport):
    """Records requests. Without a responder every search waits on a future."""

    def __init__(self, responder: Callable[[SearchRequest], object] | None = None):
        self.responder = responder
        self.requests: list[SearchRequest] = []
        self.futures: list[asyncio.Future] = []
        self.suggestions: dict[str, list[QuerySuggestion]] = {}
        self.suggest_requests: list[SuggestRequest] = []
        self.closed = False

    async def execute_search(self, request: SearchRequest) -> SearchResponse:
        self.requests.append(request)
        if self.responder is not None:
            result = self.responder(request)
            if isinstance(result, Exception):
                raise result
            return result
        future = asyncio.get_running_loop().create_future()
        self.futures.append(future)
        return await future

    async def fetch_suggestions(self, request: SuggestRequest) -> list[QuerySuggestion]:
        self.suggest_requests.append(request)
        return list(self.suggestions.get(request.query_text, []))

    async def close(self) -> None:
        self.closed = True


def make_response(
    total: int = 3,
    count: int | None = None,
    first: int = 0,
    facets: dict[str, list[tuple[str, int]]] | None = None,
    correction: Correction | None = None,
    response_id: str = "uid-1",
    duration_ms: float = 42.0,
) -> SearchResponse:
    n = min(total, 10) if count is None else count
    return SearchResponse(
        results=tuple(
            Result(
                unique_id=f"doc-{first + i}",
                title=f"Document {first + i}",
                click_uri=f"https://example.com/{first + i}",
                rank=i,
            )
            for i in range(n)
        ),
        total_count=total,
        facet_counts={
            field: tuple(FacetValueCount(value=v, count=c) for v, c in values)
            for field, values in (facets or {}).items()
        },
        correction=correction,
        duration_ms=duration_ms,
        response_id=response_id,
    )


@pytest.fixture
def search_config() -> Config:
    return Config.load().replace(
        organization_id="test-org",
        api_key="test-key",
        log_to_file=False,
        search_hub="TestHub",
        pipeline="",
        page_size=10,
        number_of_suggestions=5,
        suggestion_debounce_ms=0,
        recent_queries_max=3,
        analytics_enabled=True,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def records() -> list:
    return []


@pytest_asyncio.fixture
async def engine(search_config, transport, records):
    emitter = AnalyticsEmitter(
        records.append, search_hub=search_config.search_hub, origin_context="Search"
    )
    instance = SearchEngine(search_config, transport, emitter)
    try:
        yield instance
    finally:
        await instance.close()


@pytest.fixture
def settle():
    async def _settle(ticks: int = 5) -> None:
        for _ in range(ticks):
            await asyncio.sleep(0)

    return _settle


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def fake_transport_cls():
    return FakeTransport


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that call a real search backend.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers", "integration: requires a reachable backend and real credentials"
    )
    config.addinivalue_line("markers", "property: property-based deterministic tests")


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: Sequence[pytest.Item],
) -> None:
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="integration is opt-in; rerun with --run-integration"
    )
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip_integration)
