from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from headless_search.controllers import (
    build_facet,
    build_pager,
    build_query_summary,
    build_result_list,
    build_search_box,
)
from headless_search.core.config import Config
from headless_search.engine import SearchEngine, build_search_engine


@pytest_asyncio.fixture
async def live_engine() -> AsyncIterator[SearchEngine]:
    """Engine against the configured backend; needs SEARCH_ORGANIZATION_ID and SEARCH_API_KEY."""
    cfg = Config.load()
    if cfg.validate():
        pytest.skip("search backend credentials are not configured")
    instance = build_search_engine(cfg)
    try:
        yield instance
    finally:
        await instance.close()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_first_search_then_paging(live_engine: SearchEngine):
    results = build_result_list(live_engine)
    pager = build_pager(live_engine)
    summary = build_query_summary(live_engine)

    live_engine.execute_first_search()
    await live_engine.wait_idle()

    assert results.state.has_error is False, results.state.error_message
    assert summary.state.first_search_executed is True
    if pager.state.has_next_page:
        pager.next_page()
        await live_engine.wait_idle()
        assert summary.state.first_result == live_engine.config.page_size + 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_query_with_facet(live_engine: SearchEngine):
    box = build_search_box(live_engine)
    facet = build_facet(live_engine, "filetype")

    box.update_text("test")
    box.submit()
    await live_engine.wait_idle()

    values = facet.state.values
    if values:
        facet.toggle_select(values[0].value)
        await live_engine.wait_idle()
        assert facet.is_value_selected(values[0].value)
        assert build_result_list(live_engine).state.has_error is False
