"""HTTP transport for the hosted search REST API (search v2 + querySuggest)."""

import json
import logging
import time
from typing import Any

import httpx

from headless_search.contracts.search_v1 import (
    Correction,
    FacetValueCount,
    QuerySuggestion,
    Result,
    SearchRequest,
    SearchResponse,
    SuggestRequest,
)
from headless_search.core.config import Config
from headless_search.core.errors import AuthError, NetworkError, ServerError
from headless_search.transport.interface import SearchTransport

logger = logging.getLogger(__name__)

SEARCH_PATH = "/rest/search/v2"
SUGGEST_PATH = "/rest/search/v2/querySuggest"


def build_search_payload(request: SearchRequest) -> dict[str, Any]:
    """Translate a request snapshot into the REST body."""
    payload: dict[str, Any] = {
        "q": request.query_text,
        "firstResult": request.first_result,
        "numberOfResults": request.page_size,
        "sortCriteria": request.sort_criterion.expression,
        "enableDidYouMean": True,
    }
    if request.search_hub_id:
        payload["searchHub"] = request.search_hub_id
    if request.pipeline_id:
        payload["pipeline"] = request.pipeline_id
    if request.fields_to_include:
        payload["fieldsToInclude"] = list(request.fields_to_include)

    facets: list[dict[str, Any]] = []
    requested = {f.field: f for f in request.facets}
    for field in sorted(set(requested) | set(request.selected_facets)):
        facet = requested.get(field)
        selected = request.selected_facets.get(field, ())
        facets.append(
            {
                "facetId": field,
                "field": field,
                "type": "specific",
                "numberOfValues": facet.number_of_values if facet else max(len(selected), 1),
                "sortCriteria": (facet.sort_criteria.value if facet else "occurrences"),
                "currentValues": [{"value": v, "state": "selected"} for v in selected],
                "freezeCurrentValues": False,
            }
        )
    if facets:
        payload["facets"] = facets
    return payload


def _parse_results(raw_results: Any) -> tuple[Result, ...]:
    results: list[Result] = []
    if not isinstance(raw_results, list):
        return ()
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        raw = item.get("raw") if isinstance(item.get("raw"), dict) else {}
        raw_fields = {
            k: v
            for k, v in raw.items()
            if v is None or isinstance(v, (str, int, float, bool))
        }
        try:
            results.append(
                Result(
                    unique_id=str(item.get("uniqueId", "")),
                    title=item.get("title") or "",
                    excerpt=item.get("excerpt") or "",
                    click_uri=item.get("clickUri") or "",
                    rank=len(results),
                    raw_fields=raw_fields,
                )
            )
        except ValueError as e:
            logger.debug("Transport: skipping malformed result: %s", e)
    return tuple(results)


def _parse_facets(raw_facets: Any) -> dict[str, tuple[FacetValueCount, ...]]:
    facet_counts: dict[str, tuple[FacetValueCount, ...]] = {}
    if not isinstance(raw_facets, list):
        return facet_counts
    for facet in raw_facets:
        if not isinstance(facet, dict):
            continue
        field = facet.get("facetId") or facet.get("field")
        if not field:
            continue
        values: list[FacetValueCount] = []
        for v in facet.get("values") or []:
            if not isinstance(v, dict) or v.get("value") in (None, ""):
                continue
            count = v.get("numberOfResults")
            values.append(
                FacetValueCount(
                    value=str(v["value"]),
                    count=max(count, 0) if isinstance(count, int) else 0,
                )
            )
        facet_counts[str(field)] = tuple(values)
    return facet_counts


def _parse_correction(data: dict[str, Any], query_text: str) -> Correction | None:
    applied = data.get("queryCorrection")
    if isinstance(applied, dict) and applied.get("correctedQuery"):
        return Correction(
            corrected_query=applied["correctedQuery"],
            was_automatically_applied=True,
            original_query=applied.get("originalQuery") or query_text,
        )
    suggested = data.get("queryCorrections")
    if isinstance(suggested, list) and suggested:
        first = suggested[0]
        if isinstance(first, dict) and first.get("correctedQuery"):
            return Correction(
                corrected_query=first["correctedQuery"],
                was_automatically_applied=False,
                original_query=query_text,
            )
    return None


def parse_search_response(
    data: dict[str, Any], request: SearchRequest, elapsed_ms: float
) -> SearchResponse:
    """Parse a REST search body into a SearchResponse."""
    status = data.get("statusCode")
    if data.get("exception") or (isinstance(status, int) and status >= 400):
        error = data.get("exception") or data.get("message") or "Unknown error"
        if isinstance(error, dict):
            error = error.get("code") or json.dumps(error)
        raise ServerError(f"Search backend returned an error: {error}")

    results = _parse_results(data.get("results"))
    total = data.get("totalCountFiltered", data.get("totalCount", len(results)))
    duration = data.get("duration")
    return SearchResponse(
        results=results,
        total_count=max(total, 0) if isinstance(total, int) else len(results),
        facet_counts=_parse_facets(data.get("facets")),
        correction=_parse_correction(data, request.query_text),
        duration_ms=float(duration) if isinstance(duration, (int, float)) else elapsed_ms,
        response_id=str(data.get("searchUid") or ""),
    )


class HttpSearchTransport(SearchTransport):
    """REST transport authenticated with an API key (Bearer token)."""

    def __init__(self, config: Config, client: httpx.AsyncClient | None = None):
        self._organization_id = config.organization_id
        self._base_url = config.platform_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=config.request_timeout)
        self._owns_client = client is None
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(
                f"{self._base_url}{path}",
                params={"organizationId": self._organization_id},
                json=payload,
                headers=self._headers,
            )
        except httpx.TransportError as e:
            raise NetworkError(f"Search backend unreachable: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise AuthError(
                f"Search backend rejected credentials (HTTP {status})", status_code=status
            )
        if status >= 400:
            raise ServerError(
                f"Search backend failed (HTTP {status}): {response.text[:200]}",
                status_code=status,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise ServerError("Search backend returned invalid JSON", status_code=status) from e
        if not isinstance(data, dict):
            raise ServerError("Search backend returned a non-object payload", status_code=status)
        return data

    async def execute_search(self, request: SearchRequest) -> SearchResponse:
        t0 = time.monotonic()
        data = await self._post(SEARCH_PATH, build_search_payload(request))
        elapsed_ms = round((time.monotonic() - t0) * 1000, 1)
        logger.info(
            "Transport: search q=%r page=%d returned in %.1fms",
            request.query_text,
            request.page_index,
            elapsed_ms,
        )
        return parse_search_response(data, request, elapsed_ms)

    async def fetch_suggestions(self, request: SuggestRequest) -> list[QuerySuggestion]:
        payload: dict[str, Any] = {"q": request.query_text, "count": request.count}
        if request.search_hub_id:
            payload["searchHub"] = request.search_hub_id
        if request.pipeline_id:
            payload["pipeline"] = request.pipeline_id
        data = await self._post(SUGGEST_PATH, payload)
        suggestions: list[QuerySuggestion] = []
        for item in data.get("completions") or []:
            if not isinstance(item, dict) or not item.get("expression"):
                continue
            suggestions.append(
                QuerySuggestion(
                    expression=item["expression"],
                    highlighted=item.get("highlighted") or "",
                )
            )
        return suggestions[: request.count]

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
