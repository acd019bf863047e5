"""Analytics event taxonomy and builders.

Event types:
  - search: a query submission settled (query text, result count, duration)
  - click: a result was opened (unique id, rank, originating query)
  - custom: everything else; ``eventCategory`` says which
    (``facet`` for value toggles, ``correction`` for did-you-mean clicks)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from headless_search.contracts.search_v1 import (
    FacetValueState,
    Result,
    SearchRequest,
    SearchResponse,
)


class AnalyticsEventType(StrEnum):
    SEARCH = "search"
    CLICK = "click"
    CUSTOM = "custom"


class CustomCategory(StrEnum):
    FACET = "facet"
    CORRECTION = "correction"


@dataclass(frozen=True)
class AnalyticsEvent:
    event_type: AnalyticsEventType
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def category(self) -> str | None:
        return self.fields.get("eventCategory")


def search_event(request: SearchRequest, response: SearchResponse) -> AnalyticsEvent:
    return AnalyticsEvent(
        AnalyticsEventType.SEARCH,
        {
            "queryText": request.query_text,
            "numberOfResults": response.total_count,
            "responseTimeMs": response.duration_ms,
            "actionCause": request.cause.value,
            "searchQueryUid": response.response_id,
        },
    )


def click_event(result: Result, query_text: str, response_id: str) -> AnalyticsEvent:
    return AnalyticsEvent(
        AnalyticsEventType.CLICK,
        {
            "uniqueId": result.unique_id,
            "rank": result.rank,
            "queryText": query_text,
            "documentTitle": result.title,
            "documentUri": result.click_uri,
            "searchQueryUid": response_id,
        },
    )


def facet_event(field_id: str, value: str, state: FacetValueState) -> AnalyticsEvent:
    return AnalyticsEvent(
        AnalyticsEventType.CUSTOM,
        {
            "eventCategory": CustomCategory.FACET.value,
            "eventValue": "facetSelect" if state == FacetValueState.SELECTED else "facetDeselect",
            "field": field_id,
            "value": value,
            "state": state.value,
        },
    )


def facet_clear_event(field_id: str) -> AnalyticsEvent:
    return AnalyticsEvent(
        AnalyticsEventType.CUSTOM,
        {
            "eventCategory": CustomCategory.FACET.value,
            "eventValue": "facetClearAll",
            "field": field_id,
        },
    )


def correction_event(original_query: str, corrected_query: str) -> AnalyticsEvent:
    return AnalyticsEvent(
        AnalyticsEventType.CUSTOM,
        {
            "eventCategory": CustomCategory.CORRECTION.value,
            "eventValue": "didyoumeanClick",
            "originalQuery": original_query,
            "correctedQuery": corrected_query,
        },
    )


def custom_event(
    event_type: str, event_value: str, metadata: dict[str, Any] | None = None
) -> AnalyticsEvent:
    fields = dict(metadata or {})
    fields["eventCategory"] = event_type
    fields["eventValue"] = event_value
    return AnalyticsEvent(AnalyticsEventType.CUSTOM, fields)
