"""Search contract v1: request snapshot, response payload and shared value types.

Defines the canonical types for:
  - Sorting (SortCriterion and its builders)
  - The execute-search request snapshot (SearchRequest, FacetRequest)
  - The response payload (SearchResponse, Result, FacetValueCount, Correction)
  - Query suggestions (SuggestRequest, QuerySuggestion)

Every model is frozen: a response is immutable once constructed and is
shared read-only between the engine and its controllers.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

Scalar = str | int | float | bool | None


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


class SortOrder(StrEnum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class SortBy(StrEnum):
    RELEVANCY = "relevancy"
    DATE = "date"
    FIELD = "field"


class SortCriterion(BaseModel):
    """One way of ordering results."""

    model_config = ConfigDict(frozen=True)

    by: SortBy = Field(default=SortBy.RELEVANCY)
    order: SortOrder | None = Field(
        default=None, description="Required for date and field sorts"
    )
    field: str | None = Field(default=None, description="Field name for field sorts")

    @property
    def expression(self) -> str:
        """Backend sort expression, e.g. 'relevancy' or 'date descending'."""
        if self.by == SortBy.RELEVANCY:
            return "relevancy"
        order = (self.order or SortOrder.DESCENDING).value
        if self.by == SortBy.DATE:
            return f"date {order}"
        return f"@{self.field} {order}"


def relevance_sort() -> SortCriterion:
    return SortCriterion(by=SortBy.RELEVANCY)


def date_sort(order: SortOrder = SortOrder.DESCENDING) -> SortCriterion:
    return SortCriterion(by=SortBy.DATE, order=order)


def field_sort(field: str, order: SortOrder = SortOrder.ASCENDING) -> SortCriterion:
    if not field or not field.strip():
        raise ValueError("field sort requires a field name")
    return SortCriterion(by=SortBy.FIELD, order=order, field=field.strip())


DEFAULT_SORT_CRITERIA: tuple[SortCriterion, ...] = (
    relevance_sort(),
    date_sort(SortOrder.DESCENDING),
    date_sort(SortOrder.ASCENDING),
)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class SearchCause(StrEnum):
    """What triggered a search request; carried into analytics."""

    INTERFACE_LOAD = "interfaceLoad"
    SEARCHBOX_SUBMIT = "searchboxSubmit"
    OMNIBOX_FROM_LINK = "omniboxFromLink"
    FACET_SELECT = "facetSelect"
    FACET_DESELECT = "facetDeselect"
    FACET_CLEAR_ALL = "facetClearAll"
    SORT_RESULTS = "sortResults"
    PAGER_NUMBER = "pagerNumber"
    RESULTS_PER_PAGE = "resultsPerPage"
    DID_YOU_MEAN_CLICK = "didyoumeanClick"


QUERY_SUBMISSION_CAUSES = frozenset(
    {
        SearchCause.INTERFACE_LOAD,
        SearchCause.SEARCHBOX_SUBMIT,
        SearchCause.OMNIBOX_FROM_LINK,
    }
)


class FacetSortCriteria(StrEnum):
    OCCURRENCES = "occurrences"
    SCORE = "score"
    ALPHANUMERIC = "alphanumeric"


class FacetRequest(BaseModel):
    """Facet a controller asked the backend to count values for."""

    model_config = ConfigDict(frozen=True)

    field: str
    number_of_values: int = Field(default=8, ge=1)
    sort_criteria: FacetSortCriteria = Field(default=FacetSortCriteria.OCCURRENCES)


class SearchRequest(BaseModel):
    """Snapshot of canonical state handed to the transport for one search."""

    model_config = ConfigDict(frozen=True)

    query_text: str = Field(default="")
    selected_facets: dict[str, tuple[str, ...]] = Field(
        default_factory=dict, description="field -> selected values (sorted)"
    )
    facets: tuple[FacetRequest, ...] = Field(default=())
    sort_criterion: SortCriterion = Field(default_factory=relevance_sort)
    page_index: int = Field(default=0, ge=0)
    page_size: int = Field(default=10, ge=1)
    pipeline_id: str | None = Field(default=None)
    search_hub_id: str | None = Field(default=None)
    fields_to_include: tuple[str, ...] = Field(default=())
    cause: SearchCause = Field(default=SearchCause.SEARCHBOX_SUBMIT)

    @property
    def first_result(self) -> int:
        return self.page_index * self.page_size


class SuggestRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query_text: str
    count: int = Field(default=5, ge=1)
    pipeline_id: str | None = Field(default=None)
    search_hub_id: str | None = Field(default=None)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


class FacetValueState(StrEnum):
    IDLE = "idle"
    SELECTED = "selected"
    EXCLUDED = "excluded"


class FacetValueCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    count: int = Field(default=0, ge=0)
    state: FacetValueState = Field(default=FacetValueState.IDLE)


class Correction(BaseModel):
    """Spelling correction proposed (or applied) by the backend."""

    model_config = ConfigDict(frozen=True)

    corrected_query: str
    was_automatically_applied: bool = Field(default=False)
    original_query: str = Field(default="")


class Result(BaseModel):
    """One ranked result. ``rank`` is its 0-based position in its response."""

    model_config = ConfigDict(frozen=True)

    unique_id: str = Field(description="Result identity")
    title: str = Field(default="")
    excerpt: str = Field(default="")
    click_uri: str = Field(default="")
    rank: int = Field(ge=0)
    raw_fields: dict[str, Scalar] = Field(default_factory=dict)

    @field_validator("unique_id")
    @classmethod
    def _validate_unique_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("unique_id must not be empty")
        return value


class SearchResponse(BaseModel):
    """Returned by the transport for one execute-search call."""

    model_config = ConfigDict(frozen=True)

    results: tuple[Result, ...] = Field(default=())
    total_count: int = Field(default=0, ge=0)
    facet_counts: dict[str, tuple[FacetValueCount, ...]] = Field(default_factory=dict)
    correction: Correction | None = Field(default=None)
    duration_ms: float = Field(default=0.0, ge=0)
    response_id: str = Field(default="")


class QuerySuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    expression: str
    highlighted: str = Field(default="")
