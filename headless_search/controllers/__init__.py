"""Controllers: narrow, reactive projections of engine state plus intent methods."""

from headless_search.controllers.base import Controller
from headless_search.controllers.did_you_mean import DidYouMean, build_did_you_mean
from headless_search.controllers.facet import FacetController, build_facet
from headless_search.controllers.pager import Pager, build_pager
from headless_search.controllers.query_summary import QuerySummary, build_query_summary
from headless_search.controllers.result_list import ResultList, build_result_list
from headless_search.controllers.search_box import SearchBox, build_search_box
from headless_search.controllers.sort import Sort, build_sort

__all__ = [
    "Controller",
    "DidYouMean",
    "FacetController",
    "Pager",
    "QuerySummary",
    "ResultList",
    "SearchBox",
    "Sort",
    "build_did_you_mean",
    "build_facet",
    "build_pager",
    "build_query_summary",
    "build_result_list",
    "build_search_box",
    "build_sort",
]
