"""Transport client: the single execute-search contract to the hosted backend."""

from headless_search.transport.http import HttpSearchTransport
from headless_search.transport.interface import SearchTransport

__all__ = ["HttpSearchTransport", "SearchTransport"]
