"""Standard interface for the search backend used by the engine.

Implementations return typed responses and signal failures by raising a
``TransportError`` subclass (network, auth or server).
"""

from abc import ABC, abstractmethod

from headless_search.contracts.search_v1 import (
    QuerySuggestion,
    SearchRequest,
    SearchResponse,
    SuggestRequest,
)


class SearchTransport(ABC):
    """Base class for all search transports."""

    @abstractmethod
    async def execute_search(self, request: SearchRequest) -> SearchResponse:
        """Run one search and return the parsed response."""

    @abstractmethod
    async def fetch_suggestions(self, request: SuggestRequest) -> list[QuerySuggestion]:
        """Return query completions for partially typed text."""

    async def close(self) -> None:
        """Release network resources. Default: nothing to release."""
