"""Shared controller plumbing: projection access and filtered subscriptions.

Projections are recomputed from the engine's canonical state on every access;
controllers never keep their own copy of search data. Subscriptions compare
the projection before and after each engine notification and call the
listener only when the controller's slice actually changed.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from headless_search.engine.engine import Listener, SearchEngine, Unsubscribe

logger = logging.getLogger(__name__)


class Controller(ABC):
    def __init__(self, engine: SearchEngine):
        self._engine = engine
        self._local_listeners: dict[int, Callable[[], None]] = {}
        self._local_ids = itertools.count()

    @property
    def engine(self) -> SearchEngine:
        return self._engine

    @property
    @abstractmethod
    def state(self) -> Any:
        """Read-only projection of canonical state."""

    def get_state(self) -> Any:
        return self.state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        last_seen = self.state

        def on_change() -> None:
            nonlocal last_seen
            current = self.state
            if current == last_seen:
                return
            last_seen = current
            listener()

        unsubscribe_engine = self._engine.subscribe(on_change)
        local_id = next(self._local_ids)
        self._local_listeners[local_id] = on_change

        def unsubscribe() -> None:
            unsubscribe_engine()
            self._local_listeners.pop(local_id, None)

        return unsubscribe

    def _notify_local(self) -> None:
        """Re-check subscriptions after a controller-local (non-engine) change."""
        for callback in list(self._local_listeners.values()):
            try:
                callback()
            except Exception:
                logger.exception("%s subscriber raised; continuing", type(self).__name__)
