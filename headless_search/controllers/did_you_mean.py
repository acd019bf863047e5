"""DidYouMean controller: spelling corrections for the last executed query."""

from __future__ import annotations

from dataclasses import dataclass

from headless_search.controllers.base import Controller
from headless_search.engine.actions import ApplyCorrection
from headless_search.engine.engine import SearchEngine


@dataclass(frozen=True)
class DidYouMeanState:
    has_correction: bool
    was_automatically_corrected: bool
    corrected_query: str
    original_query: str


class DidYouMean(Controller):
    @property
    def state(self) -> DidYouMeanState:
        s = self._engine.get_state()
        correction = s.last_response.correction if s.last_response else None
        if correction is None:
            return DidYouMeanState(
                has_correction=False,
                was_automatically_corrected=False,
                corrected_query="",
                original_query="",
            )
        return DidYouMeanState(
            has_correction=True,
            was_automatically_corrected=correction.was_automatically_applied,
            corrected_query=correction.corrected_query,
            original_query=correction.original_query or s.executed_query,
        )

    def apply_correction(self) -> None:
        """Search for the corrected query. No-op without a pending correction."""
        self._engine.dispatch(ApplyCorrection())


def build_did_you_mean(engine: SearchEngine) -> DidYouMean:
    return DidYouMean(engine)
