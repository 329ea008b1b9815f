"""
Constraint engine - keeps each slider pair ordered as the operator edits it.

An edit is never rejected. When it would break ``lower < upper`` the other
bound of the pair moves by one unit to make room.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..params import ParameterPair, ParameterState
from .snippet import render_snippet

logger = logging.getLogger(__name__)

ReadoutListener = Callable[[str, int], None]
SnippetListener = Callable[[str], None]


class ConstraintEngine:
    """
    Reconciles slider pairs and keeps their readouts current.

    Usage:
        engine = ConstraintEngine(state)
        engine.subscribe(readout=lambda key, value: print(key, value))

        writes = engine.handle_input("hueMin", 150)
        # [("hueMin", 150), ("hueMax", 151)] when hueMax was 101
    """

    def __init__(self, state: ParameterState):
        self.state = state
        self.name = ""
        self.snippet = render_snippet(self.name, state)
        self._readouts: dict[str, str] = {key: str(value) for key, value in state.to_dict().items()}
        self._readout_listeners: list[ReadoutListener] = []
        self._snippet_listeners: list[SnippetListener] = []

    def subscribe(self, readout: ReadoutListener | None = None, snippet: SnippetListener | None = None):
        """Register callbacks for readout and snippet changes."""
        if readout is not None:
            self._readout_listeners.append(readout)
        if snippet is not None:
            self._snippet_listeners.append(snippet)

    def readout(self, key: str) -> str:
        """Get the text shown next to a slider."""
        return self._readouts[key]

    def handle_input(self, key: str, value: int) -> list[tuple[str, int]]:
        """Apply an edit of one bound and reconcile its pair.

        Args:
            key: Slider that was edited (e.g. "hueMin").
            value: New slider position.

        Returns:
            The (key, value) writes to deliver: the edited key first, then the
            other bound of the pair if it had to move.
        """
        pair = self.state.pair_for(key)
        value = max(0, min(pair.limit, int(value)))

        if key == pair.lower_key:
            lower, upper = self._push_upper(pair, value, self.state[pair.upper_key])
        else:
            lower, upper = self._push_lower(pair, self.state[pair.lower_key], value)

        other = pair.upper_key if key == pair.lower_key else pair.lower_key
        previous_other = self.state[other]

        self.state.set(pair.lower_key, lower)
        self.state.set(pair.upper_key, upper)

        writes = [(key, self.state[key])]
        if self.state[other] != previous_other:
            logger.debug(f"{key}={value} moved {other} {previous_other} -> {self.state[other]}")
            writes.append((other, self.state[other]))

        self._update_readout(pair.lower_key)
        self._update_readout(pair.upper_key)
        self._update_snippet()
        return writes

    def set_name(self, name: str):
        """Change the pending colour name shown in the snippet."""
        self.name = name
        self._update_snippet()

    def refresh(self):
        """Regenerate every readout and the snippet from the current state."""
        for key in self.state.to_dict():
            self._update_readout(key, force=True)
        self._update_snippet(force=True)

    @staticmethod
    def _push_upper(pair: ParameterPair, lower: int, upper: int) -> tuple[int, int]:
        if lower >= upper:
            upper = lower + 1
            if upper > pair.limit:
                # No room above: pin upper at the edge, pull lower back
                upper = pair.limit
                lower = upper - 1
        return lower, upper

    @staticmethod
    def _push_lower(pair: ParameterPair, lower: int, upper: int) -> tuple[int, int]:
        if upper <= lower:
            lower = upper - 1
            if lower < 0:
                lower = 0
                upper = 1
        return lower, upper

    def _update_readout(self, key: str, force: bool = False):
        text = str(self.state[key])
        if not force and self._readouts.get(key) == text:
            return
        self._readouts[key] = text
        for listener in self._readout_listeners:
            listener(key, self.state[key])

    def _update_snippet(self, force: bool = False):
        snippet = render_snippet(self.name, self.state)
        if not force and snippet == self.snippet:
            return
        self.snippet = snippet
        for listener in self._snippet_listeners:
            listener(snippet)
