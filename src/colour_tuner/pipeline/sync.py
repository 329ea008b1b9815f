"""
Remote state synchronizer - pulls the server's slider values on startup.

The snapshot only seeds local state. Nothing is written back, so it never
goes through the dispatcher.
"""

from __future__ import annotations

import logging

from ..constraints import ConstraintEngine
from ..params import ParameterState
from ..remote import RemoteAuthority, RemoteError

logger = logging.getLogger(__name__)


class RemoteStateSynchronizer:
    """Seeds ParameterState (and the engine's readouts) from the server."""

    def __init__(self, remote: RemoteAuthority, state: ParameterState, engine: ConstraintEngine):
        self.remote = remote
        self.state = state
        self.engine = engine

    async def load(self) -> bool:
        """Fetch the snapshot and apply it.

        Returns:
            True if the snapshot was applied, False if the fetch failed and
            the defaults were kept.
        """
        try:
            snapshot = await self.remote.fetch_snapshot()
        except RemoteError as e:
            logger.error(f"Error loading slider state: {e}")
            return False

        applied = self.state.update(**snapshot)
        logger.info(f"Slider state loaded ({len(applied)} of {len(snapshot)} values applied)")
        self.engine.refresh()
        return True
