"""
Tuner session - coordinates all layers.

Owns the one ParameterState, the constraint engine, the remote client and
the pipelines, and wires them together:

  1. start(): seed state from the snapshot, fetch the first images
  2. on_slider_input(): engine reconciles the pair, dispatcher delivers
  3. each delivered write refreshes the images
  4. commit(): validate the name and post it
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .config import BASE_URL, SHUTDOWN_DRAIN_TIMEOUT
from .constraints import ConstraintEngine
from .delivery import ConflatingDispatcher
from .params import NamedConfiguration, ParameterState
from .pipeline import CommitWorkflow, RemoteStateSynchronizer, VisualRefreshPipeline
from .remote import RemoteAuthority

logger = logging.getLogger(__name__)


class TunerSession:
    """
    One operator's tuning session against a remote authority.

    Usage:
        async with TunerSession("http://localhost:8080") as session:
            await session.start()
            session.on_slider_input("hueMin", 40)
            await session.commit("myColour")
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        remote: Optional[RemoteAuthority] = None,
        state: Optional[ParameterState] = None,
        acknowledge: Optional[Callable[[str], None]] = None,
        timeout: Optional[float] = None,
    ):
        self.remote = remote or RemoteAuthority(base_url, timeout=timeout)
        self.state = state or ParameterState()
        self.engine = ConstraintEngine(self.state)
        self.refresher = VisualRefreshPipeline(self.remote)
        self.dispatcher = ConflatingDispatcher(
            self.remote.send_parameter,
            self.refresher.after_delivery,
        )
        self.synchronizer = RemoteStateSynchronizer(self.remote, self.state, self.engine)
        self.committer = CommitWorkflow(self.remote, self.state, acknowledge=acknowledge)

    async def __aenter__(self) -> TunerSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> bool:
        """Seed from the server and fetch the first images.

        Returns:
            True if the snapshot was loaded.
        """
        loaded = await self.synchronizer.load()
        await self.refresher.refresh()
        return loaded

    def on_slider_input(self, key: str, value: int) -> list[tuple[str, int]]:
        """Handle one slider event. Returns the writes handed to the dispatcher."""
        writes = self.engine.handle_input(key, value)
        for write_key, write_value in writes:
            self.dispatcher.submit(write_key, write_value)
        return writes

    def on_name_input(self, name: str):
        """Handle an edit of the pending colour name."""
        self.engine.set_name(name)

    async def commit(self, name: Optional[str] = None) -> Optional[NamedConfiguration]:
        """Submit ``name`` (default: the pending name)."""
        if name is None:
            name = self.engine.name
        return await self.committer.submit(name)

    async def close(self):
        """Give pending writes a moment to land, then close the client."""
        try:
            await asyncio.wait_for(self.dispatcher.wait_idle(), SHUTDOWN_DRAIN_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("Pending slider writes not delivered before shutdown")
            await self.dispatcher.close()
        await self.remote.close()
