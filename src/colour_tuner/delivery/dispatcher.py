"""
Conflating dispatcher - single-flight, latest-value-wins delivery per key.

Slider drags fire many edits per second. Each edit overwrites the key's
pending value; one delivery loop per key sends whatever is pending, waits
for the response, and repeats until nothing new arrived in the meantime.

So for every key:
  - at most one request is in flight
  - queued state is one value, not one per edit
  - the last value submitted is always sent eventually

Single-threaded asyncio means no locks needed: submit() and the loops only
interleave at the awaits around the send.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..remote import RemoteError

logger = logging.getLogger(__name__)

SendFn = Callable[[str, int], Awaitable[None]]
DeliveredFn = Callable[[str, int], Awaitable[None]]


@dataclass
class PendingDelivery:
    """Conflation slot for one key."""

    latest_value: Optional[int] = None  # None = nothing waiting to be sent
    in_flight: bool = False


class ConflatingDispatcher:
    """
    Per-key delivery loops that coalesce bursts of edits.

    Usage:
        dispatcher = ConflatingDispatcher(remote.send_parameter, refresh_after_write)

        # From the event loop, on every slider event:
        dispatcher.submit("hueMin", 40)

        await dispatcher.wait_idle()
    """

    def __init__(self, send: SendFn, on_delivered: Optional[DeliveredFn] = None):
        """
        Args:
            send: Coroutine function delivering one (key, value) write.
                Failures are expected as RemoteError.
            on_delivered: Awaited after every successful write.
        """
        self._send = send
        self._on_delivered = on_delivered
        self._pending: dict[str, PendingDelivery] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self.sent: Counter[str] = Counter()
        self.failed: Counter[str] = Counter()

    def submit(self, key: str, value: int):
        """Record ``value`` as the latest for ``key`` and make sure it gets sent.

        Returns immediately. Must be called from the event loop thread.
        """
        slot = self._pending.get(key)
        if slot is None:
            slot = self._pending[key] = PendingDelivery()
        slot.latest_value = value

        if slot.in_flight:
            # The running loop re-checks latest_value after its send
            return

        slot.in_flight = True
        task = asyncio.get_running_loop().create_task(self._deliver(key, slot))
        self._tasks[key] = task
        task.add_done_callback(lambda t, key=key: self._forget(key, t))

    def pending(self, key: str) -> Optional[PendingDelivery]:
        """Get the conflation slot for ``key`` (None if never edited)."""
        return self._pending.get(key)

    def in_flight(self, key: str) -> bool:
        slot = self._pending.get(key)
        return slot is not None and slot.in_flight

    @property
    def idle(self) -> bool:
        return not self._tasks

    async def wait_idle(self):
        """Wait until every delivery loop has drained."""
        while self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)

    async def close(self):
        """Cancel running delivery loops (shutdown)."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        # A loop cancelled before its first step never reaches its finally
        for slot in self._pending.values():
            slot.in_flight = False

    async def _deliver(self, key: str, slot: PendingDelivery):
        try:
            while slot.latest_value is not None:
                value = slot.latest_value
                slot.latest_value = None

                try:
                    await self._send(key, value)
                except RemoteError as e:
                    # Not retried: a newer edit, if any, supersedes it below
                    self.failed[key] += 1
                    logger.error(f"Error updating {key}={value}: {e}")
                    continue
                except Exception as e:
                    self.failed[key] += 1
                    logger.error(f"Unexpected error updating {key}={value}: {e!r}", exc_info=True)
                    continue

                self.sent[key] += 1
                logger.debug(f"Delivered {key}={value}")
                if self._on_delivered is not None:
                    try:
                        await self._on_delivered(key, value)
                    except Exception as e:
                        logger.error(f"Post-delivery hook failed for {key}={value}: {e}", exc_info=True)
        finally:
            slot.in_flight = False

    def _forget(self, key: str, task: asyncio.Task):
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Delivery loop for {key} crashed: {task.exception()!r}")
