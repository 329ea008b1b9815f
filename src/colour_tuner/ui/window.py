"""
Interactive tuning window.

Drag the trackbars and watch the server's modified image follow. Every
trackbar event goes through the session, so the server only ever sees the
latest value of each slider.

Controls:
  - 'p' to print the ColourObj snippet to the terminal
  - 'n' to type a colour name in the terminal (windows keep updating)
  - 'c' to commit the current bounds under that name
  - 'q' to quit
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Optional

import cv2

from ..config import (
    CONTROLS_WINDOW,
    MODIFIED_IMAGE,
    MODIFIED_WINDOW,
    ORIGINAL_IMAGE,
    ORIGINAL_WINDOW,
    UI_POLL_INTERVAL,
)
from ..pipeline import Artifact
from ..session import TunerSession

logger = logging.getLogger(__name__)

ARTIFACT_WINDOWS = {
    ORIGINAL_IMAGE: ORIGINAL_WINDOW,
    MODIFIED_IMAGE: MODIFIED_WINDOW,
}


class TunerWindow:
    """
    OpenCV HighGUI front end for a TunerSession.

    The HighGUI event pump runs as a coroutine on the session's event loop,
    so trackbar callbacks are ordinary synchronous calls on the loop thread.

    Usage:
        window = TunerWindow(session)
        window.open()
        await session.start()
        await window.run()
    """

    def __init__(self, session: TunerSession, poll_interval: float = UI_POLL_INTERVAL):
        self.session = session
        self.poll_interval = poll_interval
        self._running = False
        self._moving = False  # True while the engine moves a trackbar
        self._name_task: Optional[asyncio.Task] = None

    def open(self):
        """Create the windows and one trackbar per bound."""
        cv2.namedWindow(CONTROLS_WINDOW)
        for pair in self.session.state.pairs:
            for key in pair.keys():
                cv2.createTrackbar(
                    key,
                    CONTROLS_WINDOW,
                    self.session.state[key],
                    pair.limit,
                    partial(self._on_trackbar, key),
                )
        self.session.engine.subscribe(readout=self._on_readout)
        self.session.refresher.subscribe(self._on_artifact)

    async def run(self):
        """Pump HighGUI events until 'q' is pressed."""
        self._running = True
        print("Keys: p = print snippet, n = set name, c = commit, q = quit")
        try:
            while self._running:
                key = cv2.waitKey(1) & 0xFF
                if key != 0xFF:
                    await self.handle_key(key)
                await asyncio.sleep(self.poll_interval)
        finally:
            cv2.destroyAllWindows()

    def stop(self):
        self._running = False

    async def handle_key(self, key: int):
        """React to one key press."""
        if key == ord("q"):
            self.stop()
        elif key == ord("p"):
            print(self.session.engine.snippet)
            print()
        elif key == ord("n"):
            # Prompt in the background so the previews keep refreshing
            if self._name_task is None or self._name_task.done():
                self._name_task = asyncio.get_running_loop().create_task(self._read_name())
        elif key == ord("c"):
            await self.session.commit()

    async def _read_name(self):
        loop = asyncio.get_running_loop()
        name = await loop.run_in_executor(None, input, "Colour name: ")
        self.session.on_name_input(name)
        print(self.session.engine.snippet)

    def _on_trackbar(self, key: str, position: int):
        if self._moving or position == self.session.state[key]:
            return
        self.session.on_slider_input(key, position)

    def _on_readout(self, key: str, value: int):
        # Engine moved a bound (pair correction or snapshot seed)
        if cv2.getTrackbarPos(key, CONTROLS_WINDOW) == value:
            return
        self._moving = True
        try:
            cv2.setTrackbarPos(key, CONTROLS_WINDOW, value)
        finally:
            self._moving = False

    def _on_artifact(self, artifact: Artifact):
        window = ARTIFACT_WINDOWS.get(artifact.name)
        if window is None:
            logger.debug(f"No window for {artifact.name}")
            return
        cv2.imshow(window, artifact.image)
