"""
Visual refresh pipeline - re-fetches the preview images.

Runs after every accepted slider write. Both images are requested with the
same fresh cache-buster token; a failed fetch leaves the previous image in
place until the next refresh.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import cv2
import numpy as np

from ..config import ARTIFACT_NAMES
from ..remote import RemoteAuthority, RemoteError

logger = logging.getLogger(__name__)


@dataclass
class Artifact:
    """Latest fetched copy of one server-rendered image."""

    name: str  # "originalImage" or "modifiedImage"
    token: int  # Cache-buster it was requested with
    data: bytes  # Encoded bytes as served
    image: np.ndarray  # Decoded BGR image


ArtifactListener = Callable[[Artifact], None]


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes (JPEG/PNG) to a BGR array, or None."""
    if not data:
        return None
    buf = np.frombuffer(data, dtype=np.uint8)
    return cv2.imdecode(buf, cv2.IMREAD_COLOR)


class VisualRefreshPipeline:
    """
    Keeps the latest copy of each preview image.

    Usage:
        refresh = VisualRefreshPipeline(remote)
        refresh.subscribe(lambda artifact: show(artifact.image))
        await refresh.refresh()
    """

    def __init__(self, remote: RemoteAuthority, names: tuple[str, ...] = ARTIFACT_NAMES):
        self.remote = remote
        self.names = names
        self.artifacts: dict[str, Artifact] = {}
        self.refresh_count = 0
        self._listeners: list[ArtifactListener] = []

    def subscribe(self, listener: ArtifactListener):
        self._listeners.append(listener)

    async def refresh(self) -> int:
        """Request every image with a new cache-buster.

        Returns:
            Number of images that were updated.
        """
        self.refresh_count += 1
        token = self.remote.cache_buster.next()
        results = await asyncio.gather(
            *(self._fetch(name, token) for name in self.names)
        )
        return sum(results)

    async def after_delivery(self, key: str, value: int):
        """Dispatcher hook: one refresh per accepted write."""
        await self.refresh()

    async def _fetch(self, name: str, token: int) -> bool:
        try:
            data = await self.remote.fetch_artifact(name, token)
        except RemoteError as e:
            logger.warning(f"Keeping stale {name}: {e}")
            return False

        image = decode_image(data)
        if image is None:
            logger.warning(f"Keeping stale {name}: could not decode {len(data)} bytes")
            return False

        artifact = Artifact(name=name, token=token, data=data, image=image)
        self.artifacts[name] = artifact
        for listener in self._listeners:
            listener(artifact)
        return True
