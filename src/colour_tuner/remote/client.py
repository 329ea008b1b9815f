"""
Remote authority client - aiohttp wrapper for the tuning server's API.

Endpoints:
  GET  /api/slider?t=<token>         -> {"hueMin": 0, "hueMax": 179, ...}
  POST /api/slider                   <- {"sliderName": ..., "sliderValue": ...}
  GET  /api/originalImage?t=<token>  -> image bytes
  GET  /api/modifiedImage?t=<token>  -> image bytes
  POST /api/submitColour             <- plain-text colour name

Any transport error, timeout or non-2xx status is raised as RemoteError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

import aiohttp

from ..config import BASE_URL, SLIDER_PATH, SUBMIT_PATH

logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """A request to the remote authority failed."""

    def __init__(self, operation: str, message: str, status: Optional[int] = None):
        self.operation = operation
        self.status = status
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"{operation} failed{detail}: {message}")


class CacheBuster:
    """Strictly increasing tokens for the ``t`` query parameter.

    Based on wall-clock milliseconds; two calls in the same millisecond
    still get distinct tokens.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0

    def next(self) -> int:
        token = max(int(self._clock() * 1000), self._last + 1)
        self._last = token
        return token


class RemoteAuthority:
    """
    Async HTTP client for the tuning server.

    The aiohttp session is created on first use and reused for every
    request until close().

    Usage:
        async with RemoteAuthority("http://localhost:8080") as remote:
            snapshot = await remote.fetch_snapshot()
            await remote.send_parameter("hueMin", 40)
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: Optional[float] = None,
        cache_buster: Optional[CacheBuster] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.cache_buster = cache_buster or CacheBuster()
        # None keeps aiohttp's default timeout
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> RemoteAuthority:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            if self._timeout is not None:
                self._session = aiohttp.ClientSession(timeout=self._timeout)
            else:
                self._session = aiohttp.ClientSession()
        return self._session

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> bytes:
        session = self._get_session()
        try:
            async with session.request(method, self.url(path), **kwargs) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    raise RemoteError(operation, resp.reason or "unexpected status", resp.status)
                return body
        except aiohttp.ClientError as e:
            raise RemoteError(operation, str(e)) from e
        except asyncio.TimeoutError as e:
            raise RemoteError(operation, "timed out") from e

    async def fetch_snapshot(self) -> dict[str, int]:
        """GET /api/slider - Current value of every slider."""
        session = self._get_session()
        params = {"t": str(self.cache_buster.next())}
        try:
            async with session.get(self.url(SLIDER_PATH), params=params) as resp:
                if not 200 <= resp.status < 300:
                    raise RemoteError("snapshot", resp.reason or "unexpected status", resp.status)
                data = await resp.json(content_type=None)
        except aiohttp.ClientError as e:
            raise RemoteError("snapshot", str(e)) from e
        except asyncio.TimeoutError as e:
            raise RemoteError("snapshot", "timed out") from e
        except ValueError as e:
            raise RemoteError("snapshot", f"invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RemoteError("snapshot", f"expected a JSON object, got {type(data).__name__}")
        return data

    async def send_parameter(self, key: str, value: int):
        """POST /api/slider - Write one slider value."""
        await self._request(
            "slider update",
            "POST",
            SLIDER_PATH,
            json={"sliderName": key, "sliderValue": value},
        )

    async def fetch_artifact(self, name: str, token: Optional[int] = None) -> bytes:
        """GET /api/<name> - Raw image bytes.

        Args:
            name: Artifact name, e.g. "originalImage".
            token: Cache-buster to use; a fresh one is drawn if omitted.
        """
        if token is None:
            token = self.cache_buster.next()
        return await self._request(name, "GET", f"/api/{name}", params={"t": str(token)})

    async def submit_colour(self, name: str):
        """POST /api/submitColour - Persist the current bounds under ``name``."""
        await self._request(
            "submit colour",
            "POST",
            SUBMIT_PATH,
            data=name.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )

    async def close(self):
        """Close the underlying HTTP session."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
