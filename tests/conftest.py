"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • authority: fake tuning server (aiohttp) recording every request
  • remote: RemoteAuthority pointed at the fake server
  • png_bytes: a small encoded PNG
"""

from __future__ import annotations

import asyncio
from collections import Counter

import cv2
import numpy as np
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from colour_tuner.remote import RemoteAuthority, RemoteError


def make_png(width: int = 6, height: int = 4, bgr=(255, 255, 255)) -> bytes:
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = bgr
    ok, buf = cv2.imencode(".png", image)
    assert ok
    return buf.tobytes()


@pytest.fixture
def png_bytes():
    return make_png()


# ---------------------------------------------------------------------------
# In-memory sender for dispatcher timing tests
# ---------------------------------------------------------------------------

class GatedSender:
    """Stand-in for RemoteAuthority.send_parameter.

    Every call blocks on ``gate`` until the test opens it, so a test decides
    exactly when a write "completes".
    """

    def __init__(self, open_gate: bool = True):
        self.gate = asyncio.Event()
        if open_gate:
            self.gate.set()
        self.calls: list[tuple[str, int]] = []
        self.fail_values: set[int] = set()
        self.fail_with: Exception = RemoteError("slider update", "Internal Server Error", 500)
        self.in_flight: Counter[str] = Counter()
        self.max_in_flight: Counter[str] = Counter()

    @property
    def total_in_flight(self) -> int:
        return sum(self.in_flight.values())

    async def __call__(self, key: str, value: int):
        self.in_flight[key] += 1
        self.max_in_flight[key] = max(self.max_in_flight[key], self.in_flight[key])
        self.calls.append((key, value))
        try:
            await self.gate.wait()
            if value in self.fail_values:
                raise self.fail_with
        finally:
            self.in_flight[key] -= 1

    def values_for(self, key: str) -> list[int]:
        return [v for k, v in self.calls if k == key]


# ---------------------------------------------------------------------------
# Fake tuning server
# ---------------------------------------------------------------------------

class FakeAuthority:
    """aiohttp app implementing the tuning server's API."""

    def __init__(self, image: bytes):
        self.image = image
        self.values = {
            "hueMin": 0, "hueMax": 179,
            "satMin": 0, "satMax": 255,
            "valMin": 0, "valMax": 255,
        }
        self.url = ""
        self.snapshot_tokens: list[str] = []
        self.slider_posts: list[tuple[str, int]] = []
        self.image_requests: list[tuple[str, str]] = []
        self.commits: list[str] = []
        self.commit_content_types: list[str] = []
        # path -> status to answer with instead of 200
        self.fail: dict[str, int] = {}
        # (method, path) -> seconds to stall before answering
        self.slow: dict[tuple[str, str], float] = {}
        self.slider_attempts: list[tuple[str, int]] = []
        self.slider_gate: asyncio.Event | None = None
        self.in_flight = 0
        self.max_in_flight = 0

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/slider", self.slider_get)
        app.router.add_post("/api/slider", self.slider_post)
        app.router.add_get("/api/originalImage", self.image_get)
        app.router.add_get("/api/modifiedImage", self.image_get)
        app.router.add_post("/api/submitColour", self.submit)
        return app

    async def _stall(self, request):
        delay = self.slow.get((request.method, request.path))
        if delay:
            await asyncio.sleep(delay)

    def reset_records(self):
        self.slider_attempts.clear()
        self.snapshot_tokens.clear()
        self.slider_posts.clear()
        self.image_requests.clear()
        self.commits.clear()

    async def slider_get(self, request):
        self.snapshot_tokens.append(request.query.get("t", ""))
        await self._stall(request)
        if request.path in self.fail:
            return web.Response(status=self.fail[request.path])
        return web.json_response(self.values)

    async def slider_post(self, request):
        data = await request.json()
        self.slider_attempts.append((data["sliderName"], data["sliderValue"]))
        await self._stall(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.slider_gate is not None:
                await self.slider_gate.wait()
            self.slider_posts.append((data["sliderName"], data["sliderValue"]))
            if "/api/slider" in self.fail:
                return web.Response(status=self.fail["/api/slider"])
            self.values[data["sliderName"]] = int(data["sliderValue"])
            return web.Response(status=200)
        finally:
            self.in_flight -= 1

    async def image_get(self, request):
        name = request.path.rsplit("/", 1)[-1]
        self.image_requests.append((name, request.query.get("t", "")))
        await self._stall(request)
        if request.path in self.fail:
            return web.Response(status=self.fail[request.path])
        return web.Response(body=self.image, content_type="image/png")

    async def submit(self, request):
        self.commit_content_types.append(request.content_type)
        self.commits.append(await request.text())
        if request.path in self.fail:
            return web.Response(status=self.fail[request.path])
        return web.Response(status=200)

    async def wait_for_attempts(self, count: int = 1, timeout: float = 2.0):
        """Wait until ``count`` slider posts have reached the server."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while len(self.slider_attempts) < count:
            if loop.time() > deadline:
                raise AssertionError(f"expected {count} slider posts, have {len(self.slider_attempts)}")
            await asyncio.sleep(0.005)

    async def wait_for_in_flight(self, count: int = 1, timeout: float = 2.0):
        """Wait until ``count`` slider posts are blocked on the gate."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self.in_flight < count:
            if loop.time() > deadline:
                raise AssertionError(f"expected {count} in-flight posts, have {self.in_flight}")
            await asyncio.sleep(0.005)


@pytest_asyncio.fixture
async def authority(png_bytes):
    fake = FakeAuthority(png_bytes)
    server = TestServer(fake.app())
    await server.start_server()
    fake.url = str(server.make_url("/"))
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def remote(authority):
    client = RemoteAuthority(authority.url)
    yield client
    await client.close()


@pytest.fixture
def make_sender():
    """Factory for GatedSender; call it from inside the running test."""
    return GatedSender
