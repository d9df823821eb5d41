"""Shared test fixtures and configuration."""

from typing import Callable, Optional

import httpx
import pytest

from og_preview.cache import MetadataCache
from og_preview.config import FetchConfig
from og_preview.service import MetadataService

OG_PAGE = """<!doctype html>
<html>
<head>
  <title>Example Page</title>
  <meta property="og:image" content="https://example.com/a.png">
  <meta property="og:title" content="Example">
</head>
<body><p>Hello</p></body>
</html>
"""

PLAIN_PAGE = "<html><head><title>No preview here</title></head><body></body></html>"

ALLORIGINS = "api.allorigins.win"
CODETABS = "api.codetabs.com"
CORSPROXY = "corsproxy.org"


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep stand-in that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class RelayStub:
    """MockTransport handler that records requests and delegates responses."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def hosts(self) -> list[str]:
        return [request.url.host for request in self.requests]


def og_everywhere(request: httpx.Request) -> httpx.Response:
    """Every relay answers with OG_PAGE in its own response shape."""
    if request.url.host == ALLORIGINS:
        return httpx.Response(200, json={"contents": OG_PAGE})
    return httpx.Response(200, text=OG_PAGE)


def always_503(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, text="unavailable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def cache(clock: FakeClock) -> MetadataCache:
    return MetadataCache(ttl=1800, max_entries=100, clock=clock)


@pytest.fixture
def fetch_config() -> FetchConfig:
    return FetchConfig(timeout=5.0, retry_attempts=1, retry_delay=2.0)


@pytest.fixture
def make_service(cache: MetadataCache, sleep: RecordingSleep, fetch_config: FetchConfig):
    """Build a MetadataService whose network is a RelayStub."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        config: Optional[FetchConfig] = None,
    ) -> tuple[MetadataService, RelayStub]:
        stub = RelayStub(handler)
        client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        service = MetadataService(
            config=config or fetch_config,
            cache=cache,
            client=client,
            sleep=sleep,
        )
        return service, stub

    return _make
