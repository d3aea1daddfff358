"""Shared test fixtures for tensorlake_cloud.

HTTP traffic is faked with :class:`httpx.MockTransport`: each test supplies
a handler that inspects the outgoing :class:`httpx.Request` and returns the
response the server would send. The handler sees exactly what went over
the wire, so tests assert paths, query strings, headers and bodies
directly.
"""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

from tensorlake_cloud import CloudClient
from tensorlake_cloud.output import reset_output

BASE_URL = "https://api.example.com"
API_KEY = "test-token"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests silent and independent of the caller's environment."""
    monkeypatch.delenv("TENSORLAKE_DEBUG", raising=False)
    reset_output()
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Build an httpx.Response with a JSON body."""
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": "application/json"},
        content=json.dumps(data).encode("utf-8"),
    )


class RecordingHandler:
    """MockTransport handler that records requests and replays queued responses.

    Responses may be :class:`httpx.Response` objects, callables taking the
    request, or exceptions to raise.
    """

    def __init__(self, *responses: Any) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def queue(self, *responses: Any) -> None:
        self._responses.extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(request)
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_client() -> Callable[[Handler], CloudClient]:
    """Factory returning a CloudClient wired to a MockTransport handler."""

    def _make(handler: Handler, **kwargs: Any) -> CloudClient:
        return CloudClient(
            BASE_URL,
            API_KEY,
            transport=httpx.MockTransport(handler),
            **kwargs,
        )

    return _make


@pytest_asyncio.fixture
async def recorder() -> AsyncIterator[RecordingHandler]:
    yield RecordingHandler()


@pytest_asyncio.fixture
async def client(
    recorder: RecordingHandler,
    make_client: Callable[[Handler], CloudClient],
) -> AsyncIterator[CloudClient]:
    """A CloudClient whose traffic goes to the ``recorder`` fixture."""
    async with make_client(recorder) as c:
        yield c
