"""Shared fixtures for update_state tests."""

from typing import Any, Callable, Dict, List

import httpx
import pytest

from update_state import StateStorage


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingTransport:
    """Routes requests by URL path and records every request seen."""

    def __init__(self, routes: Dict[str, Callable[[httpx.Request], httpx.Response]]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"message": "not found"})
        return handler(request)

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)


def json_route(payload: Any, status: int = 200):
    return lambda request: httpx.Response(status, json=payload)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage(tmp_path):
    return StateStorage(tmp_path / "update_state.json")

