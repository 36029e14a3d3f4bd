from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest


class ScriptedFetcher:
    """Producer whose calls stay pending until the test settles them."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.futures: list[asyncio.Future[Any]] = []

    async def __call__(self, *key: Any) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.calls.append(key)
        self.futures.append(future)
        return await future

    def resolve(self, index: int, value: Any) -> None:
        self.futures[index].set_result(value)

    def fail(self, index: int, error: BaseException) -> None:
        self.futures[index].set_exception(error)


class FakeTransport:
    """In-memory transport answering from a ``(method, path) -> handler`` table."""

    def __init__(self, routes: dict[tuple[str, str], Callable[[Any], Any]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[tuple[str, str, Any]] = []

    async def invoke(self, path: str, *, method: str = "GET", body: Any = None) -> Any:
        self.requests.append((method, path, body))
        handler = self.routes[(method, path)]
        result = handler(body)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def scripted() -> ScriptedFetcher:
    return ScriptedFetcher()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def status_payload() -> dict[str, Any]:
    return {
        "cluster_id": "c-1",
        "cluster_name": "lab",
        "nodes": [
            {
                "node_name": "pve1",
                "status": "online",
                "cpu_usage": 12.5,
                "memory_used": 8 * 1024**3,
                "memory_total": 32 * 1024**3,
                "memory_usage": 25.0,
                "swap_used": 0,
                "swap_total": 4 * 1024**3,
                "swap_usage": 0.0,
                "uptime": 93784,
                "load_avg": [0.5, 0.4, 0.3],
            },
            {
                "node_name": "pve2",
                "status": "offline",
                "load_avg": [],
                "error": "node unreachable",
            },
        ],
        "resource_summary": {"total_vms": 4, "running_vms": 3, "total_containers": 2, "running_containers": 1},
        "fetched_at": "2026-10-19T12:00:00Z",
    }
