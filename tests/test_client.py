from __future__ import annotations

from typing import Any

import aiohttp
import pytest

from proxwatch.client import ProxwatchClient
from proxwatch.config import ProxwatchConfig
from proxwatch.exceptions import ConflictError, NotFoundError, ProxwatchError, RequestFailedError
from proxwatch.models import ClusterStatus


def _registry(transport: Any) -> list[dict[str, Any]]:
    """Wire an in-memory cluster registry into *transport*."""
    clusters: list[dict[str, Any]] = [{"id": "c-1", "name": "lab", "status": "healthy"}]

    def _list(_body: Any) -> dict[str, Any]:
        return {"clusters": list(clusters), "total": len(clusters)}

    def _register(body: dict[str, Any]) -> Any:
        if any(c["name"] == body["name"] for c in clusters):
            return ConflictError("Cluster already exists", status_code=409, code="Conflict")
        cluster = {"id": f"c-{len(clusters) + 1}", "name": body["name"], "api_endpoint": body["api_endpoint"]}
        clusters.append(cluster)
        return cluster

    def _delete(_body: Any) -> None:
        clusters[:] = [c for c in clusters if c["id"] != "c-1"]

    transport.routes[("GET", "/api/v1/clusters")] = _list
    transport.routes[("POST", "/api/v1/clusters")] = _register
    transport.routes[("DELETE", "/api/v1/clusters/c-1")] = _delete
    return clusters


@pytest.mark.asyncio
async def test_requires_context_without_transport() -> None:
    client = ProxwatchClient()
    with pytest.raises(ProxwatchError, match="not initialized"):
        await client.list_clusters()
    with pytest.raises(ProxwatchError):
        client.poll_cluster_status("c-1")


@pytest.mark.asyncio
async def test_reads_go_through_transport(fake_transport, status_payload) -> None:
    _registry(fake_transport)
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/status")] = lambda _body: status_payload

    async with ProxwatchClient(transport=fake_transport) as client:
        clusters = await client.list_clusters()
        status = await client.get_cluster_status("c-1")

    assert clusters.total == 1
    assert isinstance(status, ClusterStatus)
    assert [method for method, _path, _body in fake_transport.requests] == ["GET", "GET"]


@pytest.mark.asyncio
async def test_register_validates_locally_before_sending(fake_transport) -> None:
    _registry(fake_transport)

    async with ProxwatchClient(transport=fake_transport) as client:
        with pytest.raises(ValueError):
            await client.register_cluster(name="lab2", api_endpoint="not a url", username="root@pam", password="pw")
        assert fake_transport.requests == []

        cluster = await client.register_cluster(
            name="lab2",
            api_endpoint="https://pve2.lab:8006",
            username="root@pam",
            password="pw",
        )
        assert cluster.id == "c-2"

        with pytest.raises(ConflictError):
            await client.register_cluster(
                name="lab2",
                api_endpoint="https://pve2.lab:8006",
                username="root@pam",
                password="pw",
            )


@pytest.mark.asyncio
async def test_write_then_refetch_updates_watched_list(fake_transport) -> None:
    _registry(fake_transport)

    async with ProxwatchClient(transport=fake_transport) as client:
        clusters = client.watch_clusters()
        state = await clusters.wait_settled()
        assert [c.id for c in state.data.clusters] == ["c-1"]

        await client.delete_cluster("c-1")
        # Writes never touch controller state on their own.
        assert [c.id for c in clusters.data.clusters] == ["c-1"]

        clusters.refetch()
        state = await clusters.wait_settled()
        assert state.data.clusters == []
        assert state.error is None


@pytest.mark.asyncio
async def test_watch_cluster_surfaces_typed_error(fake_transport) -> None:
    error = NotFoundError("Cluster not found", status_code=404, code="Not Found")
    async with ProxwatchClient(transport=fake_transport) as client:
        fake_transport.routes[("GET", "/api/v1/clusters/gone")] = lambda _body: error
        controller = client.watch_cluster("gone")
        state = await controller.wait_settled()

    assert state.data is None
    assert state.error is error


@pytest.mark.asyncio
async def test_watch_cluster_with_blank_id_reports_typed_error(fake_transport) -> None:
    async with ProxwatchClient(transport=fake_transport) as client:
        controller = client.watch_cluster("  ")
        state = await controller.wait_settled()

    assert isinstance(state.error, RequestFailedError)
    assert state.error.status_code is None
    assert isinstance(state.error.__cause__, ValueError)
    assert fake_transport.requests == []


@pytest.mark.asyncio
async def test_poll_cluster_status_uses_configured_interval(fake_transport, status_payload) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/status")] = lambda _body: status_payload
    config = ProxwatchConfig(status_poll_interval_ms=45_000)

    async with ProxwatchClient(config, transport=fake_transport) as client:
        default = client.poll_cluster_status("c-1")
        explicit = client.poll_cluster_status("c-1", interval_ms=0)

        assert default.interval_ms == 45_000
        assert default.active
        assert explicit.interval_ms == 0
        assert not explicit.active

        state = await default.wait_settled()
        assert state.data is not None
        assert state.data.cluster_id == "c-1"
        assert default.last_updated is not None

    assert default.closed
    assert explicit.closed
    assert not default.active


@pytest.mark.asyncio
async def test_context_exit_closes_every_controller(fake_transport, status_payload) -> None:
    _registry(fake_transport)
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/status")] = lambda _body: status_payload

    async with ProxwatchClient(transport=fake_transport) as client:
        controllers = [client.watch_clusters(), client.poll_cluster_status("c-1")]

    assert all(controller.closed for controller in controllers)
    for controller in controllers:
        state = await controller.wait_settled()
        assert state.data is None


@pytest.mark.asyncio
async def test_owned_session_is_closed_on_exit() -> None:
    async with ProxwatchClient() as client:
        session = client._http_session
        assert isinstance(session, aiohttp.ClientSession)
    assert session.closed


@pytest.mark.asyncio
async def test_external_session_is_left_open() -> None:
    async with aiohttp.ClientSession() as session:
        async with ProxwatchClient(session=session):
            pass
        assert not session.closed
