from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from proxwatch._api import clusters as clusters_api
from proxwatch.exceptions import NotFoundError, ResponseDecodeError
from proxwatch.models import ClusterHealth, NodeState, RegisterClusterRequest


def _cluster(**overrides: Any) -> dict[str, Any]:
    payload = {
        "id": "c-1",
        "name": "lab",
        "api_endpoint": "https://pve.lab:8006",
        "status": "healthy",
        "proxmox_version": "8.2.4",
        "node_count": 2,
        "created_at": "2026-10-01T08:00:00Z",
        "updated_at": "2026-10-19T11:59:00Z",
    }
    payload.update(overrides)
    return payload


# ------------------------------------------------------------------
# Paths
# ------------------------------------------------------------------


class TestClusterPath:
    def test_plain_id(self) -> None:
        assert clusters_api.cluster_path("c-1") == "/api/v1/clusters/c-1"

    def test_suffix(self) -> None:
        assert clusters_api.cluster_path("c-1", "status") == "/api/v1/clusters/c-1/status"

    def test_id_is_quoted(self) -> None:
        assert clusters_api.cluster_path("a/b c") == "/api/v1/clusters/a%2Fb%20c"

    @pytest.mark.parametrize("cluster_id", ["", "   "])
    def test_empty_id_is_rejected(self, cluster_id: str) -> None:
        with pytest.raises(ValueError):
            clusters_api.cluster_path(cluster_id)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_clusters(fake_transport) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters")] = lambda _body: {
        "clusters": [_cluster(), _cluster(id="c-2", status="unreachable")],
        "total": 2,
    }

    result = await clusters_api.list_clusters(fake_transport)

    assert result.total == 2
    assert [c.id for c in result.clusters] == ["c-1", "c-2"]
    assert result.clusters[0].is_healthy
    assert result.clusters[1].status is ClusterHealth.UNKNOWN


@pytest.mark.asyncio
async def test_register_cluster_posts_request_body(fake_transport) -> None:
    fake_transport.routes[("POST", "/api/v1/clusters")] = lambda body: _cluster(name=body["name"])
    request = RegisterClusterRequest(
        name="lab",
        api_endpoint="https://pve.lab:8006",
        username="root@pam",
        password="secret",
    )

    cluster = await clusters_api.register_cluster(fake_transport, request)

    assert cluster.name == "lab"
    assert fake_transport.requests == [
        (
            "POST",
            "/api/v1/clusters",
            {
                "name": "lab",
                "api_endpoint": "https://pve.lab:8006",
                "username": "root@pam",
                "password": "secret",
            },
        )
    ]


@pytest.mark.asyncio
async def test_get_cluster(fake_transport) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters/c-1")] = lambda _body: _cluster()

    cluster = await clusters_api.get_cluster(fake_transport, "c-1")

    assert cluster.id == "c-1"
    assert cluster.node_count == 2
    assert cluster.created_at is not None
    assert cluster.raw["proxmox_version"] == "8.2.4"


@pytest.mark.asyncio
async def test_delete_cluster_returns_none(fake_transport) -> None:
    fake_transport.routes[("DELETE", "/api/v1/clusters/c-1")] = lambda _body: None

    assert await clusters_api.delete_cluster(fake_transport, "c-1") is None
    assert fake_transport.requests == [("DELETE", "/api/v1/clusters/c-1", None)]


@pytest.mark.asyncio
async def test_get_cluster_disks(fake_transport) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/disks")] = lambda _body: {
        "cluster_id": "c-1",
        "cluster_name": "lab",
        "nodes": [
            {
                "node_name": "pve1",
                "status": "online",
                "disks": [
                    {"device": "/dev/nvme0n1", "type": "nvme", "size": 1024**4, "health": "PASSED", "wearout": 98},
                    {"device": "/dev/sda", "type": "hdd", "size": 4 * 1024**4, "health": None},
                ],
            },
            {"node_name": "pve2", "status": "offline", "disks": None, "error": "node unreachable"},
        ],
        "total_disks": 2,
    }

    result = await clusters_api.get_cluster_disks(fake_transport, "c-1")

    nvme, hdd = result.nodes[0].disks
    assert nvme.smart_passed
    assert nvme.wearout == 98
    assert hdd.health == "UNKNOWN"
    assert hdd.wearout == -1
    assert result.nodes[1].status is NodeState.OFFLINE
    assert result.nodes[1].disks == []
    assert result.nodes[1].error == "node unreachable"


@pytest.mark.asyncio
async def test_get_cluster_status(fake_transport, status_payload) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/status")] = lambda _body: status_payload

    status = await clusters_api.get_cluster_status(fake_transport, "c-1")

    assert status.cluster_name == "lab"
    assert [node.node_name for node in status.online_nodes] == ["pve1"]


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged(fake_transport) -> None:
    error = NotFoundError("Cluster not found", status_code=404, code="Not Found")
    fake_transport.routes[("GET", "/api/v1/clusters/missing")] = lambda _body: error

    with pytest.raises(NotFoundError) as exc_info:
        await clusters_api.get_cluster(fake_transport, "missing")
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_non_object_payload_raises_decode_error(fake_transport) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters")] = lambda _body: ["not", "an", "object"]

    with pytest.raises(ResponseDecodeError) as exc_info:
        await clusters_api.list_clusters(fake_transport)
    assert exc_info.value.endpoint == "/api/v1/clusters"


@pytest.mark.asyncio
async def test_invalid_payload_raises_decode_error(fake_transport) -> None:
    fake_transport.routes[("GET", "/api/v1/clusters/c-1/status")] = lambda _body: {"nodes": []}

    with pytest.raises(ResponseDecodeError) as exc_info:
        await clusters_api.get_cluster_status(fake_transport, "c-1")
    assert isinstance(exc_info.value.__cause__, ValidationError)
    assert exc_info.value.endpoint == "/api/v1/clusters/c-1/status"
