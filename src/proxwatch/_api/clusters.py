"""Cluster endpoints under ``/api/v1/clusters``.

Each function performs exactly one round trip through a
:class:`~proxwatch._transport.Transport` and validates the decoded body
into its response model.
"""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from proxwatch._constants import API_PREFIX
from proxwatch._transport import Transport
from proxwatch.exceptions import ResponseDecodeError
from proxwatch.models.cluster import Cluster, ClusterList, RegisterClusterRequest
from proxwatch.models.disk import ClusterDisks
from proxwatch.models.monitoring import ClusterStatus

M = TypeVar("M", bound=BaseModel)

CLUSTERS_PATH = f"{API_PREFIX}/clusters"


def cluster_path(cluster_id: str, *suffix: str) -> str:
    """Build ``/api/v1/clusters/{id}[/suffix...]`` with a validated, quoted id."""
    normalized = str(cluster_id).strip()
    if not normalized:
        raise ValueError("cluster_id must be non-empty")
    return "/".join((CLUSTERS_PATH, quote(normalized, safe=""), *suffix))


def _decode(model: type[M], payload: Any, endpoint: str) -> M:
    if not isinstance(payload, dict):
        raise ResponseDecodeError(
            f"{endpoint} returned {type(payload).__name__}, expected an object",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ResponseDecodeError(
            f"{endpoint} response does not match {model.__name__}: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


async def list_clusters(transport: Transport) -> ClusterList:
    payload = await transport.invoke(CLUSTERS_PATH)
    return _decode(ClusterList, payload, CLUSTERS_PATH)


async def register_cluster(transport: Transport, request: RegisterClusterRequest) -> Cluster:
    """Register a cluster; the backend verifies the credentials before answering."""
    payload = await transport.invoke(CLUSTERS_PATH, method="POST", body=request.model_dump())
    return _decode(Cluster, payload, CLUSTERS_PATH)


async def get_cluster(transport: Transport, cluster_id: str) -> Cluster:
    endpoint = cluster_path(cluster_id)
    payload = await transport.invoke(endpoint)
    return _decode(Cluster, payload, endpoint)


async def delete_cluster(transport: Transport, cluster_id: str) -> None:
    """Deregister a cluster. Success is signalled by the absence of an error."""
    await transport.invoke(cluster_path(cluster_id), method="DELETE")


async def get_cluster_disks(transport: Transport, cluster_id: str) -> ClusterDisks:
    endpoint = cluster_path(cluster_id, "disks")
    payload = await transport.invoke(endpoint)
    return _decode(ClusterDisks, payload, endpoint)


async def get_cluster_status(transport: Transport, cluster_id: str) -> ClusterStatus:
    endpoint = cluster_path(cluster_id, "status")
    payload = await transport.invoke(endpoint)
    return _decode(ClusterStatus, payload, endpoint)
