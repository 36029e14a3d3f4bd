"""Live cluster status models (``GET /api/v1/clusters/{id}/status``).

This is the resource tracked by the polling controller.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from proxwatch.models._base import ProxwatchBaseModel
from proxwatch.models._health import NodeState


class NodeStatus(ProxwatchBaseModel):
    """Point-in-time health of one Proxmox node.

    Percentages are in the ``0-100`` range, sizes in bytes and uptime in
    seconds.  ``error`` is set when the backend could not query the node;
    the numeric fields are then zero.
    """

    node_name: str
    status: NodeState = NodeState.UNKNOWN
    cpu_usage: float = 0.0
    memory_used: int = 0
    memory_total: int = 0
    memory_usage: float = 0.0
    swap_used: int = 0
    swap_total: int = 0
    swap_usage: float = 0.0
    uptime: int = 0
    load_avg: tuple[float, float, float] = (0.0, 0.0, 0.0)
    """Load average over 1, 5 and 15 minutes."""
    error: str | None = None

    @field_validator("load_avg", mode="before")
    @classmethod
    def _pad_load_avg(cls, value: object) -> object:
        # Offline nodes report an empty list.
        if isinstance(value, (list, tuple)) and len(value) < 3:
            return (*value, *([0.0] * (3 - len(value))))
        return value

    @property
    def is_online(self) -> bool:
        return self.status is NodeState.ONLINE and not self.error


class ResourceSummary(ProxwatchBaseModel):
    """Aggregated guest counts across the cluster."""

    total_vms: int = 0
    running_vms: int = 0
    total_containers: int = 0
    running_containers: int = 0


class ClusterStatus(ProxwatchBaseModel):
    """Full monitoring snapshot for a cluster."""

    cluster_id: str
    cluster_name: str = ""
    nodes: list[NodeStatus] = Field(default_factory=list)
    resource_summary: ResourceSummary = Field(default_factory=ResourceSummary)
    fetched_at: datetime | None = None
    """When the backend gathered the data."""

    @property
    def online_nodes(self) -> list[NodeStatus]:
        return [node for node in self.nodes if node.is_online]
