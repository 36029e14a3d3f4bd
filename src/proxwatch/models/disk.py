"""Disk inventory models (``GET /api/v1/clusters/{id}/disks``)."""

from __future__ import annotations

from pydantic import Field

from proxwatch.models._base import ProxwatchBaseModel
from proxwatch.models._health import NodeState


class Disk(ProxwatchBaseModel):
    """A physical disk attached to a node."""

    device: str = ""
    """Device path (e.g. ``/dev/sda``)."""
    type: str = ""
    """Disk type (``hdd``, ``ssd``, ``nvme``)."""
    size: int = 0
    """Size in bytes."""
    model: str = ""
    serial: str = ""
    vendor: str = ""
    wearout: int = -1
    """SSD wear level in percent; ``-1`` for spinning disks."""
    health: str = "UNKNOWN"
    """S.M.A.R.T. health (``PASSED`` when healthy)."""
    used: str = ""
    """Usage type (LVM, ZFS, filesystem, ...)."""

    @property
    def smart_passed(self) -> bool:
        return self.health.upper() in ("PASSED", "OK")


class NodeDisks(ProxwatchBaseModel):
    """Disks of a single node; ``error`` is set when the node query failed."""

    node_name: str
    status: NodeState = NodeState.UNKNOWN
    disks: list[Disk] = Field(default_factory=list)
    error: str | None = None


class ClusterDisks(ProxwatchBaseModel):
    """Disk inventory across every node of a cluster."""

    cluster_id: str
    cluster_name: str = ""
    nodes: list[NodeDisks] = Field(default_factory=list)
    total_disks: int = 0
