"""Data models for monitoring backend requests and responses."""

from proxwatch.models._base import ProxwatchBaseModel
from proxwatch.models._health import ClusterHealth, NodeState
from proxwatch.models.cluster import Cluster, ClusterList, RegisterClusterRequest
from proxwatch.models.disk import ClusterDisks, Disk, NodeDisks
from proxwatch.models.error import ErrorEnvelope
from proxwatch.models.monitoring import ClusterStatus, NodeStatus, ResourceSummary

__all__ = [
    "Cluster",
    "ClusterDisks",
    "ClusterHealth",
    "ClusterList",
    "ClusterStatus",
    "Disk",
    "ErrorEnvelope",
    "NodeDisks",
    "NodeState",
    "NodeStatus",
    "ProxwatchBaseModel",
    "RegisterClusterRequest",
    "ResourceSummary",
]
