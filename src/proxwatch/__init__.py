"""proxwatch - Async Python client for a Proxmox cluster monitoring API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("proxwatch")
except PackageNotFoundError:
    __version__ = "0+local"

from proxwatch.client import ProxwatchClient
from proxwatch.config import ProxwatchConfig
from proxwatch.exceptions import (
    ApiError,
    AuthenticationError,
    ConflictError,
    ControllerClosedError,
    NotFoundError,
    ProxwatchConfigError,
    ProxwatchError,
    RequestFailedError,
    ResponseDecodeError,
    TransportError,
)
from proxwatch.formatting import UsageLevel, format_bytes, format_uptime, usage_level
from proxwatch.models import (
    Cluster,
    ClusterDisks,
    ClusterHealth,
    ClusterList,
    ClusterStatus,
    Disk,
    NodeDisks,
    NodeState,
    NodeStatus,
    ResourceSummary,
)
from proxwatch.sync import DependencyKey, FetchState, PollingController, ResourceController

__all__ = [
    "__version__",
    "ApiError",
    "AuthenticationError",
    "Cluster",
    "ClusterDisks",
    "ClusterHealth",
    "ClusterList",
    "ClusterStatus",
    "ConflictError",
    "ControllerClosedError",
    "DependencyKey",
    "Disk",
    "FetchState",
    "NodeDisks",
    "NodeState",
    "NodeStatus",
    "NotFoundError",
    "PollingController",
    "ProxwatchClient",
    "ProxwatchConfig",
    "ProxwatchConfigError",
    "ProxwatchError",
    "RequestFailedError",
    "ResourceController",
    "ResourceSummary",
    "ResponseDecodeError",
    "TransportError",
    "UsageLevel",
    "format_bytes",
    "format_uptime",
    "usage_level",
]
