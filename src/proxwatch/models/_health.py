"""String enums shared by the response models."""

from __future__ import annotations

from enum import StrEnum


class _LenientStrEnum(StrEnum):
    """StrEnum resolving unmapped values to ``UNKNOWN`` instead of raising."""

    @classmethod
    def _missing_(cls, value: object) -> _LenientStrEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        unknown: _LenientStrEnum = cls["UNKNOWN"]
        return unknown


class ClusterHealth(_LenientStrEnum):
    """Connection health of a registered cluster."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class NodeState(_LenientStrEnum):
    """Proxmox node state."""

    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"
