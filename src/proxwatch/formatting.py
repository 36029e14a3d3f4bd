"""Human-readable formatting for monitoring values.

Consumers rendering node cards or disk tables share these helpers so
every view shows sizes, uptimes and usage grades the same way.
"""

from __future__ import annotations

from enum import StrEnum

from proxwatch._constants import USAGE_CRITICAL, USAGE_HIGH, USAGE_WARNING

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


class UsageLevel(StrEnum):
    OK = "ok"
    WARNING = "warning"
    HIGH = "high"
    CRITICAL = "critical"


def format_bytes(size: float) -> str:
    """Format a byte count with binary multiples (``1536`` -> ``"1.5 KB"``)."""
    value = float(size)
    unit_index = 0
    while value >= 1024 and unit_index < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.1f} {_BYTE_UNITS[unit_index]}"


def format_uptime(seconds: int) -> str:
    """Format an uptime as ``"3d 4h 5m"``, dropping leading zero units."""
    seconds = max(0, int(seconds))
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def usage_level(percent: float) -> UsageLevel:
    """Grade a usage percentage for gauge colouring."""
    if percent < USAGE_WARNING:
        return UsageLevel.OK
    if percent < USAGE_HIGH:
        return UsageLevel.WARNING
    if percent < USAGE_CRITICAL:
        return UsageLevel.HIGH
    return UsageLevel.CRITICAL
