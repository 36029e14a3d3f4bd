"""Custom exception hierarchy for proxwatch."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ProxwatchError(Exception):
    """Base exception for all proxwatch errors."""


class ProxwatchConfigError(ProxwatchError):
    """Invalid or missing configuration."""


class TransportError(ProxwatchError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    Carries the typed error shape surfaced to consumers: an optional
    HTTP status, a human readable message, an optional machine code and
    optional structured details.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Mapping[str, Any] | None = None,
        endpoint: str = "",
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = dict(details) if details is not None else None
        self.endpoint = endpoint
        super().__init__(message)


class ApiError(TransportError):
    """Backend answered with a non-success status and an error envelope."""


class AuthenticationError(ApiError):
    """Backend rejected the cluster credentials (HTTP 401)."""


class NotFoundError(ApiError):
    """Requested cluster does not exist (HTTP 404)."""


class ConflictError(ApiError):
    """Cluster already registered (HTTP 409)."""


class ResponseDecodeError(TransportError):
    """Response body could not be decoded as the declared model."""


class RequestFailedError(TransportError):
    """A fetch attempt failed before reaching the transport.

    The synchronization layer wraps any exception raised by a producer
    that is not a :class:`TransportError` in this error, so
    ``FetchState.error`` always has the typed-error shape.  It carries no
    status, code or details; the original exception is chained as
    ``__cause__``.
    """


class ControllerClosedError(ProxwatchError):
    """Operation attempted on a controller that has been closed."""
