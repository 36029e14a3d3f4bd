"""HTTP transport translating logical requests into JSON round trips."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp
from pydantic import ValidationError

from proxwatch._redact import redact_for_log
from proxwatch.config import ProxwatchConfig
from proxwatch.exceptions import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    TransportError,
)
from proxwatch.models.error import ErrorEnvelope

_logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[ApiError]] = {
    401: AuthenticationError,
    404: NotFoundError,
    409: ConflictError,
}


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Implementations must be safe to call concurrently: several
    controllers (or overlapping attempts of one controller) may have
    requests in flight at the same time.
    """

    async def invoke(self, path: str, *, method: str = "GET", body: Any = None) -> Any:
        ...


def _error_from_response(endpoint: str, status: int, text: str) -> ApiError:
    """Build a typed error from a non-success response body.

    The backend answers failures with ``{code, message, details?}``;
    those fields are surfaced verbatim.  Anything else degrades to a
    generic ``HTTP error <status>`` message.
    """
    envelope: Any = None
    if text:
        try:
            envelope = json.loads(text)
        except json.JSONDecodeError:
            envelope = None

    code: str | None = None
    message = f"HTTP error {status}"
    details: dict[str, Any] | None = None
    if isinstance(envelope, dict):
        try:
            parsed = ErrorEnvelope.model_validate(envelope)
        except ValidationError:
            _logger.debug("Unrecognised error body from %s: %s", endpoint, text[:200])
        else:
            code = parsed.code or None
            message = parsed.message or message
            details = parsed.details

    error_cls = _STATUS_ERRORS.get(status, ApiError)
    return error_cls(message, status_code=status, code=code, details=details, endpoint=endpoint)


class HttpTransport:
    """aiohttp transport speaking JSON to the monitoring backend."""

    def __init__(self, config: ProxwatchConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout or None)

    async def invoke(self, path: str, *, method: str = "GET", body: Any = None) -> Any:
        """Send one request and return the decoded JSON body.

        Returns ``None`` for ``204 No Content`` and empty bodies.
        Raises :class:`ApiError` (or a status-specific subclass) for
        non-2xx responses and :class:`TransportError` for network
        failures or undecodable bodies.
        """
        url = f"{self._config.base_url}{path}"
        headers = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        data: str | None = None
        if body is not None:
            headers["content-type"] = "application/json"
            data = json.dumps(body, separators=(",", ":"))

        if body is not None:
            _logger.debug("%s %s body=%s", method, url, redact_for_log(body))
        else:
            _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(method, url, data=data, headers=headers, timeout=self._timeout) as resp:
                status = resp.status
                text = await resp.text()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(
                f"Request to {path} failed: {exc or type(exc).__name__}",
                endpoint=path,
            ) from exc

        _logger.debug("%s %s -> %d", method, url, status)

        if not 200 <= status < 300:
            raise _error_from_response(path, status, text)

        if status == 204 or not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=status,
                endpoint=path,
            ) from exc
