"""Client configuration for proxwatch."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from proxwatch._constants import DEFAULT_BASE_URL, DEFAULT_STATUS_POLL_INTERVAL_MS, USER_AGENT
from proxwatch.exceptions import ProxwatchConfigError


def _env_number(env: Mapping[str, str], key: str, cast: type[int] | type[float]) -> Any:
    value = env.get(key)
    if value is None:
        return None
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise ProxwatchConfigError(f"{key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class ProxwatchConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the monitoring backend, without a trailing slash.
        Defaults to ``http://localhost:8080``.
    request_timeout : float
        Total timeout in seconds applied to every HTTP request.
        ``0`` disables the client-side timeout.
    status_poll_interval_ms : int
        Default polling period, in milliseconds, used by
        :meth:`ProxwatchClient.poll_cluster_status`.  ``0`` or a
        negative value disables automatic polling.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0
    status_poll_interval_ms: int = DEFAULT_STATUS_POLL_INTERVAL_MS
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        base_url = self.base_url.strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise ProxwatchConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.request_timeout < 0:
            raise ProxwatchConfigError("request_timeout must be >= 0")
        # Frozen dataclass: normalise through object.__setattr__.
        object.__setattr__(self, "base_url", base_url)

    @classmethod
    def from_env(cls, **overrides: Any) -> ProxwatchConfig:
        """Create configuration from environment variables.

        Reads ``PROXWATCH_API_URL``, ``PROXWATCH_REQUEST_TIMEOUT`` and
        ``PROXWATCH_STATUS_POLL_INTERVAL_MS``. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ProxwatchConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("PROXWATCH_API_URL")
        if base_url:
            config_kwargs["base_url"] = base_url

        timeout = _env_number(env, "PROXWATCH_REQUEST_TIMEOUT", float)
        if timeout is not None:
            config_kwargs["request_timeout"] = timeout

        interval = _env_number(env, "PROXWATCH_STATUS_POLL_INTERVAL_MS", int)
        if interval is not None:
            config_kwargs["status_poll_interval_ms"] = interval

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
