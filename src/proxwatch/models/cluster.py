"""Cluster registration models."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from proxwatch.models._base import ProxwatchBaseModel
from proxwatch.models._health import ClusterHealth


class Cluster(ProxwatchBaseModel):
    """A Proxmox cluster registered with the backend."""

    id: str
    """Backend-assigned identifier."""
    name: str = ""
    """Human-readable name."""
    api_endpoint: str = ""
    """Proxmox API endpoint (e.g. ``https://pve.example.com:8006``)."""
    status: ClusterHealth = ClusterHealth.UNKNOWN
    proxmox_version: str = ""
    node_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_healthy(self) -> bool:
        return self.status is ClusterHealth.HEALTHY


class ClusterList(ProxwatchBaseModel):
    """Response of ``GET /api/v1/clusters``."""

    clusters: list[Cluster] = Field(default_factory=list)
    total: int = 0


class RegisterClusterRequest(BaseModel):
    """Body of ``POST /api/v1/clusters``.

    Validation follows the backend's binding rules so obviously invalid
    requests fail locally instead of costing a round trip.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1, max_length=255)
    api_endpoint: str
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, repr=False)

    @field_validator("api_endpoint")
    @classmethod
    def _endpoint_is_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("api_endpoint must be an http(s) URL")
        return value
