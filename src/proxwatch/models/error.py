"""Error envelope returned by the backend on failure."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import field_validator

from proxwatch.models._base import ProxwatchBaseModel


class ErrorEnvelope(ProxwatchBaseModel):
    """``{code, message, details?}`` body of a non-success response.

    ``code`` and ``message`` are parsed independently of ``details``: a
    ``details`` value that is not an object is dropped instead of
    failing the whole envelope.
    """

    code: str = ""
    message: str = ""
    details: dict[str, Any] | None = None

    @field_validator("code", "message", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return str(value)

    @field_validator("details", mode="before")
    @classmethod
    def _object_details(cls, value: Any) -> dict[str, Any] | None:
        if isinstance(value, Mapping):
            return {str(key): item for key, item in value.items()}
        return None
