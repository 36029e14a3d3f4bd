"""Base model for monitoring backend responses.

Every response model inherits from :class:`ProxwatchBaseModel` which
provides:

* frozen instances, so a snapshot handed to a subscriber can never be
  mutated behind the controller's back.
* ``extra="ignore"`` so newer backend fields do not break decoding.
* A ``model_validator(mode="before")`` that drops ``null`` values so the
  field default is used, and stashes the original payload in ``raw``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProxwatchBaseModel(BaseModel):
    """Base for backend response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an API dict).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
