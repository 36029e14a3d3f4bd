"""Snapshot types exposed by the sync controllers."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

from proxwatch.exceptions import TransportError

T = TypeVar("T")

DependencyKey: TypeAlias = tuple[Hashable, ...]
"""Ordered tuple of primitive values identifying which resource is tracked."""


@dataclass(frozen=True, slots=True)
class FetchState(Generic[T]):
    """Immutable view of a tracked resource.

    While ``loading`` is true, ``data`` and ``error`` still hold the
    values of the previous settle (if any), so a consumer can keep
    showing stale-but-present data during a refresh.  ``data is None``
    is the only way to tell a first load from a refresh.
    """

    data: T | None = None
    loading: bool = True
    error: TransportError | None = None

    @classmethod
    def initial(cls) -> FetchState[T]:
        """State of a freshly created (or re-keyed) controller."""
        return cls()

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def settled(self) -> bool:
        return not self.loading
