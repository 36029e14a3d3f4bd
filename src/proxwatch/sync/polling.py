"""Polling controller: a resource controller refreshed on a fixed period."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from proxwatch._constants import DEFAULT_STATUS_POLL_INTERVAL_MS
from proxwatch.sync._timer import IntervalTimer
from proxwatch.sync.resource import Fetcher, ResourceController

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PollingController(ResourceController[T]):
    """Resource controller that also refetches every *interval_ms*.

    Lifecycle:

    * On creation (and after every key or interval change) one fetch is
      issued immediately, then the timer is armed when ``interval_ms > 0``.
    * Each tick calls :meth:`refetch` on a fixed wall-clock period, whether
      or not the previous attempt has settled; the ordering rule of
      :class:`ResourceController` decides which result is kept.
    * A failed fetch leaves the timer armed, so polling heals by itself
      once the backend is reachable again.
    * :meth:`close` disarms the timer before anything else.  A controller
      that is no longer observed never issues another request.

    ``last_updated`` records when fresh data was last accepted.  It is
    never touched by errors or by attempts still in flight.
    """

    def __init__(
        self,
        fetcher: Fetcher[T],
        key: Iterable[Any] = (),
        *,
        interval_ms: int = DEFAULT_STATUS_POLL_INTERVAL_MS,
        name: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        # Must exist before the base class issues the first fetch.
        self._interval_ms = int(interval_ms)
        self._timer: IntervalTimer | None = None
        self._clock = clock
        self._last_updated: datetime | None = None
        super().__init__(fetcher, key, name=name)

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def active(self) -> bool:
        """Whether the polling timer is currently armed."""
        return self._timer is not None and self._timer.armed

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated

    def set_interval(self, interval_ms: int) -> None:
        """Change the polling period.

        A different value disarms the current timer, issues an immediate
        fetch and re-arms with the new period (or stays stopped when the
        new value is ``<= 0``).
        """
        self._ensure_open()
        interval_ms = int(interval_ms)
        if interval_ms == self._interval_ms:
            return
        _logger.debug("%s interval changed %dms -> %dms", self._name, self._interval_ms, interval_ms)
        self._interval_ms = interval_ms
        self._start()

    def close(self) -> None:
        try:
            self._disarm()
        finally:
            super().close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start(self) -> None:
        self._disarm()
        self.refetch()
        if self._interval_ms > 0:
            timer = IntervalTimer(self._interval_ms / 1000, self._on_tick, name=f"{self._name} poll timer")
            timer.arm()
            self._timer = timer

    def _disarm(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.disarm()

    def _on_tick(self) -> None:
        if self._closed:
            self._disarm()
            return
        self.refetch()

    def _invalidate(self) -> None:
        self._last_updated = None
        super()._invalidate()

    def _apply_success(self, seq: int, result: T) -> None:
        # Set before notifying so subscribers observe a consistent pair.
        self._last_updated = self._clock()
        super()._apply_success(seq, result)
