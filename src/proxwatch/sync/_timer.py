"""Fixed-period timer owned by a polling controller."""

from __future__ import annotations

import asyncio
import inspect
import logging
import weakref
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)


class IntervalTimer:
    """Invoke *callback* every *interval* seconds on the running loop.

    Ticks are scheduled on a fixed period relative to the moment the
    timer was armed (tick ``n`` fires at ``armed_at + n * interval``);
    the callback's own duration never shifts the schedule.  Ticks missed
    because the loop was blocked are dropped rather than fired in a
    burst.

    The timer owns at most one pending :class:`asyncio.TimerHandle`.
    :meth:`disarm` cancels it synchronously and is idempotent.  Used as
    a context manager the timer is armed on entry and disarmed on every
    exit path.

    A bound-method callback is held through a :class:`weakref.WeakMethod`,
    so a pending tick never keeps the method's owner alive.  Once the
    owner has been garbage-collected the next tick disarms the timer.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "timer") -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._interval = interval
        self._callback: Callable[[], Callable[[], None] | None]
        if inspect.ismethod(callback):
            self._callback = weakref.WeakMethod(callback)
        else:
            self._callback = lambda: callback
        self._name = name
        self._handle: asyncio.TimerHandle | None = None
        self._armed_at = 0.0
        self._next_index = 0
        self._ticks = 0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """Number of ticks fired since the timer was last armed."""
        return self._ticks

    def arm(self) -> None:
        """Start ticking. Must be called from within a running event loop."""
        if self._handle is not None:
            raise RuntimeError(f"{self._name} is already armed")
        loop = asyncio.get_running_loop()
        self._armed_at = loop.time()
        self._next_index = 1
        self._ticks = 0
        self._schedule(loop)
        _logger.debug("%s armed (interval=%.3fs)", self._name, self._interval)

    def disarm(self) -> None:
        """Cancel the pending tick, if any."""
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()
            _logger.debug("%s disarmed after %d tick(s)", self._name, self._ticks)

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        deadline = self._armed_at + self._next_index * self._interval
        now = loop.time()
        if deadline <= now:
            # Loop stalled past one or more deadlines; resume on the grid.
            self._next_index = int((now - self._armed_at) // self._interval) + 1
            deadline = self._armed_at + self._next_index * self._interval
        self._handle = loop.call_at(deadline, self._fire)

    def _fire(self) -> None:
        if self._handle is None:
            return
        callback = self._callback()
        if callback is None:
            _logger.debug("%s owner was garbage-collected; disarming", self._name)
            self.disarm()
            return
        self._ticks += 1
        self._next_index += 1
        # Schedule first so a callback that disarms the timer wins.
        self._schedule(asyncio.get_running_loop())
        try:
            callback()
        except Exception:
            _logger.warning("%s callback failed", self._name, exc_info=True)

    def __enter__(self) -> IntervalTimer:
        self.arm()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.disarm()
