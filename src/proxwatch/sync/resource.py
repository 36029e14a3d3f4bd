"""Resource fetch controller.

Tracks ``{data, loading, error}`` for a single remote resource and
arbitrates overlapping fetch attempts so that only the most recently
initiated one can define the visible state.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import replace
from typing import Any, Generic, TypeVar

from proxwatch.exceptions import ControllerClosedError, RequestFailedError, TransportError
from proxwatch.sync.state import DependencyKey, FetchState

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Fetcher = Callable[..., Awaitable[T]]
Subscriber = Callable[[FetchState[T]], None]


class ResourceController(Generic[T]):
    """Keep one remote resource in sync with the backend.

    Parameters
    ----------
    fetcher
        Async producer called as ``fetcher(*key)`` for every attempt.
        It must target the same remote resource for equal keys.
    key
        Dependency key identifying the tracked resource.  The empty
        tuple turns *fetcher* into a zero-argument producer.
    name
        Label used in log records and task names.

    Creating a controller issues the first fetch immediately, so it must
    happen inside a running event loop.  Usage::

        async with ResourceController(client.get_cluster, (cluster_id,)) as ctl:
            ctl.subscribe(render)
            ...

    Ordering: every attempt receives a sequence number.  When an attempt
    completes after a later-initiated one has already settled, its
    result is dropped, so a slow stale response never overwrites a
    newer one.  Errors never stop the controller; they are stored in
    :attr:`FetchState.error` next to the last good data.
    """

    def __init__(
        self,
        fetcher: Fetcher[T],
        key: Iterable[Any] = (),
        *,
        name: str | None = None,
    ) -> None:
        self._loop = asyncio.get_running_loop()
        self._fetcher: Fetcher[T] = fetcher
        self._key: DependencyKey = tuple(key)
        self._name = name or getattr(fetcher, "__qualname__", None) or repr(fetcher)
        self._state: FetchState[T] = FetchState.initial()
        self._seq = 0
        self._settled_seq = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._subscribers: list[Subscriber[T]] = []
        self._closed = False
        self._start()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> TransportError | None:
        return self._state.error

    @property
    def key(self) -> DependencyKey:
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        """Number of attempts whose producer call has not returned yet."""
        return len(self._tasks)

    def subscribe(self, callback: Subscriber[T]) -> Callable[[], None]:
        """Register *callback* for every state transition.

        The callback runs synchronously on the event loop with the new
        :class:`FetchState`.  Returns a function that unsubscribes.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._subscribers.remove(callback)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def refetch(self) -> None:
        """Start a new fetch attempt without waiting for it.

        ``loading`` becomes true and ``error`` is cleared at once;
        ``data`` from the previous settle is kept.
        """
        self._ensure_open()
        self._seq += 1
        seq = self._seq
        self._set_state(replace(self._state, loading=True, error=None))
        task = self._loop.create_task(
            self._run_attempt(seq, self._fetcher, self._key),
            name=f"proxwatch:{self._name}#{seq}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def set_key(self, key: Iterable[Any], fetcher: Fetcher[T] | None = None) -> None:
        """Point the controller at another resource.

        When the key (or the fetcher) changes, every in-flight attempt is
        invalidated, the state is reset to ``{None, loading, None}``
        before this method returns, and a new fetch is issued.  An equal
        key without a new fetcher is a no-op.
        """
        self._ensure_open()
        new_key = tuple(key)
        if new_key == self._key and (fetcher is None or fetcher is self._fetcher):
            return
        _logger.debug("%s key changed %r -> %r", self._name, self._key, new_key)
        self._key = new_key
        if fetcher is not None:
            self._fetcher = fetcher
        self._invalidate()
        self._start()

    def close(self) -> None:
        """Stop observing the resource.

        No new attempts can be started afterwards.  Attempts already in
        flight run to completion but their results are discarded, and
        subscribers are no longer notified.  Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        self._subscribers.clear()
        _logger.debug("%s closed with %d attempt(s) in flight", self._name, len(self._tasks))

    async def wait_settled(self) -> FetchState[T]:
        """Wait for every attempt in flight at call time, then return the state."""
        pending = set(self._tasks)
        if pending:
            await asyncio.wait(pending)
        return self._state

    async def __aenter__(self) -> ResourceController[T]:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start(self) -> None:
        self.refetch()

    def _invalidate(self) -> None:
        # Every attempt initiated so far now counts as superseded.
        self._settled_seq = self._seq
        self._set_state(FetchState.initial())

    def _ensure_open(self) -> None:
        if self._closed:
            raise ControllerClosedError(f"{self._name} controller is closed")

    async def _run_attempt(self, seq: int, fetcher: Fetcher[T], key: DependencyKey) -> None:
        _logger.debug("%s attempt #%d started", self._name, seq)
        try:
            result = await fetcher(*key)
        except TransportError as exc:
            if self._accept(seq):
                _logger.debug("%s attempt #%d failed: %s", self._name, seq, exc)
                self._apply_failure(seq, exc)
        except Exception as exc:
            if self._accept(seq):
                _logger.debug("%s attempt #%d raised", self._name, seq, exc_info=True)
                wrapped = RequestFailedError(f"{self._name} request failed: {exc or type(exc).__name__}")
                wrapped.__cause__ = exc
                self._apply_failure(seq, wrapped)
        else:
            if self._accept(seq):
                _logger.debug("%s attempt #%d succeeded", self._name, seq)
                self._apply_success(seq, result)

    def _accept(self, seq: int) -> bool:
        if self._closed:
            _logger.debug("%s dropping attempt #%d: controller closed", self._name, seq)
            return False
        if seq <= self._settled_seq:
            _logger.debug(
                "%s dropping stale attempt #%d (attempt #%d already settled)",
                self._name,
                seq,
                self._settled_seq,
            )
            return False
        self._settled_seq = seq
        return True

    def _still_loading(self, seq: int) -> bool:
        return self._seq > seq

    def _apply_success(self, seq: int, result: T) -> None:
        self._set_state(FetchState(data=result, loading=self._still_loading(seq), error=None))

    def _apply_failure(self, seq: int, error: TransportError) -> None:
        self._set_state(FetchState(data=self._state.data, loading=self._still_loading(seq), error=error))

    def _set_state(self, state: FetchState[T]) -> None:
        if state == self._state:
            return
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                _logger.warning("%s subscriber callback failed", self._name, exc_info=True)
