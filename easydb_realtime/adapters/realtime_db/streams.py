"""Live value streams over Realtime Database listeners."""

import logging
import threading
from queue import Empty, Queue
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from .base import ListenerRegistrationBoundary, ReferenceBoundary, Snapshot
from .snapshots import SnapshotMirror

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class SnapshotStream(Generic[T]):
    """Blocking iterator yielding ``transform(snapshot)`` on every change.

    The backend listener runs on an SDK-owned thread and feeds a queue; the
    consumer thread drains it. Each yielded value reflects the full node, so
    with a bounded queue the oldest pending value is dropped when full.
    """

    def __init__(
        self,
        reference: ReferenceBoundary,
        transform: Callable[[Snapshot], T],
        *,
        max_pending: int = 0,
        label: str = "",
    ) -> None:
        self._transform = transform
        self._label = label or "stream"
        self._mirror = SnapshotMirror()
        # max_pending is enforced in _offer; the close marker is exempt from it
        self._queue: "Queue[Any]" = Queue()
        self._max_pending = max_pending
        self._closed = threading.Event()
        self._finished = False
        self._lock = threading.Lock()
        self._registration: Optional[ListenerRegistrationBoundary] = None

        self._registration = reference.listen(self._on_event)
        logger.info("Realtime stream opened: %s", self._label)

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _on_event(self, event: Any) -> None:
        """Listener callback; folds the event and queues the new snapshot."""

        if self._closed.is_set():
            return

        snapshot = self._mirror.apply(
            getattr(event, "event_type", None),
            getattr(event, "path", "/"),
            getattr(event, "data", None),
        )
        if snapshot is None:
            return

        self._offer(snapshot)

    def _offer(self, snapshot: Snapshot) -> None:
        with self._lock:
            # Nothing may follow the close marker
            if self._closed.is_set():
                return

            while self._max_pending and self._queue.qsize() >= self._max_pending:
                try:
                    self._queue.get_nowait()
                    logger.warning("Dropped stale snapshot for slow consumer: %s", self._label)
                except Empty:
                    break

            self._queue.put_nowait(snapshot)

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        return self.get()

    def get(self, timeout: Optional[float] = None) -> T:
        """Return the next value.

        Raises ``queue.Empty`` when nothing arrives within ``timeout`` and
        ``StopIteration`` once the stream is closed and drained.
        """

        if self._finished:
            raise StopIteration

        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self._finished = True
            # Wake any other consumer blocked on this stream
            self._queue.put_nowait(_CLOSED)
            raise StopIteration

        return self._transform(item)

    def close(self) -> None:
        """Stop listening; iteration ends once pending values are consumed."""

        with self._lock:
            if self._closed.is_set():
                return
            self._closed.set()

        registration, self._registration = self._registration, None
        try:
            if registration is not None:
                registration.close()
        finally:
            self._queue.put_nowait(_CLOSED)
            logger.info("Realtime stream closed: %s", self._label)

    def __enter__(self) -> "SnapshotStream[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["SnapshotStream"]
