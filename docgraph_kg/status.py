"""
Ingestion Status

Process-wide status of the (at most one) running ingestion:
``is_busy``, ``message`` and ``progress`` in [0, 1].

The orchestrator is the only writer during a run. Readers get a
StatusSnapshot copy, never the live value. Subscribers are called with
every new snapshot, outside the lock.

Example:
    >>> tracker = StatusTracker()
    >>> tracker.subscribe(lambda s: print(f"{s.progress:.0%} {s.message}"))
    >>> tracker.try_acquire("Starting indexing...")
    >>> tracker.update(message="[1/2] Processing: a.txt...", progress=0.5)
    >>> tracker.release("Indexing complete!")
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from docgraph_kg.errors import IngestionBusyError
from docgraph_kg.types import StatusSnapshot

StatusSubscriber = Callable[[StatusSnapshot], None]

_UNSET = object()


class StatusTracker:
    """Single-writer, multi-reader status value guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = StatusSnapshot()
        self._subscribers: list[StatusSubscriber] = []

    def snapshot(self) -> StatusSnapshot:
        """Consistent copy of the current status."""
        with self._lock:
            return self._state.model_copy()

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._state.is_busy

    def subscribe(self, callback: StatusSubscriber) -> Callable[[], None]:
        """
        Register a callback for status changes.

        Returns:
            A function that removes the callback again
        """
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def update(
        self,
        *,
        message: str | None = None,
        progress: float | None = None,
        is_busy: bool | object = _UNSET,
    ) -> StatusSnapshot:
        """Replace the given fields and notify subscribers."""
        with self._lock:
            changes: dict[str, object] = {}
            if message is not None:
                changes["message"] = message
            if progress is not None:
                changes["progress"] = min(max(progress, 0.0), 1.0)
            if is_busy is not _UNSET:
                changes["is_busy"] = is_busy
            self._state = self._state.model_copy(update=changes)
            snapshot = self._state.model_copy()
            subscribers = list(self._subscribers)

        for callback in subscribers:
            callback(snapshot)
        return snapshot

    def try_acquire(self, message: str) -> None:
        """
        Mark the tracker busy, or fail if a run is already active.

        Raises:
            IngestionBusyError: If another run holds the tracker
        """
        with self._lock:
            if self._state.is_busy:
                raise IngestionBusyError(
                    f"An ingestion run is already in progress: {self._state.message}"
                )
            self._state = StatusSnapshot(is_busy=True, message=message, progress=0.0)
            snapshot = self._state.model_copy()
            subscribers = list(self._subscribers)

        for callback in subscribers:
            callback(snapshot)

    def release(self, message: str) -> None:
        """Mark the run finished: not busy, progress reset, final message."""
        self.update(message=message, progress=0.0, is_busy=False)

