"""Append-only event store shared by every lifecycle callback."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from buildtrace.trace.schema import TraceEvent


class EventLog:
    """Ordered, thread-safe collection of trace events.

    Events keep the order they were appended in. Nothing is ever removed
    or re-sorted; readers take a snapshot once writers have stopped.

    Example:
        >>> log = EventLog()
        >>> log.append(TraceEvent.began(":app:build", Category.TASK))
        >>> len(log)
        1
    """

    def __init__(self) -> None:
        self._events: list[TraceEvent] = []
        self._lock = threading.Lock()

    def append(self, event: TraceEvent) -> None:
        """Add one event. Safe to call from any thread."""
        with self._lock:
            self._events.append(event)

    def snapshot(self) -> list[TraceEvent]:
        """Copy of all events in append order."""
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[TraceEvent]:
        return iter(self.snapshot())
