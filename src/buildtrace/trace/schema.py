"""Pydantic schemas for trace events."""

from __future__ import annotations

import threading
import time
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

BUILD_TASK_GRAPH = "build task graph"
BUILD_DURATION = "build duration"


class Category(str, Enum):
    """Kind of unit that produced an event."""

    TASK = "TASK"
    RESOLVE = "RESOLVE"
    EVALUATE = "EVALUATE"
    PHASE = "PHASE"
    BUILD_OPERATION = "BUILD_OPERATION"


class Phase(str, Enum):
    """Begin or end marker, as the viewer spells it."""

    BEGIN = "B"
    END = "E"


def nanos_to_micros(nanos: int) -> int:
    """Whole microseconds, truncated toward zero."""
    micros = abs(nanos) // 1000
    return micros if nanos >= 0 else -micros


def monotonic_micros() -> int:
    """Current monotonic reading in whole microseconds (truncated)."""
    return nanos_to_micros(time.monotonic_ns())


def to_monotonic_nanos(wall_clock_start: datetime | float) -> int:
    """Map a wall-clock instant onto the monotonic timeline.

    Both clocks are read once; the result is ``monotonic_now`` minus the
    nanoseconds elapsed since ``wall_clock_start``.

    Args:
        wall_clock_start: A datetime (naive means local time) or epoch seconds.

    Returns:
        The equivalent ``time.monotonic_ns()`` reading.
    """
    if isinstance(wall_clock_start, datetime):
        start_ns = int(wall_clock_start.timestamp() * 1_000_000) * 1000
    else:
        start_ns = int(wall_clock_start * 1_000_000_000)
    monotonic_now = time.monotonic_ns()
    elapsed_ns = time.time_ns() - start_ns
    return monotonic_now - elapsed_ns


class TraceEvent(BaseModel):
    """One begin or end marker.

    Attributes:
        name: Task path, resolvable-set path, project path or operation name.
        category: Kind of unit.
        phase: BEGIN or END.
        thread_id: Identifier of the thread that observed the transition.
        timestamp_micros: Monotonic microseconds.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: Category
    phase: Phase
    thread_id: int
    timestamp_micros: int

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Record whatever identifier is available."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @classmethod
    def began(cls, name: str | None, category: Category) -> TraceEvent:
        """BEGIN event stamped now on the calling thread."""
        return cls._now(name, category, Phase.BEGIN)

    @classmethod
    def ended(cls, name: str | None, category: Category) -> TraceEvent:
        """END event stamped now on the calling thread."""
        return cls._now(name, category, Phase.END)

    @classmethod
    def began_at(
        cls, name: str | None, category: Category, monotonic_nanos: int
    ) -> TraceEvent:
        """BEGIN event with an explicit monotonic timestamp.

        Args:
            name: Event name.
            category: Event category.
            monotonic_nanos: A ``time.monotonic_ns()``-compatible reading.

        Returns:
            The event, timestamped in microseconds truncated toward zero.
        """
        return cls(
            name=name,
            category=category,
            phase=Phase.BEGIN,
            thread_id=threading.get_ident(),
            timestamp_micros=nanos_to_micros(monotonic_nanos),
        )

    @classmethod
    def _now(cls, name: str | None, category: Category, phase: Phase) -> TraceEvent:
        return cls(
            name=name,
            category=category,
            phase=phase,
            thread_id=threading.get_ident(),
            timestamp_micros=monotonic_micros(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the viewer's event object."""
        return {
            "name": self.name,
            "cat": self.category.value,
            "ph": self.phase.value,
            "pid": 0,
            "tid": self.thread_id,
            "ts": self.timestamp_micros,
        }
