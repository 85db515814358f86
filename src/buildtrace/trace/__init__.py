"""Trace event collection and serialization."""

from buildtrace.trace.bridge import LifecycleBridge, resolve_name
from buildtrace.trace.log import EventLog
from buildtrace.trace.schema import (
    BUILD_DURATION,
    BUILD_TASK_GRAPH,
    Category,
    Phase,
    TraceEvent,
    monotonic_micros,
    nanos_to_micros,
    to_monotonic_nanos,
)
from buildtrace.trace.serializer import TraceSerializer, ViewerChrome
from buildtrace.trace.session import TraceSession

__all__ = [
    # Bridge
    "LifecycleBridge",
    "resolve_name",
    # Log
    "EventLog",
    # Schema
    "BUILD_DURATION",
    "BUILD_TASK_GRAPH",
    "Category",
    "Phase",
    "TraceEvent",
    "monotonic_micros",
    "nanos_to_micros",
    "to_monotonic_nanos",
    # Serializer
    "TraceSerializer",
    "ViewerChrome",
    # Session
    "TraceSession",
]
