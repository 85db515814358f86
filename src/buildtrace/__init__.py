"""buildtrace - timeline traces of multi-phase builds."""

from buildtrace.config import OutputFormat, TraceConfig
from buildtrace.exceptions import BuildTraceError, ConfigError, TraceWriteError
from buildtrace.log_config import configure_logging
from buildtrace.paths import TracePaths
from buildtrace.trace import (
    Category,
    EventLog,
    LifecycleBridge,
    Phase,
    TraceEvent,
    TraceSerializer,
    TraceSession,
    ViewerChrome,
)

__version__ = "0.1.0"

__all__ = [
    "BuildTraceError",
    "Category",
    "ConfigError",
    "EventLog",
    "LifecycleBridge",
    "OutputFormat",
    "Phase",
    "TraceConfig",
    "TraceEvent",
    "TracePaths",
    "TraceSerializer",
    "TraceSession",
    "TraceWriteError",
    "ViewerChrome",
    "configure_logging",
    "__version__",
]
