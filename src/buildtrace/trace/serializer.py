"""Render an event log into a trace-viewer artifact."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from buildtrace.config import DEFAULT_VERSION
from buildtrace.exceptions import TraceWriteError
from buildtrace.trace.log import EventLog
from buildtrace.trace.schema import BUILD_DURATION, Category, TraceEvent

logger = structlog.get_logger()

DISPLAY_TIME_UNIT = "ns"
SYSTEM_TRACE_EVENTS = "SystemTraceData"

_DEFAULT_HEADER = (
    "<!DOCTYPE html>\n"
    "<html>\n"
    "<head>\n"
    '<meta charset="utf-8">\n'
    "<title>Build trace</title>\n"
    "</head>\n"
    "<body>\n"
    '<script id="trace-data" type="application/json">\n'
)
_DEFAULT_FOOTER = "</script>\n</body>\n</html>\n"


@dataclass(frozen=True)
class ViewerChrome:
    """Opaque bytes written around the JSON payload in HTML output.

    Attributes:
        header: Bytes before the payload.
        footer: Bytes after the payload.
        escape_html: Write ``</`` as ``<\\/`` in the payload. Only the
            built-in page sets this; user-supplied chrome gets the same
            JSON text as the plain JSON variant.
    """

    header: bytes = b""
    footer: bytes = b""
    escape_html: bool = False

    @classmethod
    def default(cls) -> ViewerChrome:
        """Minimal HTML page embedding the payload in a JSON script tag."""
        return cls(
            header=_DEFAULT_HEADER.encode("utf-8"),
            footer=_DEFAULT_FOOTER.encode("utf-8"),
            escape_html=True,
        )

    @classmethod
    def from_files(
        cls, header: Path | None = None, footer: Path | None = None
    ) -> ViewerChrome:
        """Load header/footer resources, falling back to the defaults.

        Args:
            header: File whose bytes precede the payload.
            footer: File whose bytes follow the payload.

        Raises:
            TraceWriteError: If a resource cannot be read.
        """
        defaults = cls.default()
        return cls(
            header=_read_resource(header) if header else defaults.header,
            footer=_read_resource(footer) if footer else defaults.footer,
            escape_html=not header and not footer,
        )


def _read_resource(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except (OSError, ValueError) as e:
        msg = f"Cannot read viewer resource {path}: {e}"
        raise TraceWriteError(msg, path=Path(path)) from e


class TraceSerializer:
    """Writes events in the trace-viewer JSON format.

    Output layout::

        <header bytes>
        {
          "traceEvents": [...],
          "displayTimeUnit": "ns",
          "systemTraceEvents": "SystemTraceData",
          "otherData": {"version": "..."}
        }
        <footer bytes>

    Header and footer are empty unless ``chrome`` is given (HTML output).

    Example:
        >>> serializer = TraceSerializer()
        >>> serializer.add_build_duration(log, build_start_nanos)
        >>> serializer.write(log.snapshot(), Path("build/trace/task-trace.json"))
    """

    def __init__(
        self,
        *,
        version: str = DEFAULT_VERSION,
        chrome: ViewerChrome | None = None,
    ) -> None:
        """Initialize the serializer.

        Args:
            version: Value for ``otherData.version``.
            chrome: Header/footer wrapping for HTML output.
        """
        self.version = version
        self.chrome = chrome or ViewerChrome()

    def add_build_duration(self, log: EventLog, build_start_nanos: int) -> None:
        """Append the synthetic bracket spanning the whole build.

        Args:
            log: Log to append to.
            build_start_nanos: Build start on the ``time.monotonic_ns()`` timeline.
        """
        log.append(TraceEvent.began_at(BUILD_DURATION, Category.PHASE, build_start_nanos))
        log.append(TraceEvent.ended(BUILD_DURATION, Category.PHASE))

    def build_document(self, events: Iterable[TraceEvent]) -> dict[str, Any]:
        """Assemble the top-level viewer object."""
        return {
            "traceEvents": [event.to_dict() for event in events],
            "displayTimeUnit": DISPLAY_TIME_UNIT,
            "systemTraceEvents": SYSTEM_TRACE_EVENTS,
            "otherData": {
                "version": self.version,
            },
        }

    def render_payload(self, events: Iterable[TraceEvent]) -> str:
        """Serialize events to the JSON document text."""
        return json.dumps(self.build_document(events), indent=2) + "\n"

    def render(self, events: Iterable[TraceEvent]) -> bytes:
        """Full artifact bytes: header, payload, footer."""
        payload = self.render_payload(events)
        if self.chrome.escape_html:
            # Keep names like "</script>" from closing the embedding element.
            payload = payload.replace("</", "<\\/")
        return self.chrome.header + payload.encode("utf-8") + self.chrome.footer

    def write(self, events: Iterable[TraceEvent], path: Path) -> Path:
        """Write the artifact in a single whole-file operation.

        Args:
            events: Events to serialize, in log order.
            path: Target file; parent directories are created.

        Returns:
            The written path.

        Raises:
            TraceWriteError: If the directory or file cannot be written.
        """
        path = Path(path)
        data = self.render(events)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, ValueError) as e:
            msg = f"Failed to write trace to {path}: {e}"
            raise TraceWriteError(msg, path=path) from e

        logger.debug("Wrote trace", path=str(path), size=len(data))
        return path
