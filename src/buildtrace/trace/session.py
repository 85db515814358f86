"""Instrumentation for a single build invocation."""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path

import structlog

from buildtrace.config import OutputFormat, TraceConfig
from buildtrace.exceptions import BuildTraceError
from buildtrace.paths import TracePaths
from buildtrace.trace.bridge import LifecycleBridge
from buildtrace.trace.log import EventLog
from buildtrace.trace.schema import to_monotonic_nanos
from buildtrace.trace.serializer import TraceSerializer, ViewerChrome

logger = structlog.get_logger()


class TraceSession:
    """Owns the event log, bridge and serializer for one build.

    The host registers ``session.bridge`` callbacks when the build starts
    and calls ``bridge.build_finished()`` (or ``finish()``) once at the end.
    The artifact is written exactly once; failures are logged and never
    raised into the host.

    Example:
        >>> session = TraceSession(Path("build"), build_started_at=start)
        >>> session.bridge.before_task(":app:jar")
        >>> session.bridge.after_task(":app:jar")
        >>> session.bridge.build_finished()
        PosixPath('build/trace/task-trace.json')
    """

    def __init__(
        self,
        build_dir: Path,
        build_started_at: datetime | float,
        config: TraceConfig | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            build_dir: The host's build output directory.
            build_started_at: Wall-clock build start (datetime or epoch seconds).
            config: Trace configuration; defaults apply when omitted.
        """
        self.config = config or TraceConfig.default()
        self.paths = TracePaths.from_config(Path(build_dir), self.config)
        self.build_start_nanos = to_monotonic_nanos(build_started_at)
        self.log = EventLog()
        self.bridge = LifecycleBridge(
            self.log,
            on_build_finished=self.finish,
            enabled=self.config.enabled,
        )
        self._finish_lock = threading.Lock()
        self._finished = False
        self._result: Path | None = None
        self._log = logger.bind(build_dir=str(self.paths.build_dir))

    @property
    def trace_file(self) -> Path:
        """Where the artifact is written."""
        return self.paths.trace_file(self.config.output_format)

    @property
    def finished(self) -> bool:
        """Whether ``finish`` has already run."""
        return self._finished

    def _make_serializer(self) -> TraceSerializer:
        chrome = None
        if self.config.output_format == OutputFormat.HTML:
            chrome = ViewerChrome.from_files(
                self.config.html_header, self.config.html_footer
            )
        return TraceSerializer(version=self.config.version, chrome=chrome)

    def finish(self) -> Path | None:
        """Add the build-duration bracket and write the artifact.

        Returns:
            The artifact path, or None if disabled or writing failed.
        """
        with self._finish_lock:
            if self._finished:
                self._log.warning("Trace already written, ignoring finish")
                return self._result
            self._finished = True

            if not self.config.enabled:
                self._log.debug("Tracing disabled, no trace written")
                return None

            try:
                serializer = self._make_serializer()
                serializer.add_build_duration(self.log, self.build_start_nanos)
                events = self.log.snapshot()
                self._result = serializer.write(events, self.trace_file)
            except BuildTraceError as e:
                self._log.error(
                    "Trace not written",
                    error=str(e),
                    path=str(getattr(e, "path", None) or self.trace_file),
                )
                return None
            except Exception as e:
                self._log.exception("Unexpected error writing trace", error=str(e))
                return None

            self._log.info(
                "Build trace written",
                path=str(self._result),
                events=len(events),
            )
            return self._result
