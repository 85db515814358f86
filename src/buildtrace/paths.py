"""Trace output layout under a build directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from buildtrace.config import OutputFormat, TraceConfig


@dataclass
class TracePaths:
    """Manages where a build's trace artifact lives.

    Attributes:
        build_dir: The host's build output directory.
        trace_dir_name: Subdirectory holding trace artifacts.
        file_stem: Artifact name without suffix.

    Example:
        >>> paths = TracePaths(Path("/project/build"))
        >>> paths.trace_file(OutputFormat.JSON).name
        'task-trace.json'
    """

    build_dir: Path
    trace_dir_name: str = "trace"
    file_stem: str = "task-trace"

    @property
    def trace_dir(self) -> Path:
        """Directory containing trace artifacts."""
        return self.build_dir / self.trace_dir_name

    def trace_file(self, output_format: OutputFormat) -> Path:
        """Get the artifact path for a format.

        Args:
            output_format: JSON or HTML.

        Returns:
            Path to ``task-trace.json`` or ``task-trace.html``.
        """
        return self.trace_dir / f"{self.file_stem}{output_format.suffix}"

    def create_directories(self) -> None:
        """Create the trace directory.

        This is idempotent - can be called multiple times safely.
        """
        self.trace_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_config(cls, build_dir: Path, config: TraceConfig) -> TracePaths:
        """Build paths using names from a config.

        Args:
            build_dir: The host's build output directory.
            config: Trace configuration.

        Returns:
            A TracePaths instance.
        """
        return cls(
            build_dir=Path(build_dir),
            trace_dir_name=config.trace_dir_name,
            file_stem=config.file_stem,
        )
