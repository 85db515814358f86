"""Custom exceptions for buildtrace."""

from pathlib import Path


class BuildTraceError(Exception):
    """Base exception for all buildtrace errors."""

    pass


class TraceWriteError(BuildTraceError):
    """Raised when the trace artifact cannot be written."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(BuildTraceError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | None = None,
        field: str = "",
    ) -> None:
        super().__init__(message)
        self.config_path = config_path
        self.field = field
