"""Configuration schema for buildtrace."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from buildtrace.exceptions import ConfigError

DEFAULT_VERSION = "My Application v1.0"


class OutputFormat(str, Enum):
    """Supported trace artifact formats."""

    JSON = "json"
    HTML = "html"

    @property
    def suffix(self) -> str:
        """File suffix for this format."""
        return f".{self.value}"


class TraceConfig(BaseModel):
    """Complete buildtrace configuration.

    Attributes:
        enabled: Whether the session records and writes anything.
        output_format: Plain JSON or JSON wrapped in viewer HTML.
        trace_dir_name: Directory under the build dir holding the artifact.
        file_stem: Artifact file name without suffix.
        version: Value written to ``otherData.version``.
        html_header: Optional file with viewer header bytes (HTML only).
        html_footer: Optional file with viewer footer bytes (HTML only).

    Example:
        >>> config = TraceConfig(output_format=OutputFormat.HTML)
        >>> config.output_format.suffix
        '.html'
    """

    enabled: bool = True
    output_format: OutputFormat = OutputFormat.JSON
    trace_dir_name: str = Field(default="trace", min_length=1)
    file_stem: str = Field(default="task-trace", min_length=1)
    version: str = DEFAULT_VERSION
    html_header: Path | None = None
    html_footer: Path | None = None

    @field_validator("trace_dir_name", "file_stem")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """Reject names that would escape the build directory."""
        if "/" in v or "\\" in v or v in (".", ".."):
            msg = f"Must be a plain file name: {v!r}"
            raise ValueError(msg)
        return v

    def to_yaml(self) -> str:
        """Serialize the config to YAML.

        Returns:
            YAML string representation.
        """
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def save(self, path: Path) -> None:
        """Save the config to a YAML file.

        Args:
            path: Path to save the file.
        """
        path.write_text(self.to_yaml())

    @classmethod
    def from_yaml(cls, yaml_content: str, *, config_path: Path | None = None) -> TraceConfig:
        """Parse config from YAML content.

        Args:
            yaml_content: YAML string to parse.
            config_path: Source file, reported in errors.

        Returns:
            Parsed TraceConfig instance.

        Raises:
            ConfigError: If the YAML or any value is invalid.
        """
        try:
            data: Any = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ConfigError(msg, config_path=config_path) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ConfigError(msg, config_path=config_path)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors = e.errors()
            field = ".".join(str(p) for p in errors[0]["loc"]) if errors else ""
            msg = f"Invalid config: {e}"
            raise ConfigError(msg, config_path=config_path, field=field) from e

    @classmethod
    def load(cls, path: Path) -> TraceConfig:
        """Load config from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed TraceConfig instance.

        Raises:
            ConfigError: If the file doesn't exist or is invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg, config_path=path)
        return cls.from_yaml(path.read_text(), config_path=path)

    @classmethod
    def default(cls, output_format: OutputFormat = OutputFormat.JSON) -> TraceConfig:
        """Create a default configuration.

        Args:
            output_format: Artifact format to produce.

        Returns:
            A default TraceConfig instance.
        """
        return cls(output_format=output_format)
