"""Unit tests for configuration schema and serialization."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildtrace.config import DEFAULT_VERSION, OutputFormat, TraceConfig
from buildtrace.exceptions import ConfigError


def test_defaults() -> None:
    config = TraceConfig.default()
    assert config.enabled is True
    assert config.output_format == OutputFormat.JSON
    assert config.trace_dir_name == "trace"
    assert config.file_stem == "task-trace"
    assert config.version == DEFAULT_VERSION == "My Application v1.0"
    assert config.html_header is None


def test_output_format_suffix() -> None:
    assert OutputFormat.JSON.suffix == ".json"
    assert OutputFormat.HTML.suffix == ".html"


def test_yaml_round_trip(tmp_path: Path) -> None:
    """Config saved to YAML loads back unchanged."""
    config = TraceConfig(
        output_format=OutputFormat.HTML,
        version="nightly",
        html_header=Path("viewer/trace-header.html"),
    )
    path = tmp_path / "buildtrace.yaml"
    config.save(path)

    text = path.read_text()
    assert "output_format: html" in text
    assert "version: nightly" in text

    loaded = TraceConfig.load(path)
    assert loaded == config


def test_from_yaml_partial() -> None:
    config = TraceConfig.from_yaml("output_format: html\n")
    assert config.output_format == OutputFormat.HTML
    assert config.file_stem == "task-trace"


def test_from_yaml_empty_document() -> None:
    assert TraceConfig.from_yaml("") == TraceConfig.default()


def test_from_yaml_invalid_syntax() -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        TraceConfig.from_yaml("output_format: [unclosed")


def test_from_yaml_not_mapping() -> None:
    with pytest.raises(ConfigError, match="mapping"):
        TraceConfig.from_yaml("- json\n- html\n")


def test_from_yaml_bad_value_reports_field() -> None:
    with pytest.raises(ConfigError) as exc_info:
        TraceConfig.from_yaml("output_format: xml\n")
    assert exc_info.value.field == "output_format"


def test_rejects_path_like_names() -> None:
    with pytest.raises(ConfigError) as exc_info:
        TraceConfig.from_yaml("trace_dir_name: ../elsewhere\n")
    assert exc_info.value.field == "trace_dir_name"


def test_load_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "missing.yaml"
    with pytest.raises(ConfigError) as exc_info:
        TraceConfig.load(path)
    assert exc_info.value.config_path == path
