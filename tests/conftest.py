"""Pytest fixtures for buildtrace tests."""

from __future__ import annotations

import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest

from buildtrace.config import TraceConfig
from buildtrace.trace.log import EventLog
from buildtrace.trace.session import TraceSession


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Host build output directory (not created up front)."""
    return tmp_path / "project" / "build"


@pytest.fixture
def build_started_at() -> datetime:
    """Wall-clock build start slightly in the past."""
    return datetime.now(tz=UTC) - timedelta(seconds=2)


@pytest.fixture
def event_log() -> EventLog:
    """Empty event log."""
    return EventLog()


@pytest.fixture
def session(build_dir: Path, build_started_at: datetime) -> TraceSession:
    """Session with the default JSON config."""
    return TraceSession(build_dir, build_started_at, TraceConfig.default())

