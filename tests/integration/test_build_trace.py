"""Integration tests: a simulated multi-threaded build produces a viewable trace."""

from __future__ import annotations

import json
import random
import threading
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from buildtrace import Category, OutputFormat, TraceConfig, TraceSession
from buildtrace.trace.schema import BUILD_DURATION, BUILD_TASK_GRAPH


class FakeProject:
    """Host project."""

    def __init__(self, path: str) -> None:
        self.path = path


class FakeConfiguration:
    """Host resolvable dependency set."""

    def __init__(self, path: str) -> None:
        self.path = path


class FakeTask:
    """Host task."""

    def __init__(self, path: str) -> None:
        self.path = path


def run_fake_build(session: TraceSession, projects: list[str], workers: int = 4) -> None:
    """Drive the bridge the way a parallel build engine would."""
    bridge = session.bridge

    for path in projects:
        project = FakeProject(path)
        bridge.before_evaluate(project)
        bridge.after_evaluate(project)

    bridge.projects_evaluated()
    with bridge.traced("Calculate task graph", Category.BUILD_OPERATION):
        pass
    bridge.task_graph_ready()

    def execute(project_path: str) -> None:
        configuration = FakeConfiguration(f"{project_path}:compileClasspath")
        bridge.before_resolve(configuration)
        time.sleep(random.uniform(0, 0.002))
        bridge.after_resolve(configuration)
        for name in ("compileJava", "processResources", "jar"):
            task = FakeTask(f"{project_path}:{name}")
            bridge.before_task(task)
            time.sleep(random.uniform(0, 0.002))
            bridge.after_task(task)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(execute, projects))

    bridge.build_finished()


@pytest.fixture
def started() -> datetime:
    return datetime.now(tz=UTC) - timedelta(milliseconds=500)


class TestBuildTrace:
    """End-to-end trace production."""

    def test_known_notification_sequence(self, tmp_path: Path, started: datetime) -> None:
        session = TraceSession(tmp_path / "build", started)
        bridge = session.bridge
        bridge.before_task("a:build")
        bridge.after_task("a:build")
        bridge.before_resolve("a:compileClasspath")
        bridge.after_resolve("a:compileClasspath")
        bridge.build_finished()

        data = json.loads((tmp_path / "build" / "trace" / "task-trace.json").read_text())
        events = data["traceEvents"]
        assert len(events) == 6

        begin = [e for e in events if e["name"] == "a:build" and e["cat"] == "TASK" and e["ph"] == "B"]
        end = [e for e in events if e["name"] == "a:build" and e["cat"] == "TASK" and e["ph"] == "E"]
        assert len(begin) == len(end) == 1
        assert begin[0]["ts"] <= end[0]["ts"]
        assert sum(1 for e in events if e["name"] == BUILD_DURATION) == 2

    def test_parallel_build(self, tmp_path: Path, started: datetime) -> None:
        projects = [f":module{i}" for i in range(12)]
        session = TraceSession(tmp_path / "build", started)
        run_fake_build(session, projects)

        data = json.loads(session.trace_file.read_text())
        events = data["traceEvents"]

        # evaluate (2/project) + graph phase (2) + operation (2)
        # + resolve (2/project) + 3 tasks (6/project) + build duration (2)
        assert len(events) == len(projects) * 10 + 6
        assert data["displayTimeUnit"] == "ns"
        assert data["systemTraceEvents"] == "SystemTraceData"
        assert data["otherData"]["version"] == "My Application v1.0"

        for event in events:
            assert set(event) == {"name", "cat", "ph", "pid", "tid", "ts"}
            assert event["pid"] == 0
            assert isinstance(event["tid"], int)
            assert isinstance(event["ts"], int)

        pairs: dict[tuple[str, str], dict[str, list[dict]]] = defaultdict(
            lambda: {"B": [], "E": []}
        )
        for event in events:
            pairs[(event["name"], event["cat"])][event["ph"]].append(event)

        for (name, cat), phases in pairs.items():
            assert len(phases["B"]) == len(phases["E"]) == 1, (name, cat)
            begin, end = phases["B"][0], phases["E"][0]
            assert begin["ts"] <= end["ts"], (name, cat)
            if cat in ("TASK", "RESOLVE"):
                assert begin["tid"] == end["tid"]

        graph = pairs[(BUILD_TASK_GRAPH, "PHASE")]
        assert graph["B"][0]["ts"] <= graph["E"][0]["ts"]

        duration = pairs[(BUILD_DURATION, "PHASE")]
        earliest = min(e["ts"] for e in events)
        assert duration["B"][0]["ts"] == earliest

    def test_task_threads_are_recorded(self, tmp_path: Path, started: datetime) -> None:
        """Task events carry the id of the worker thread that ran them."""
        session = TraceSession(tmp_path / "build", started)
        run_fake_build(session, [f":m{i}" for i in range(8)], workers=4)

        events = json.loads(session.trace_file.read_text())["traceEvents"]
        task_tids = {e["tid"] for e in events if e["cat"] == "TASK"}
        assert threading.get_ident() not in task_tids
        assert 1 <= len(task_tids) <= 4

    def test_html_variant(self, tmp_path: Path, started: datetime) -> None:
        config = TraceConfig(output_format=OutputFormat.HTML)
        session = TraceSession(tmp_path / "build", started, config)
        run_fake_build(session, [":app", ":lib"])

        path = tmp_path / "build" / "trace" / "task-trace.html"
        text = path.read_text()
        start = text.index(">", text.index("<script")) + 1
        data = json.loads(text[start : text.index("</script>")])
        assert len(data["traceEvents"]) == 2 * 10 + 6

    def test_config_file_drives_session(self, tmp_path: Path, started: datetime) -> None:
        config_path = tmp_path / "buildtrace.yaml"
        config_path.write_text("file_stem: nightly\nversion: nightly v3\n")
        session = TraceSession(tmp_path / "build", started, TraceConfig.load(config_path))
        run_fake_build(session, [":app"])

        data = json.loads((tmp_path / "build" / "trace" / "nightly.json").read_text())
        assert data["otherData"]["version"] == "nightly v3"
