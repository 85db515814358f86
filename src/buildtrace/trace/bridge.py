"""Translate host build lifecycle notifications into trace events."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from buildtrace.trace.log import EventLog
from buildtrace.trace.schema import BUILD_TASK_GRAPH, Category, Phase, TraceEvent

logger = structlog.get_logger()

# Attributes tried, in order, when a notification carries an object.
_NAME_ATTRIBUTES = ("path", "display_name", "name")


def resolve_name(subject: Any) -> str:
    """Best identifier for a task, project, dependency set or operation.

    Args:
        subject: A string, or an object exposing ``path``, ``display_name``
            or ``name``.

    Accessors that raise are skipped and the next attribute is tried.

    Returns:
        The identifier, or ``""`` when none is available.
    """
    if subject is None:
        return ""
    if isinstance(subject, str):
        return subject
    for attr in _NAME_ATTRIBUTES:
        try:
            value = getattr(subject, attr, None)
            if callable(value):
                value = value()
            if value is not None:
                return str(value)
        except Exception as e:
            logger.debug("Name accessor failed", attribute=attr, error=str(e))
    return ""


class LifecycleBridge:
    """Callback set the host build invokes at lifecycle points.

    Each notification appends exactly one event to the log. Callbacks run
    on whatever thread the host uses and never raise into the host.

    Example:
        >>> bridge = LifecycleBridge(EventLog())
        >>> bridge.before_task(":app:compileJava")
        >>> bridge.after_task(":app:compileJava")
        >>> bridge.events_recorded
        2
    """

    def __init__(
        self,
        log: EventLog,
        *,
        on_build_finished: Callable[[], Any] | None = None,
        enabled: bool = True,
    ) -> None:
        """Initialize the bridge.

        Args:
            log: Event log to append to.
            on_build_finished: Called once by ``build_finished``.
            enabled: When False, notifications are ignored.
        """
        self.log = log
        self.enabled = enabled
        self._on_build_finished = on_build_finished
        self._recorded = 0
        self._count_lock = threading.Lock()
        self._log = logger.bind(component="lifecycle_bridge")

    @property
    def events_recorded(self) -> int:
        """Number of events appended through this bridge."""
        return self._recorded

    def _record(self, subject: Any, category: Category, phase: Phase) -> None:
        if not self.enabled:
            return
        try:
            name = resolve_name(subject)
            if phase is Phase.BEGIN:
                event = TraceEvent.began(name, category)
            else:
                event = TraceEvent.ended(name, category)
            self.log.append(event)
            with self._count_lock:
                self._recorded += 1
        except Exception as e:
            self._log.warning(
                "Failed to record trace event",
                category=category.value,
                phase=phase.value,
                error=str(e),
            )

    # Tasks
    def before_task(self, task: Any) -> None:
        """Task is about to execute."""
        self._record(task, Category.TASK, Phase.BEGIN)

    def after_task(self, task: Any, state: Any = None) -> None:  # noqa: ARG002
        """Task finished, successfully or not."""
        self._record(task, Category.TASK, Phase.END)

    # Dependency resolution
    def before_resolve(self, dependencies: Any) -> None:
        """Dependency set is about to resolve."""
        self._record(dependencies, Category.RESOLVE, Phase.BEGIN)

    def after_resolve(self, dependencies: Any) -> None:
        """Dependency set resolved."""
        self._record(dependencies, Category.RESOLVE, Phase.END)

    # Project evaluation
    def before_evaluate(self, project: Any) -> None:
        """Project is about to be evaluated."""
        self._record(project, Category.EVALUATE, Phase.BEGIN)

    def after_evaluate(self, project: Any, state: Any = None) -> None:  # noqa: ARG002
        """Project evaluated."""
        self._record(project, Category.EVALUATE, Phase.END)

    # Internal build operations
    def operation_started(self, operation: Any) -> None:
        """Generic build operation started."""
        self._record(operation, Category.BUILD_OPERATION, Phase.BEGIN)

    def operation_finished(self, operation: Any) -> None:
        """Generic build operation finished."""
        self._record(operation, Category.BUILD_OPERATION, Phase.END)

    # Build-wide milestones
    def projects_evaluated(self) -> None:
        """All projects evaluated; task graph construction begins."""
        self._record(BUILD_TASK_GRAPH, Category.PHASE, Phase.BEGIN)

    def task_graph_ready(self) -> None:
        """Task execution graph is ready."""
        self._record(BUILD_TASK_GRAPH, Category.PHASE, Phase.END)

    def build_finished(self) -> Any:
        """Build completed. Fires once, after every other notification."""
        if self._on_build_finished is None:
            return None
        try:
            return self._on_build_finished()
        except Exception as e:
            self._log.error("Build finished handler failed", error=str(e))
            return None

    @contextmanager
    def traced(self, subject: Any, category: Category) -> Iterator[None]:
        """Bracket a block with BEGIN/END events.

        The END event is recorded even if the block raises.

        Example:
            >>> with bridge.traced("resolve plugins", Category.BUILD_OPERATION):
            ...     resolve_plugins()
        """
        self._record(subject, category, Phase.BEGIN)
        try:
            yield
        finally:
            self._record(subject, category, Phase.END)
