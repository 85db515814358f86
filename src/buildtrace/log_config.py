"""structlog setup for hosts embedding buildtrace."""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: int | str = logging.INFO, *, colors: bool = True) -> None:
    """Configure structlog with the console renderer.

    Args:
        level: Minimum level to emit (name or number).
        colors: Whether the console renderer uses ANSI colors.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            msg = f"Unknown log level: {level}"
            raise ValueError(msg)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
