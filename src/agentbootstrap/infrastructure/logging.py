"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from pathlib import Path  # noqa: TC003 - used at runtime for context binding

import structlog

__all__ = [
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
]


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structured logging for agentbootstrap.

    Diagnostic logs go to stderr so they never interleave with the
    progress report printed on stdout.

    Args:
        debug: Enable debug level logging.
        json_logs: Output JSON format (for machine parsing).
    """
    log_level = logging.DEBUG if debug else logging.WARNING

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: structlog.types.Processor
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def bind_run_context(*, mode: str, target: Path) -> None:
    """Attach run-wide context to every log event emitted afterwards.

    Args:
        mode: Run mode ("bootstrap", "init" or "setup").
        target: Directory being bootstrapped.
    """
    structlog.contextvars.bind_contextvars(mode=mode, target=str(target))


def clear_run_context() -> None:
    """Drop context bound by bind_run_context."""
    structlog.contextvars.clear_contextvars()
