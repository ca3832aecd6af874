"""Structured logging configuration for vecdraw-py.

Provides structlog setup and an operation context that tags every log line
emitted while a scene mutation or import batch runs.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Generator


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structured logging for the engine.

    Log lines go to stderr so commands that print SVG or path strings to stdout
    stay pipeable.

    Args:
        debug: Enable debug level logging.
        json_logs: Output logs as JSON (for production).
    """
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.extend(
            [
                structlog.processors.ExceptionPrettyPrinter(),
                structlog.dev.ConsoleRenderer(colors=True),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


@contextmanager
def operation_context(operation: str, **fields: Any) -> Generator[str, None, None]:
    """Bind an operation ID to the structlog context for the duration of a block.

    Nested operations keep the outermost operation ID so one user action
    shows up under a single ID.

    Args:
        operation: Name of the operation (``"group"``, ``"import"``...).
        **fields: Extra context values to bind.

    Yields:
        The operation ID in effect.
    """
    current = structlog.contextvars.get_contextvars()
    if "operation_id" in current:
        yield current["operation_id"]
        return

    operation_id = str(uuid.uuid4())
    with structlog.contextvars.bound_contextvars(operation_id=operation_id, operation=operation, **fields):
        yield operation_id
