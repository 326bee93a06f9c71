"""Logging for entityserde as an embedded library.

Every module logs through stdlib ``logging.getLogger(__name__)`` under the
``entityserde`` logger. At import the package logger gets a ``NullHandler``,
so nothing is printed until the host application configures logging.

:func:`configure_logging` is for applications without their own setup. It
attaches one structlog-rendered handler to the ``entityserde`` logger:
- Human (default): colored console output to stderr
- JSON (log_json=True): Structured JSON lines to stderr

The root logger and its handlers are never touched, and structlog's global
configuration is left to the application.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

LOGGER_NAME = "entityserde"
HANDLER_NAME = "entityserde.console"


def install_null_handler() -> None:
    """Give the package logger a ``NullHandler`` unless it already has handlers."""
    package_logger = logging.getLogger(LOGGER_NAME)
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())


def _add_component(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Tag records with their subsystem (``serializer``, ``plugins``, ...)."""
    parts = event_dict.get("logger", "").split(".")
    if len(parts) > 1 and parts[0] == LOGGER_NAME:
        event_dict["component"] = parts[1]
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Route ``entityserde`` records to *stream* (default stderr) via structlog.

    Repeated calls replace the handler installed by the previous call.
    Records stop propagating to the root logger while the handler is
    installed; :func:`reset_logging` undoes this.

    Args:
        verbose: Enable DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Output stream; ``sys.stderr`` when omitted.

    Returns:
        The installed handler.
    """
    out = stream if stream is not None else sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    renderers: list[structlog.types.Processor]
    if log_json:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=out.isatty())]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(out)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(LOGGER_NAME)
    _remove_console_handlers(package_logger)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False
    return handler


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""
    package_logger = logging.getLogger(LOGGER_NAME)
    _remove_console_handlers(package_logger)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def _remove_console_handlers(package_logger: logging.Logger) -> None:
    for existing in list(package_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            package_logger.removeHandler(existing)
