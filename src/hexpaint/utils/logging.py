"""Structured logging configuration using structlog.

Log events raised while a layer handles a map event carry correlation ids:
which layer is handling it (``layer_id``), which grid redraw is running
(``redraw``) and which pointer gesture is in progress (``gesture``).
Output is JSON for machine consumption or a colored console rendering,
always on stderr so command output on stdout stays parseable. Records
from plain ``logging.getLogger`` loggers pass through the same
processors, correlation ids included.
"""

import logging
import sys
from collections.abc import MutableMapping
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import Processor

from hexpaint.config import settings

CORRELATION_KEYS = ("layer_id", "redraw", "gesture")

_correlation: ContextVar[dict[str, int] | None] = ContextVar("correlation", default=None)


def set_correlation_context(
    layer_id: int | None = None,
    redraw: int | None = None,
    gesture: int | None = None,
) -> None:
    """Update correlation IDs for the current context.

    Only the ids passed are changed; the others keep their current value.

    Args:
        layer_id: Local id of the layer handling the event
        redraw: Sequence number of the grid redraw in progress
        gesture: Sequence number of the pointer gesture in progress
    """
    updates = {"layer_id": layer_id, "redraw": redraw, "gesture": gesture}
    current = dict(_correlation.get() or {})
    current.update({key: value for key, value in updates.items() if value is not None})
    _correlation.set(current)


def get_correlation_context() -> dict[str, int]:
    """Return a copy of the correlation IDs set in the current context."""
    return dict(_correlation.get() or {})


def clear_correlation_context() -> None:
    """Clear all correlation IDs."""
    _correlation.set(None)


def _add_correlation_ids(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor to add correlation IDs to log events."""
    _ = logger, method_name  # Required by structlog processor signature
    context = _correlation.get() or {}
    for key in CORRELATION_KEYS:
        if key in context:
            event_dict[key] = context[key]
    return event_dict


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call repeatedly; the last call wins.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to settings.LOG_LEVEL.
        log_format: Output format ("console" or "json").
                    Defaults to settings.LOG_FORMAT.
    """
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_correlation_ids,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Library modules log through plain stdlib loggers; render them the same way
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderer(log_format),
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(
        handlers=[handler],
        level=getattr(logging, level.upper()),
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
