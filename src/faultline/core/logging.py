"""
Structured logging for faultline.

Barriers never print. They emit DEBUG-level structlog events through stdlib
loggers named after their modules, so an application that never configures
logging sees nothing, and one that does gets the events in its own format.

Architecture:
    ::

        get_logger(__name__)
            │
            ▼
        structlog BoundLogger ── processors ──► logging.getLogger(__name__)
                                                  (stdlib level/handlers decide)

        configure_logging(level="DEBUG", json_format=True)
            merge_contextvars → filter_by_level → add_log_level
            → add_logger_name → TimeStamper → service metadata
            → JSONRenderer | ConsoleRenderer

Examples:
    >>> from faultline.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True, service="billing")
    >>> logger = get_logger(__name__)
    >>> logger.debug("fault.captured", category="INCIDENTAL")

Tags:
    logging, structlog, observability, faultline

Doc-Types:
    - API Reference
    - Observability Guide
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from faultline.core.settings import get_settings

# Store service name for metadata
_SERVICE_NAME = "faultline"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    service: str = "faultline",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level; defaults to ``FaultlineSettings.log_level``
        json_format: True for JSON, False for console, None for the
            ``json_logs`` setting (auto-detected from the TTY when unset)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    settings = get_settings()
    level = (level or settings.log_level).upper()
    if json_format is None:
        json_format = settings.json_logs
    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level),
    )
    logging.getLogger("faultline").setLevel(getattr(logging, level))


def _run_configured_processors(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict | str:
    """Run the processor chain structlog is configured with at call time."""
    for processor in structlog.get_config()["processors"]:
        event_dict = processor(logger, method_name, event_dict)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger backed by the stdlib logger ``name``.

    The stdlib logger is wrapped explicitly so output stays governed by
    stdlib levels and handlers even before ``configure_logging()`` runs.
    ``filter_by_level`` runs first, so an event below the stdlib logger's
    level is dropped before any rendering work.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[structlog.stdlib.filter_by_level, _run_configured_processors],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


__all__ = [
    "configure_logging",
    "get_logger",
]
