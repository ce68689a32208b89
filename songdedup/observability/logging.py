"""Structured logging for the duplicate engine.

Wraps structlog configuration so every entry carries:
- The scan correlation ID (see observability.context)
- The component that logged it, when bound through get_logger()

Usage:
    from songdedup.observability.logging import get_logger, configure_logging

    # Once, at process startup
    configure_logging(level="INFO")

    logger = get_logger("dedup_service")
    logger.info("duplicate_scan_started", records=120)

    # Output:
    # {"event": "duplicate_scan_started", "records": 120,
    #  "correlation_id": "abc-123", "component": "dedup_service", ...}
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from songdedup.observability.context import get_correlation_id


def add_correlation_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor adding correlation_id ("none" when unset)."""
    corr_id = get_correlation_id()
    event_dict["correlation_id"] = corr_id if corr_id else "none"
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, colored console output otherwise
        add_timestamp: Add an ISO timestamp to each entry

    Logs go to stderr so command output on stdout stays machine-readable.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(
    component: Optional[str] = None,
    **initial_context: Any,
) -> Any:
    """Get a structlog logger bound to a component and extra context.

    Args:
        component: Component name added to every entry
        **initial_context: Additional key-value pairs to bind

    Returns:
        A lazy structlog logger carrying the context
    """
    if component:
        initial_context["component"] = component

    # Lazy proxy: configuration is resolved on use, so module-level loggers
    # follow a later configure_logging() call.
    return structlog.get_logger(**initial_context)


def bind_context(**context: Any) -> None:
    """Bind key-value pairs to every later entry in the current context."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
