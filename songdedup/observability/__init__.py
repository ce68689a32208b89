"""Observability for the duplicate engine.

Provides:
- Correlation ID context for tracing a scan through its log lines
- structlog configuration and component loggers
- Prometheus metrics for scan counts, durations and groups found
"""

from songdedup.observability.context import (
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    correlation_id_context,
)
from songdedup.observability.logging import (
    get_logger,
    configure_logging,
    add_correlation_id_processor,
)
from songdedup.observability.metrics import (
    SCANS_TOTAL,
    RECORDS_SCANNED,
    DUPLICATE_GROUPS_FOUND,
    RECORDS_MARKED_FOR_REMOVAL,
    SCAN_DURATION,
    MetricsContext,
    get_metrics_text,
)

__all__ = [
    # Context
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
    # Logging
    "get_logger",
    "configure_logging",
    "add_correlation_id_processor",
    # Metrics
    "SCANS_TOTAL",
    "RECORDS_SCANNED",
    "DUPLICATE_GROUPS_FOUND",
    "RECORDS_MARKED_FOR_REMOVAL",
    "SCAN_DURATION",
    "MetricsContext",
    "get_metrics_text",
]
