"""Prometheus metrics for duplicate scans.

Usage:
    from songdedup.observability.metrics import SCANS_TOTAL, SCAN_DURATION

    SCANS_TOTAL.labels(status="success").inc()

    with SCAN_DURATION.time():
        run_scan()

Metrics live in a private registry so embedding applications and tests
never collide with the default prometheus registry.
"""

from typing import Any, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS
# =============================================================================

SCANS_TOTAL = Counter(
    name="songdedup_scans_total",
    documentation="Total duplicate scans",
    labelnames=["status"],  # success, failed, cancelled
    registry=REGISTRY,
)

RECORDS_SCANNED = Counter(
    name="songdedup_records_scanned_total",
    documentation="Total records passed to duplicate scans",
    registry=REGISTRY,
)

DUPLICATE_GROUPS_FOUND = Counter(
    name="songdedup_duplicate_groups_total",
    documentation="Total duplicate groups found",
    labelnames=["collection"],  # exact_titles, similar_titles, exact_lyrics, similar_lyrics
    registry=REGISTRY,
)

RECORDS_MARKED_FOR_REMOVAL = Counter(
    name="songdedup_records_marked_for_removal_total",
    documentation="Total record ids placed in removal plans",
    registry=REGISTRY,
)

# =============================================================================
# HISTOGRAMS
# =============================================================================

SCAN_DURATION = Histogram(
    name="songdedup_scan_duration_seconds",
    documentation="Duplicate scan duration in seconds",
    buckets=(0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30, 60, float("inf")),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Metrics in Prometheus text exposition format."""
    return generate_latest(REGISTRY)


class MetricsContext:
    """Time an operation and count its outcome.

    Example:
        with MetricsContext(
            histogram=SCAN_DURATION,
            success_counter=SCANS_TOTAL.labels(status="success"),
            failure_counter=SCANS_TOTAL.labels(status="failed"),
        ) as ctx:
            report = scan()
            ctx.mark_success()

    Leaving the block without mark_success() counts as a failure.
    """

    def __init__(
        self,
        histogram: Optional[Histogram] = None,
        success_counter: Optional[Counter] = None,
        failure_counter: Optional[Counter] = None,
    ):
        self._histogram = histogram
        self._success_counter = success_counter
        self._failure_counter = failure_counter
        self._timer: Any = None
        self._success = False

    def __enter__(self) -> "MetricsContext":
        if self._histogram:
            self._timer = self._histogram.time()
            self._timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._timer:
            self._timer.__exit__(exc_type, exc_val, exc_tb)

        if exc_type is None and self._success:
            if self._success_counter:
                self._success_counter.inc()
        elif self._failure_counter:
            self._failure_counter.inc()

    def mark_success(self) -> None:
        self._success = True
