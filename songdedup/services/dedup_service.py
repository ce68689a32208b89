"""Duplicate detection service.

Runs up to four independent checks over a record list:
1. Exact title matching (normalized equality, O(n))
2. Similar title matching (edit-distance similarity, O(n^2))
3. Exact lyrics matching
4. Similar lyrics matching

Disabled checks yield empty collections; enabling or disabling one check
never changes another check's groups.
"""

import asyncio
import math
import threading
import time
from typing import List, Optional, Sequence

from songdedup.models.dedup import (
    CheckOptions,
    DuplicateField,
    DuplicateGroup,
    DuplicateReport,
    ScanStats,
)
from songdedup.models.song import SongRecord
from songdedup.observability.logging import get_logger
from songdedup.observability.metrics import (
    DUPLICATE_GROUPS_FOUND,
    RECORDS_SCANNED,
    SCAN_DURATION,
    SCANS_TOTAL,
    MetricsContext,
)
from songdedup.services.matchers import (
    find_exact_duplicates,
    find_similar_groups,
    get_clusterer,
)
from songdedup.utils.exceptions import InvalidConfigurationError, ScanCancelledError

logger = get_logger("dedup_service")

DEFAULT_LARGE_CORPUS_WARNING = 2000


def validate_options(options: CheckOptions) -> None:
    """Reject thresholds outside [0, 1].

    Raises:
        InvalidConfigurationError: If either threshold is out of range or NaN
    """
    for name in ("title_similarity_threshold", "lyrics_similarity_threshold"):
        value = getattr(options, name)
        if math.isnan(value) or not 0.0 <= value <= 1.0:
            raise InvalidConfigurationError(
                f"{name} must be between 0 and 1, got {value}"
            )


class DuplicateDetectionService:
    """
    Find duplicate songs in an in-memory collection.

    The service holds no per-scan state besides its statistics, so one
    instance can serve many scans, including concurrent ones.
    """

    def __init__(self, large_corpus_warning: int = DEFAULT_LARGE_CORPUS_WARNING):
        """
        Initialize duplicate detection service.

        Args:
            large_corpus_warning: Record count above which fuzzy checks
                log a slow-scan warning
        """
        self.large_corpus_warning = large_corpus_warning
        self.stats = ScanStats()
        self._stats_lock = threading.Lock()

    def build_report(
        self,
        records: Sequence[SongRecord],
        options: Optional[CheckOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> DuplicateReport:
        """
        Run every enabled check and collect the groups.

        Args:
            records: Records to scan, in scan order
            options: Checks and thresholds (defaults when omitted)
            cancel_event: Set from another thread to abandon the scan

        Returns:
            DuplicateReport with one collection per check

        Raises:
            InvalidConfigurationError: If a threshold is outside [0, 1]
            ScanCancelledError: If cancel_event was set mid-scan
        """
        options = options or CheckOptions()
        validate_options(options)

        records = list(records)
        logger.info(
            "duplicate_scan_started",
            records=len(records),
            exact_titles=options.check_exact_titles,
            similar_titles=options.check_similar_titles,
            exact_lyrics=options.check_exact_lyrics,
            similar_lyrics=options.check_similar_lyrics,
            clustering=options.clustering.value,
        )

        fuzzy_enabled = options.check_similar_titles or options.check_similar_lyrics
        if fuzzy_enabled and len(records) > self.large_corpus_warning:
            logger.warning(
                "large_corpus_fuzzy_scan",
                records=len(records),
                limit=self.large_corpus_warning,
            )

        started = time.perf_counter()
        with MetricsContext(
            histogram=SCAN_DURATION,
            success_counter=SCANS_TOTAL.labels(status="success"),
        ) as ctx:
            try:
                report = self._run_checks(records, options, cancel_event)
            except ScanCancelledError:
                SCANS_TOTAL.labels(status="cancelled").inc()
                logger.info("duplicate_scan_cancelled", records=len(records))
                raise
            except Exception:
                SCANS_TOTAL.labels(status="failed").inc()
                raise
            ctx.mark_success()
        duration = time.perf_counter() - started

        RECORDS_SCANNED.inc(len(records))
        for name, groups in report.iter_collections():
            DUPLICATE_GROUPS_FOUND.labels(collection=name).inc(len(groups))

        with self._stats_lock:
            self.stats.scans_run += 1
            self.stats.records_scanned += len(records)
            self.stats.groups_found += report.total_groups
            self.stats.last_duration_seconds = duration

        logger.info(
            "duplicate_scan_complete",
            records=len(records),
            exact_titles=len(report.exact_titles),
            similar_titles=len(report.similar_titles),
            exact_lyrics=len(report.exact_lyrics),
            similar_lyrics=len(report.similar_lyrics),
            affected=len(report.affected_record_ids),
            duration=f"{duration:.3f}s",
        )

        return report

    async def build_report_async(
        self,
        records: Sequence[SongRecord],
        options: Optional[CheckOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> DuplicateReport:
        """
        Run build_report in a worker thread.

        If the awaiting task is cancelled, cancel_event is set so the worker
        stops at its next checkpoint, and the partial result is dropped. An
        event is created when the caller passes none.
        """
        if cancel_event is None:
            cancel_event = threading.Event()

        try:
            return await asyncio.to_thread(
                self.build_report, records, options, cancel_event
            )
        except asyncio.CancelledError:
            cancel_event.set()
            raise

    def _run_checks(
        self,
        records: List[SongRecord],
        options: CheckOptions,
        cancel_event: Optional[threading.Event],
    ) -> DuplicateReport:
        exact_titles: List[DuplicateGroup] = []
        similar_titles: List[DuplicateGroup] = []
        exact_lyrics: List[DuplicateGroup] = []
        similar_lyrics: List[DuplicateGroup] = []

        if options.check_exact_titles:
            exact_titles = find_exact_duplicates(
                records, DuplicateField.TITLE, cancel_event
            )

        if options.check_similar_titles:
            similar_titles = find_similar_groups(
                records,
                DuplicateField.TITLE,
                options.title_similarity_threshold,
                clusterer=get_clusterer(options.clustering),
                cancel_event=cancel_event,
            )

        if options.check_exact_lyrics:
            exact_lyrics = find_exact_duplicates(
                records, DuplicateField.LYRICS, cancel_event
            )

        if options.check_similar_lyrics:
            similar_lyrics = find_similar_groups(
                records,
                DuplicateField.LYRICS,
                options.lyrics_similarity_threshold,
                clusterer=get_clusterer(options.clustering),
                cancel_event=cancel_event,
            )

        return DuplicateReport(
            exact_titles=exact_titles,
            similar_titles=similar_titles,
            exact_lyrics=exact_lyrics,
            similar_lyrics=similar_lyrics,
        )

    def get_stats(self) -> ScanStats:
        """
        Get scan statistics.

        Returns:
            Copy of the statistics accumulated so far
        """
        with self._stats_lock:
            return self.stats.model_copy()

    def reset_stats(self):
        """Reset scan statistics"""
        with self._stats_lock:
            self.stats = ScanStats()
        logger.info("scan_stats_reset")


def build_report(
    records: Sequence[SongRecord],
    options: Optional[CheckOptions] = None,
    cancel_event: Optional[threading.Event] = None,
) -> DuplicateReport:
    """Scan records for duplicates with a throwaway service.

    See DuplicateDetectionService.build_report.
    """
    return DuplicateDetectionService().build_report(records, options, cancel_event)
