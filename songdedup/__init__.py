"""songdedup: duplicate detection and keeper selection for song collections.

Usage:
    from songdedup import CheckOptions, SongRecord, build_report, select_keepers

    report = build_report(records, CheckOptions(check_similar_lyrics=True))
    for group in report.similar_titles:
        selection = select_keepers(group)
"""

from songdedup.models.dedup import (
    CheckOptions,
    ClusteringStrategy,
    DuplicateField,
    DuplicateGroup,
    DuplicateReport,
    KeeperSelection,
    MatchMode,
    RemovalPlan,
)
from songdedup.models.song import SongRecord
from songdedup.services.canonical_selector import build_removal_plan, select_keepers
from songdedup.services.dedup_service import DuplicateDetectionService, build_report
from songdedup.services.matchers import (
    find_exact_duplicates,
    find_similar_groups,
    similarity_to_anchor,
)
from songdedup.utils.exceptions import (
    DedupError,
    EmptyGroupError,
    InvalidConfigurationError,
    ScanCancelledError,
)
from songdedup.utils.similarity import levenshtein_distance, similarity
from songdedup.utils.text_normalizer import normalize

__version__ = "0.1.0"

__all__ = [
    "CheckOptions",
    "ClusteringStrategy",
    "DuplicateField",
    "DuplicateGroup",
    "DuplicateReport",
    "KeeperSelection",
    "MatchMode",
    "RemovalPlan",
    "SongRecord",
    "build_removal_plan",
    "select_keepers",
    "DuplicateDetectionService",
    "build_report",
    "find_exact_duplicates",
    "find_similar_groups",
    "similarity_to_anchor",
    "DedupError",
    "EmptyGroupError",
    "InvalidConfigurationError",
    "ScanCancelledError",
    "levenshtein_distance",
    "similarity",
    "normalize",
]
