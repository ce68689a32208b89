"""Data models for the duplicate detection engine."""

from enum import Enum
from typing import Iterator, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from songdedup.models.song import SongRecord
from songdedup.utils.text_normalizer import is_blank


class DuplicateField(str, Enum):
    """Record field a duplicate check compares."""

    TITLE = "title"
    LYRICS = "lyrics"

    def value_of(self, record: SongRecord) -> str:
        """Raw field value of a record ("" when absent)."""
        if self is DuplicateField.TITLE:
            return record.title or ""
        return record.lyrics or ""

    @property
    def skips_blank(self) -> bool:
        """Whether blank values are excluded from this field's checks.

        Many songs have no lyrics; those must never match each other.
        Empty titles stay comparable.
        """
        return self is DuplicateField.LYRICS

    def is_comparable(self, record: SongRecord) -> bool:
        if not self.skips_blank:
            return True
        return not is_blank(self.value_of(record))


class MatchMode(str, Enum):
    EXACT = "exact"
    SIMILAR = "similar"


class ClusteringStrategy(str, Enum):
    """How fuzzy matches are grouped."""

    GREEDY = "greedy"  # Anchor-relative, scan-order dependent
    CONNECTED = "connected"  # Full transitive closure (union-find)


class CheckOptions(BaseModel):
    """Which duplicate checks to run and their thresholds.

    Thresholds are validated when a scan starts, not here, so an invalid
    value surfaces as InvalidConfigurationError from build_report.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    check_exact_titles: bool = True
    check_similar_titles: bool = True
    check_exact_lyrics: bool = True
    check_similar_lyrics: bool = False
    title_similarity_threshold: float = 0.8
    lyrics_similarity_threshold: float = 0.9
    clustering: ClusteringStrategy = ClusteringStrategy.GREEDY


class DuplicateGroup(BaseModel):
    """Records connected under one (field, mode) comparison.

    Members keep first-seen order; the first member is the anchor the
    others were compared against.
    """

    field: DuplicateField
    mode: MatchMode
    records: List[SongRecord] = Field(..., min_length=2)

    @property
    def anchor(self) -> SongRecord:
        return self.records[0]

    @property
    def record_ids(self) -> List[str]:
        return [record.id for record in self.records]

    def __len__(self) -> int:
        return len(self.records)


COLLECTION_NAMES = ("exact_titles", "similar_titles", "exact_lyrics", "similar_lyrics")


class DuplicateReport(BaseModel):
    """Four independent group collections from one scan.

    A record may appear in several collections since each is computed
    over the full record set.
    """

    exact_titles: List[DuplicateGroup] = Field(default_factory=list)
    similar_titles: List[DuplicateGroup] = Field(default_factory=list)
    exact_lyrics: List[DuplicateGroup] = Field(default_factory=list)
    similar_lyrics: List[DuplicateGroup] = Field(default_factory=list)

    def iter_collections(self) -> Iterator[Tuple[str, List[DuplicateGroup]]]:
        """Yield (collection_name, groups) in a fixed order."""
        for name in COLLECTION_NAMES:
            yield name, getattr(self, name)

    @property
    def total_groups(self) -> int:
        return sum(len(groups) for _, groups in self.iter_collections())

    @property
    def affected_record_ids(self) -> Set[str]:
        """Distinct ids appearing in any group of any collection."""
        ids: Set[str] = set()
        for _, groups in self.iter_collections():
            for group in groups:
                ids.update(group.record_ids)
        return ids

    @property
    def is_empty(self) -> bool:
        return self.total_groups == 0


class KeeperSelection(BaseModel):
    """Keeper and removable members of one group"""

    keeper: SongRecord
    removable: List[SongRecord] = Field(default_factory=list)

    @property
    def removable_ids(self) -> List[str]:
        return [record.id for record in self.removable]


class GroupResolution(BaseModel):
    """Outcome of resolving one group inside a removal plan"""

    collection: str
    keeper_id: str
    removable_ids: List[str] = Field(default_factory=list)


class RemovalPlan(BaseModel):
    """Ids chosen for deletion across a whole report.

    removal_ids is the set the caller deletes. conflicts lists ids that
    were kept in one group but marked removable in another.
    """

    removal_ids: Set[str] = Field(default_factory=set)
    resolutions: List[GroupResolution] = Field(default_factory=list)
    conflicts: Set[str] = Field(default_factory=set)
    protect_keepers: bool = False

    @property
    def keeper_ids(self) -> Set[str]:
        return {resolution.keeper_id for resolution in self.resolutions}


class ScanStats(BaseModel):
    """Duplicate scan statistics"""

    scans_run: int = 0
    records_scanned: int = 0
    groups_found: int = 0
    last_duration_seconds: Optional[float] = None

    @property
    def average_groups_per_scan(self) -> float:
        """Average number of groups found per scan"""
        if self.scans_run == 0:
            return 0.0
        return self.groups_found / self.scans_run
