"""Tests for duplicate engine models."""

import pytest
from pydantic import ValidationError

from songdedup.models.config import EngineConfig
from songdedup.models.dedup import (
    CheckOptions,
    ClusteringStrategy,
    DuplicateField,
    DuplicateGroup,
    DuplicateReport,
    GroupResolution,
    MatchMode,
    RemovalPlan,
    ScanStats,
)
from songdedup.models.song import SongRecord


def _song(song_id, title="t", lyrics=None):
    return SongRecord(id=song_id, title=title, lyrics=lyrics)


class TestCheckOptions:
    """Tests for CheckOptions."""

    def test_defaults(self):
        options = CheckOptions()

        assert options.check_exact_titles
        assert options.check_similar_titles
        assert options.check_exact_lyrics
        assert not options.check_similar_lyrics
        assert options.title_similarity_threshold == 0.8
        assert options.lyrics_similarity_threshold == 0.9
        assert options.clustering == ClusteringStrategy.GREEDY

    def test_accepts_camel_case(self):
        options = CheckOptions.model_validate(
            {
                "checkExactTitles": False,
                "checkSimilarLyrics": True,
                "titleSimilarityThreshold": 0.7,
            }
        )

        assert not options.check_exact_titles
        assert options.check_similar_lyrics
        assert options.title_similarity_threshold == 0.7

    def test_out_of_range_threshold_is_not_rejected_here(self):
        # Range is checked when a scan starts
        options = CheckOptions(title_similarity_threshold=1.5)
        assert options.title_similarity_threshold == 1.5

    def test_unknown_clustering_is_rejected(self):
        with pytest.raises(ValidationError):
            CheckOptions(clustering="random")


class TestDuplicateField:
    """Tests for DuplicateField."""

    def test_value_of(self):
        record = _song("a", title="Title", lyrics=None)

        assert DuplicateField.TITLE.value_of(record) == "Title"
        assert DuplicateField.LYRICS.value_of(record) == ""

    def test_blank_lyrics_are_not_comparable(self):
        assert not DuplicateField.LYRICS.is_comparable(_song("a", lyrics=None))
        assert not DuplicateField.LYRICS.is_comparable(_song("a", lyrics="  \n"))
        assert DuplicateField.LYRICS.is_comparable(_song("a", lyrics="la la"))

    def test_blank_titles_stay_comparable(self):
        assert DuplicateField.TITLE.is_comparable(_song("a", title=""))


class TestDuplicateGroup:
    """Tests for DuplicateGroup."""

    def test_needs_two_records(self):
        with pytest.raises(ValidationError):
            DuplicateGroup(
                field=DuplicateField.TITLE, mode=MatchMode.EXACT, records=[_song("a")]
            )

    def test_helpers(self):
        group = DuplicateGroup(
            field=DuplicateField.TITLE,
            mode=MatchMode.EXACT,
            records=[_song("a"), _song("b"), _song("c")],
        )

        assert len(group) == 3
        assert group.anchor.id == "a"
        assert group.record_ids == ["a", "b", "c"]


class TestDuplicateReport:
    """Tests for DuplicateReport."""

    def test_empty_report(self):
        report = DuplicateReport()

        assert report.is_empty
        assert report.total_groups == 0
        assert report.affected_record_ids == set()
        assert [name for name, _ in report.iter_collections()] == [
            "exact_titles",
            "similar_titles",
            "exact_lyrics",
            "similar_lyrics",
        ]

    def test_summary_counts_distinct_records(self):
        title_group = DuplicateGroup(
            field=DuplicateField.TITLE,
            mode=MatchMode.EXACT,
            records=[_song("a"), _song("b")],
        )
        lyrics_group = DuplicateGroup(
            field=DuplicateField.LYRICS,
            mode=MatchMode.SIMILAR,
            records=[_song("b"), _song("c")],
        )
        report = DuplicateReport(
            exact_titles=[title_group], similar_lyrics=[lyrics_group]
        )

        assert report.total_groups == 2
        assert report.affected_record_ids == {"a", "b", "c"}
        assert not report.is_empty


def test_removal_plan_keeper_ids():
    plan = RemovalPlan(
        removal_ids={"b", "c"},
        resolutions=[
            GroupResolution(collection="exact_titles", keeper_id="a", removable_ids=["b"]),
            GroupResolution(collection="exact_lyrics", keeper_id="d", removable_ids=["c"]),
        ],
    )
    assert plan.keeper_ids == {"a", "d"}


def test_scan_stats_average():
    assert ScanStats().average_groups_per_scan == 0.0
    assert ScanStats(scans_run=2, groups_found=3).average_groups_per_scan == 1.5


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.options == CheckOptions()
        assert config.log_level == "INFO"
        assert config.large_corpus_warning == 2000

    def test_log_level_is_uppercased(self):
        assert EngineConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(log_level="chatty")
