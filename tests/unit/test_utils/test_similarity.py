"""Tests for edit distance and similarity scoring."""

import pytest

from songdedup.utils.similarity import levenshtein_distance, similarity

SAMPLE_PAIRS = [
    ("", ""),
    ("", "abc"),
    ("kitten", "sitting"),
    ("redemption", "redemtion"),
    ("flaw", "lawn"),
    ("amazing grace", "amazing grace how sweet"),
    ("abc", "xyz"),
    ("same", "same"),
]


class TestLevenshteinDistance:
    """Tests for levenshtein_distance()."""

    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ("", "", 0),
            ("abc", "abc", 0),
            ("", "abc", 3),
            ("abc", "", 3),
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("redemption", "redemtion", 1),
            ("abc", "xyz", 3),
        ],
    )
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    @pytest.mark.parametrize("a, b", SAMPLE_PAIRS)
    def test_distance_is_symmetric(self, a, b):
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)


class TestSimilarity:
    """Tests for similarity()."""

    def test_both_empty_is_identical(self):
        assert similarity("", "") == 1.0

    def test_one_empty_scores_zero(self):
        assert similarity("abc", "") == 0.0
        assert similarity("", "abc") == 0.0

    @pytest.mark.parametrize("text", ["a", "mountain song", "ünïcödé"])
    def test_identity(self, text):
        assert similarity(text, text) == 1.0

    def test_ratio_uses_longer_length(self):
        # distance 3, longest length 7
        assert similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_one_letter_typo(self):
        assert similarity("redemption", "redemtion") == pytest.approx(0.9)

    def test_nothing_in_common(self):
        assert similarity("abc", "xyz") == 0.0

    def test_does_not_normalize(self):
        assert similarity("ABC", "abc") == 0.0

    @pytest.mark.parametrize("a, b", SAMPLE_PAIRS)
    def test_symmetry(self, a, b):
        assert similarity(a, b) == similarity(b, a)

    @pytest.mark.parametrize("a, b", SAMPLE_PAIRS)
    def test_bounds(self, a, b):
        assert 0.0 <= similarity(a, b) <= 1.0
