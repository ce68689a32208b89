"""Tests for CLI commands."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from songdedup.cli import app

runner = CliRunner()


@pytest.fixture
def songs_file(tmp_path):
    songs = [
        {
            "slug": "mountain-song",
            "title": "Mountain Song",
            "audio": "mountain.mp3",
            "image": "mountain.png",
            "createdAt": "2024-01-01T00:00:00.000Z",
        },
        {
            "slug": "mountain-song-copy",
            "title": "mountain song!",
            "createdAt": "2024-06-01T00:00:00.000Z",
        },
        {"slug": "redemption", "title": "Redemption"},
        {"slug": "redemtion", "title": "Redemtion"},
        {"slug": "solo", "title": "Completely Different"},
    ]
    path = tmp_path / "songs.json"
    path.write_text(json.dumps(songs))
    return path


@pytest.fixture
def unique_songs_file(tmp_path):
    path = tmp_path / "unique.json"
    path.write_text(
        json.dumps([{"slug": "a", "title": "Alpha"}, {"slug": "b", "title": "Omega"}])
    )
    return path


@pytest.fixture
def no_logging_reconfigure():
    """Keep --config from pointing structlog at the runner's streams."""
    with patch("songdedup.cli.utils.configure_logging"):
        yield


def test_scan_lists_groups(songs_file):
    result = runner.invoke(app, ["scan", str(songs_file)])

    assert result.exit_code == 0
    assert "Found 3 duplicate groups affecting 4 songs" in result.stdout
    assert "Exact Title Matches (1)" in result.stdout
    assert "Similar Titles (2)" in result.stdout
    assert "redemtion: Redemtion (90.0% similar)" in result.stdout
    assert "mountain-song: Mountain Song [audio, image]" in result.stdout


def test_scan_no_duplicates(unique_songs_file):
    result = runner.invoke(app, ["scan", str(unique_songs_file)])

    assert result.exit_code == 0
    assert "No duplicates found among 2 songs" in result.stdout


def test_scan_json(songs_file):
    result = runner.invoke(app, ["scan", str(songs_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert len(payload["exact_titles"]) == 1
    assert len(payload["similar_titles"]) == 2
    assert payload["similar_lyrics"] == []


def test_scan_flags_disable_checks(songs_file):
    result = runner.invoke(
        app,
        ["scan", str(songs_file), "--no-exact-titles", "--no-similar-titles", "--json"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["exact_titles"] == []
    assert payload["similar_titles"] == []


def test_scan_threshold_flag(songs_file):
    result = runner.invoke(
        app, ["scan", str(songs_file), "--title-threshold", "1.0", "--json"]
    )

    payload = json.loads(result.stdout)
    assert len(payload["similar_titles"]) == 1


def test_scan_invalid_threshold(songs_file):
    result = runner.invoke(app, ["scan", str(songs_file), "--title-threshold", "1.5"])

    assert result.exit_code == 1
    assert "Error:" in result.stdout
    assert "title_similarity_threshold" in result.stdout


def test_scan_missing_records(tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "Records Error" in result.stdout


def test_scan_config_error(songs_file):
    result = runner.invoke(app, ["scan", str(songs_file), "--config", "nope.yaml"])

    assert result.exit_code == 1
    assert "Configuration Error" in result.stdout


def test_scan_with_config(songs_file, tmp_path, no_logging_reconfigure):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("options:\n  check_similar_titles: false\n")

    result = runner.invoke(app, ["scan", str(songs_file), "--config", str(config_file)])

    assert result.exit_code == 0
    assert "Found 1 duplicate groups" in result.stdout
    assert "Similar Titles" not in result.stdout


def test_resolve(songs_file):
    result = runner.invoke(app, ["resolve", str(songs_file)])

    assert result.exit_code == 0
    assert "[exact_titles] keep mountain-song, remove mountain-song-copy" in result.stdout
    assert "[similar_titles] keep redemption, remove redemtion" in result.stdout
    assert "2 songs selected for removal:" in result.stdout


def test_resolve_json(songs_file):
    result = runner.invoke(app, ["resolve", str(songs_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert sorted(payload["removal_ids"]) == ["mountain-song-copy", "redemtion"]
    assert payload["conflicts"] == []


def test_resolve_single_collection(songs_file):
    result = runner.invoke(
        app, ["resolve", str(songs_file), "--collection", "exact_titles", "--json"]
    )

    payload = json.loads(result.stdout)
    assert payload["removal_ids"] == ["mountain-song-copy"]


def test_resolve_unknown_collection(songs_file):
    result = runner.invoke(app, ["resolve", str(songs_file), "--collection", "nope"])

    assert result.exit_code == 1
    assert "Unknown collections" in result.stdout


def test_resolve_nothing_to_do(unique_songs_file):
    result = runner.invoke(app, ["resolve", str(unique_songs_file)])

    assert result.exit_code == 0
    assert "No duplicates to resolve" in result.stdout


def test_similarity_normalizes():
    result = runner.invoke(app, ["similarity", "Redemption!", "redemtion"])

    assert result.exit_code == 0
    assert "90.0% similar" in result.stdout


def test_similarity_raw():
    result = runner.invoke(app, ["similarity", "ABC", "abc", "--raw"])

    assert result.exit_code == 0
    assert "0.0% similar" in result.stdout


def test_validate_success(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("options:\n  lyrics_similarity_threshold: 0.95\n")

    result = runner.invoke(app, ["validate", str(config_file)])

    assert result.exit_code == 0
    assert "Configuration is valid" in result.stdout


def test_validate_out_of_range(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("options:\n  lyrics_similarity_threshold: 1.5\n")

    result = runner.invoke(app, ["validate", str(config_file)])

    assert result.exit_code == 1
    assert "Validation failed" in result.stdout


def test_validate_missing_file():
    result = runner.invoke(app, ["validate", "missing.yaml"])

    assert result.exit_code == 1
    assert "Validation failed" in result.stdout
