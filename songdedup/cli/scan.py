"""Scan command.

Finds duplicate songs in a JSON export and prints the groups.
"""

from pathlib import Path
from typing import Optional

import typer

from songdedup.models.dedup import ClusteringStrategy
from songdedup.observability.context import correlation_id_context
from songdedup.services.dedup_service import DuplicateDetectionService
from songdedup.cli.utils import (
    apply_overrides,
    display_info,
    display_success,
    format_group,
    handle_errors,
    load_config,
    load_records,
)

SECTION_TITLES = {
    "exact_titles": "Exact Title Matches",
    "similar_titles": "Similar Titles",
    "exact_lyrics": "Exact Lyrics Matches",
    "similar_lyrics": "Similar Lyrics",
}


@handle_errors
def scan_command(
    records_path: Path = typer.Argument(..., help="JSON file of songs"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Engine config YAML"
    ),
    exact_titles: Optional[bool] = typer.Option(
        None, "--exact-titles/--no-exact-titles", help="Check identical titles"
    ),
    similar_titles: Optional[bool] = typer.Option(
        None, "--similar-titles/--no-similar-titles", help="Check similar titles"
    ),
    exact_lyrics: Optional[bool] = typer.Option(
        None, "--exact-lyrics/--no-exact-lyrics", help="Check identical lyrics"
    ),
    similar_lyrics: Optional[bool] = typer.Option(
        None, "--similar-lyrics/--no-similar-lyrics", help="Check similar lyrics"
    ),
    title_threshold: Optional[float] = typer.Option(
        None, "--title-threshold", help="Title similarity threshold (0-1)"
    ),
    lyrics_threshold: Optional[float] = typer.Option(
        None, "--lyrics-threshold", help="Lyrics similarity threshold (0-1)"
    ),
    clustering: Optional[ClusteringStrategy] = typer.Option(
        None, "--clustering", help="Fuzzy grouping strategy"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """Find duplicate songs and print the groups."""
    config = load_config(config_path)
    records = load_records(records_path)
    options = apply_overrides(
        config.options,
        check_exact_titles=exact_titles,
        check_similar_titles=similar_titles,
        check_exact_lyrics=exact_lyrics,
        check_similar_lyrics=similar_lyrics,
        title_similarity_threshold=title_threshold,
        lyrics_similarity_threshold=lyrics_threshold,
        clustering=clustering,
    )

    with correlation_id_context():
        service = DuplicateDetectionService(
            large_corpus_warning=config.large_corpus_warning
        )
        report = service.build_report(records, options)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return

    if report.is_empty:
        display_success(f"No duplicates found among {len(records)} songs ✅")
        return

    display_info(
        f"Found {report.total_groups} duplicate groups affecting "
        f"{len(report.affected_record_ids)} songs"
    )
    for name, groups in report.iter_collections():
        if not groups:
            continue
        typer.echo(f"\n{SECTION_TITLES[name]} ({len(groups)})")
        for group in groups:
            for line in format_group(group):
                typer.echo(line)
