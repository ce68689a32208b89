"""Resolve command.

Chooses a keeper per duplicate group and prints the ids to delete. Nothing
is deleted; the caller applies the removal set to its own storage.
"""

from pathlib import Path
from typing import List, Optional

import typer

from songdedup.observability.context import correlation_id_context
from songdedup.services.canonical_selector import build_removal_plan
from songdedup.services.dedup_service import DuplicateDetectionService
from songdedup.cli.utils import (
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
    load_records,
)


@handle_errors
def resolve_command(
    records_path: Path = typer.Argument(..., help="JSON file of songs"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Engine config YAML"
    ),
    collections: Optional[List[str]] = typer.Option(
        None,
        "--collection",
        help="Only resolve this collection (repeatable): "
        "exact_titles, similar_titles, exact_lyrics, similar_lyrics",
    ),
    protect_keepers: bool = typer.Option(
        False,
        "--protect-keepers",
        help="Never remove a song kept by any group",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
):
    """Pick keepers and list the songs that can be removed."""
    config = load_config(config_path)
    records = load_records(records_path)

    with correlation_id_context():
        service = DuplicateDetectionService(
            large_corpus_warning=config.large_corpus_warning
        )
        report = service.build_report(records, config.options)
        plan = build_removal_plan(
            report, collections=collections or None, protect_keepers=protect_keepers
        )

    if as_json:
        typer.echo(plan.model_dump_json(indent=2))
        return

    if not plan.resolutions:
        display_success("No duplicates to resolve ✅")
        return

    for resolution in plan.resolutions:
        typer.echo(
            f"[{resolution.collection}] keep {resolution.keeper_id}, "
            f"remove {', '.join(resolution.removable_ids)}"
        )

    if plan.conflicts:
        action = "kept" if protect_keepers else "still removed"
        display_warning(
            f"{len(plan.conflicts)} songs are keepers in one group but duplicates "
            f"in another ({action}): {', '.join(sorted(plan.conflicts))}"
        )

    display_info(f"{len(plan.removal_ids)} songs selected for removal:")
    for record_id in sorted(plan.removal_ids):
        typer.echo(f"  {record_id}")
