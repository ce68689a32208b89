"""Shared CLI utilities.

Provides common functionality for all CLI commands.
"""

import functools
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

import structlog
import typer

from songdedup.models.config import EngineConfig
from songdedup.models.dedup import CheckOptions, DuplicateGroup, MatchMode
from songdedup.models.song import SongRecord
from songdedup.observability.logging import configure_logging
from songdedup.services.config_manager import ConfigManager, ConfigValidationError
from songdedup.services.matchers import similarity_to_anchor
from songdedup.utils.exceptions import RecordLoadError

# Configure structured logging
configure_logging()
logger = structlog.get_logger()

# Type variable for decorator
F = TypeVar("F", bound=Callable)


def load_config(config_path: Optional[Path]) -> EngineConfig:
    """Load and validate configuration.

    Logging is reconfigured from the file when one is given.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    config_manager = ConfigManager(
        config_path=str(config_path) if config_path else None
    )
    try:
        config = config_manager.load_config()
    except (FileNotFoundError, ConfigValidationError) as e:
        typer.secho(f"Configuration Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if config_path:
        configure_logging(level=config.log_level, json_output=config.json_logs)
    return config


def load_records(records_path: Path) -> List[SongRecord]:
    """Load songs from a JSON export.

    Raises:
        typer.Exit: If the file is missing or malformed.
    """
    try:
        return ConfigManager.load_records(records_path)
    except (FileNotFoundError, RecordLoadError) as e:
        typer.secho(f"Records Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def apply_overrides(options: CheckOptions, **overrides) -> CheckOptions:
    """Apply command-line flags over configured options.

    Flags left unset (None) keep the configured value.
    """
    update = {key: value for key, value in overrides.items() if value is not None}
    return options.model_copy(update=update) if update else options


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    Catches exceptions and displays user-friendly error messages.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.exception("command_failed")
            typer.secho(f"Error: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def format_group(group: DuplicateGroup) -> List[str]:
    """Lines describing one group, with % similar for fuzzy groups."""
    lines = [f"  Duplicate Group ({len(group)} songs)"]
    scores = similarity_to_anchor(group) if group.mode == MatchMode.SIMILAR else None
    for index, record in enumerate(group.records):
        media = []
        if record.has_audio:
            media.append("audio")
        if record.has_image:
            media.append("image")
        line = f"    - {record.id}: {record.title}"
        if media:
            line += f" [{', '.join(media)}]"
        if scores is not None and index > 0:
            line += f" ({scores[index] * 100:.1f}% similar)"
        lines.append(line)
    return lines


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED)


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
