"""Validate command for configuration files.

Validates configuration file syntax and threshold ranges.
"""

from pathlib import Path

import typer

from songdedup.services.config_manager import ConfigManager
from songdedup.services.dedup_service import validate_options
from songdedup.cli.utils import handle_errors, display_success, display_error


@handle_errors
def validate_command(
    config_path: Path = typer.Argument(..., help="Config file to validate"),
):
    """Validate configuration file syntax and thresholds."""
    try:
        manager = ConfigManager(config_path=str(config_path))
        config = manager.load_config()
        validate_options(config.options)
        display_success("Configuration is valid! ✅")
    except Exception as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)
