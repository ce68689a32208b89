"""songdedup CLI Package.

Command-line interface for finding and resolving duplicate songs.

Usage:
    python -m songdedup.cli scan songs.json
    python -m songdedup.cli scan songs.json --similar-lyrics --json
    python -m songdedup.cli resolve songs.json --config dedup.yaml
    python -m songdedup.cli similarity "Redemption" "Redemtion"
    python -m songdedup.cli validate dedup.yaml
"""

import typer

from songdedup.cli.scan import scan_command
from songdedup.cli.resolve import resolve_command
from songdedup.cli.similarity import similarity_command
from songdedup.cli.validate import validate_command

app = typer.Typer(help="songdedup: find and resolve duplicate songs")

app.command(name="scan")(scan_command)
app.command(name="resolve")(resolve_command)
app.command(name="similarity")(similarity_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "scan_command",
    "resolve_command",
    "similarity_command",
    "validate_command",
]
