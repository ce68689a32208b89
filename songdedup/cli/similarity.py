"""Similarity command.

Prints how similar two pieces of text are.
"""

import typer

from songdedup.utils.similarity import similarity
from songdedup.utils.text_normalizer import normalize
from songdedup.cli.utils import handle_errors


@handle_errors
def similarity_command(
    first: str = typer.Argument(..., help="First text"),
    second: str = typer.Argument(..., help="Second text"),
    raw: bool = typer.Option(
        False, "--raw", help="Compare the text as given, without normalizing"
    ),
):
    """Print the edit-distance similarity of two texts."""
    if not raw:
        first, second = normalize(first), normalize(second)
    typer.echo(f"{similarity(first, second) * 100:.1f}% similar")
