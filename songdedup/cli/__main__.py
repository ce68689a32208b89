"""CLI entry point.

Allows running the CLI as a module: python -m songdedup.cli
"""

from songdedup.cli import app

if __name__ == "__main__":
    app()
