"""Command-line interface for blastoff."""

from blastoff.cli.main import cli, main

__all__ = ["cli", "main"]
