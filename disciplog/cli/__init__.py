"""CLI commands for disciplog.

This package provides the command-line interface for disciplog,
including rule management, session logging, dashboards and the journal.
"""

from disciplog.cli.main import cli, main

__all__ = ["cli", "main"]
