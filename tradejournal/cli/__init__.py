"""CLI commands for TradeJournal.

This package provides the command-line interface for TradeJournal,
including journal entry, statistics, and AI analysis commands.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
