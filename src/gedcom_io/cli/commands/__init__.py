
"""
CLI command modules for gedcom_io.

Each command module defines a single Typer-compatible command function.
"""

from gedcom_io.cli.commands.detect import detect_command
from gedcom_io.cli.commands.rewrite import rewrite_command
from gedcom_io.cli.commands.stats import stats_command

__all__ = [
    "detect_command",
    "rewrite_command",
    "stats_command",
]
