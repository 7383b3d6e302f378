from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from gedcom_io.cli.utils import report_errors
from gedcom_io.loader.charset import CharsetResolver
from gedcom_io.logging import set_verbose

console = Console()


def detect_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show each detection step",
    ),
):
    """
    Show which character encoding a GEDCOM file would be read with, and why.
    """
    set_verbose(verbose)

    with report_errors(), gedcom.open("rb") as f:
        decision = CharsetResolver(f).detect()

    table = Table(title=f"Character encoding: {gedcom.name}")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Charset", decision.charset or "(empty input)")
    table.add_row("Source", decision.source.value)
    table.add_row("Declared", decision.declared or "-")
    table.add_row("Detected", decision.detected or "-")
    confidence = "-" if decision.confidence is None else f"{decision.confidence:.0%}"
    table.add_row("Confidence", confidence)

    console.print(table)
