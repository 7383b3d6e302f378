
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from gedcom_io.cli.utils import load_gedcom, report_errors

console = Console()


def stats_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    encoding: Optional[str] = typer.Option(
        None,
        "--encoding",
        "-e",
        help="Force the input encoding instead of detecting it",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable rich logging",
    ),
):
    """
    Show level-0 record counts for a GEDCOM file.
    """
    with report_errors():
        tree = load_gedcom(gedcom, encoding=encoding, verbose=verbose)

    counts = Counter(rec.tag for rec in tree.records)

    table = Table(title="GEDCOM Statistics")
    table.add_column("Record", style="bold")
    table.add_column("Count", justify="right")

    for tag, count in sorted(counts.items()):
        table.add_row(tag, str(count))
    table.add_row("Total lines", str(sum(1 for _ in tree.iter_nodes())), style="dim")
    table.add_row("Charset", tree.charset or "-", style="dim")

    console.print(table)
