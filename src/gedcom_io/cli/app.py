from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from gedcom_io import __version__
from gedcom_io.cli.commands.detect import detect_command
from gedcom_io.cli.commands.rewrite import rewrite_command
from gedcom_io.cli.commands.stats import stats_command

app = typer.Typer(
    name="gedcom-io",
    help="Detect GEDCOM character encodings, and read and re-write GEDCOM files",
    add_completion=False,
)

console = Console()


def _show_version(value: bool) -> None:
    if value:
        console.print(f"gedcom-io {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """GEDCOM charset detector, reader and re-writer."""


app.command("detect")(detect_command)
app.command("rewrite")(rewrite_command)
app.command("stats")(stats_command)


def main():
    app()


if __name__ == "__main__":
    main()
