from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from gedcom_io.cli.utils import report_errors
from gedcom_io.config import get_config
from gedcom_io.core.context import RewriteContext
from gedcom_io.core.pipeline import Pipeline
from gedcom_io.logging import get_logger, set_verbose

console = Console(stderr=True)
log = get_logger(__name__)


def _positive(width: Optional[int]) -> Optional[int]:
    if width is not None and width <= 0:
        raise typer.BadParameter("WIDTH must be greater than 0.")
    return width


def rewrite_command(
    gedcom: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write output to file instead of stdout",
    ),
    encoding: Optional[str] = typer.Option(
        None,
        "--encoding",
        "-e",
        help="Force the input encoding instead of detecting it",
    ),
    conc: Optional[int] = typer.Option(
        None,
        "--conc",
        "-c",
        metavar="WIDTH",
        callback=_positive,
        help="Rebuild CONC/CONT lines to WIDTH",
    ),
    utf8: bool = typer.Option(
        False,
        "--utf8",
        "-u",
        help="Convert output to UTF-8 (rewrites HEAD.CHAR)",
    ),
    timestamp: bool = typer.Option(
        False,
        "--timestamp",
        "-s",
        help="Set HEAD.DATE and HEAD.DATE.TIME to the current UTC time",
    ),
    normalize: bool = typer.Option(
        True,
        "--normalize/--no-normalize",
        help="Fold and re-split CONC/CONT lines",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show progress on the console",
    ),
):
    """
    Read a GEDCOM file and write it back out (stdout by default).
    """
    set_verbose(verbose)
    cfg = get_config()

    ctx = RewriteContext(
        config=cfg,
        logger=log,
        input_path=str(gedcom),
        output_path=str(out) if out else None,
        charset=encoding,
        width=conc,
        to_utf8=utf8,
        timestamp=timestamp,
        normalize=normalize,
        debug=cfg.debug,
    )

    with report_errors():
        data = Pipeline(ctx).run()

    if out is None:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    elif verbose:
        console.log(
            f"Wrote {ctx.stats['bytes']} bytes ({ctx.stats['output_charset']}) to {out}"
        )
