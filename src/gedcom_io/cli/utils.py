
from __future__ import annotations

import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console

from gedcom_io.core.exceptions import GedcomReadError, GedcomWriteError, UnknownCharsetError
from gedcom_io.loader.tree_builder import GEDCOMTree
from gedcom_io.logging import set_verbose
from gedcom_io.parser_core import GEDCOMParser

console = Console(stderr=True)

EXIT_READ_ERROR = 2
EXIT_WRITE_ERROR = 3


def load_gedcom(
    path: Path,
    *,
    encoding: Optional[str] = None,
    normalize: bool = True,
    verbose: bool = False,
) -> GEDCOMTree:
    """
    Read, build and normalize one GEDCOM file.
    """
    if not path.exists():
        raise FileNotFoundError(path)

    set_verbose(verbose)
    t0 = time.perf_counter()

    tree = GEDCOMParser().read(path, charset=encoding, normalize=normalize)

    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(f"Loaded GEDCOM in {elapsed:.2f}s")

    return tree


@contextmanager
def report_errors() -> Iterator[None]:
    """
    Turn gedcom-io failures into a one-line message and an exit code:
    2 for problems in the input, 3 for problems producing the output.
    """
    try:
        yield
    except UnknownCharsetError as exc:
        raise typer.BadParameter(str(exc), param_hint="--encoding") from exc
    except GedcomReadError as exc:
        console.print(f"[red]Input error:[/red] {exc}")
        raise typer.Exit(code=EXIT_READ_ERROR) from exc
    except GedcomWriteError as exc:
        console.print(f"[red]Output error:[/red] {exc}")
        raise typer.Exit(code=EXIT_WRITE_ERROR) from exc
