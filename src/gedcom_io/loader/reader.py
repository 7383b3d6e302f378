# src/gedcom_io/loader/reader.py

"""
Read path: bytes -> charset -> records -> tree -> normalized tree.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Optional, Union

from gedcom_io.config import get_config
from gedcom_io.core.exceptions import GedcomReadError
from gedcom_io.logging import get_logger

from .charset import CharsetDecision, CharsetResolver, resolve_forced
from .concatenation import normalize as normalize_tree
from .tokenizer import split_physical_lines, tokenize_lines
from .tree_builder import GEDCOMTree, build_tree

log = get_logger(__name__)


def decide_charset(stream: BinaryIO, charset: Optional[str] = None) -> CharsetDecision:
    """Use ``charset`` if given (after validating it), else detect from ``stream``."""
    if charset:
        return resolve_forced(charset)
    return CharsetResolver(stream).detect()


def _decode(data: bytes, charset: str, errors: str) -> str:
    try:
        text = data.decode(charset, errors=errors)
    except UnicodeDecodeError as exc:
        lineno = data.count(b"\n", 0, exc.start) + 1
        raise GedcomReadError(
            f"bytes {data[exc.start:exc.end]!r} are not valid {charset}", lineno
        ) from exc

    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def read_stream(
    stream: BinaryIO,
    *,
    charset: Optional[str] = None,
    normalize: bool = True,
) -> GEDCOMTree:
    """
    Parse a GEDCOM document from a binary stream.

    Args:
        stream: Binary input. Non-seekable streams (pipes, stdin) are
            buffered into memory first, since detection reads ahead.
        charset: Force this input charset instead of detecting it.
        normalize: Fold CONC/CONT records into their parents.

    Raises:
        GedcomSyntaxError, GEDCOMStructureError: on malformed input.
        UnknownCharsetError: if ``charset`` is not a known codec.
    """
    cfg = get_config()
    if not stream.seekable():
        stream = io.BytesIO(stream.read())

    decision = decide_charset(stream, charset)
    data = stream.read()

    if decision.is_empty or not data:
        log.warning("No data in input; synthesizing an empty document.")
        return GEDCOMTree.minimal()

    text = _decode(data, decision.charset, cfg.reader.get("decode_errors", "replace"))
    lines, terminator = split_physical_lines(text)

    tree = build_tree(tokenize_lines(lines), charset=decision.charset)
    tree.line_terminator = terminator or cfg.writer.get("line_terminator", "\n")
    log.info(
        "Parsed %d lines into %d level-0 records (%s, %s)",
        len(lines), len(tree.records), decision.charset, decision.source.value,
    )

    if normalize:
        normalize_tree(tree)

    return tree


def read_bytes(data: bytes, **kwargs) -> GEDCOMTree:
    """Parse a GEDCOM document held in memory. Keyword arguments as ``read_stream``."""
    return read_stream(io.BytesIO(data), **kwargs)


def read_file(path: Union[str, Path], **kwargs) -> GEDCOMTree:
    """
    Parse the GEDCOM file at ``path``. Keyword arguments as ``read_stream``.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
    """
    file_path = Path(path)

    if not file_path.is_file():
        raise FileNotFoundError(f"GEDCOM file not found: {file_path}")

    log.info("Reading GEDCOM input: %s", file_path)
    with file_path.open("rb") as f:
        return read_stream(f, **kwargs)
