# src/gedcom_io/loader/tokenizer.py

"""
Line tokenizer and its inverse.

One physical GEDCOM line has the shape::

    LEVEL [@ID@] TAG [VALUE | @POINTER@]

``tokenize_line`` turns already-decoded text into an immutable ``Record``;
``format_record`` turns a ``Record`` back into exactly that text. Literal
``@`` characters are single in memory and doubled on the wire.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Optional, Tuple

from gedcom_io.core.exceptions import GedcomSyntaxError

from .tags import GedcomTag

_EOL = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Record:
    """
    A single GEDCOM line.

    Attributes:
        level: Parsed GEDCOM level (0, 1, 2, ...).
        tag: GEDCOM tag text exactly as read, e.g. "INDI", "NOTE", "_UID".
        xref_id: The record's own cross-reference id without the ``@``
            delimiters ("I1"), or None.
        value: The payload with ``@@`` already collapsed to ``@``.
        pointer: Cross-reference to another record, without delimiters, or None.
        lineno: 1-based line number in the original file, 0 when synthesized.
    """
    level: int
    tag: str
    xref_id: Optional[str] = None
    value: str = ""
    pointer: Optional[str] = None
    lineno: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError(f"GEDCOM level cannot be negative: {self.level}")
        if self.value and self.pointer:
            raise ValueError(
                f"Record {self.tag} cannot carry both a value and a pointer"
            )

    # ---------- Derived views ----------

    @property
    def kind(self) -> GedcomTag:
        """The catalogued tag, or ``GedcomTag.UNKNOWN`` for anything else."""
        return GedcomTag.lookup(self.tag)

    @property
    def is_pointer(self) -> bool:
        return bool(self.pointer)

    # ---------- Derivation (records are never edited in place) ----------

    def replace_value(self, value: str) -> "Record":
        return replace(self, value=value, pointer=None)

    def create_child(self, tag: str, value: str = "") -> "Record":
        return Record(level=self.level + 1, tag=str(tag), value=value)

    @classmethod
    def header(cls) -> "Record":
        return cls(level=0, tag=GedcomTag.HEAD.value)

    @classmethod
    def trailer(cls) -> "Record":
        return cls(level=0, tag=GedcomTag.TRLR.value)

    def __str__(self) -> str:
        return format_record(self)


# ---------- Escaping ----------

def parse_xref(text: str) -> Optional[str]:
    """
    Return the key inside an ``@KEY@`` token, or None if ``text`` is not one.

    A token qualifies only if it is at least three characters long, starts
    and ends with ``@`` and has no other ``@`` inside.
    """
    if len(text) < 3 or "@@" in text:
        return None
    if not (text.startswith("@") and text.endswith("@")):
        return None
    key = text[1:-1]
    if "@" in key:
        return None
    return key


def unescape_value(text: str) -> str:
    return text.replace("@@", "@")


def escape_value(text: str) -> str:
    return text.replace("@", "@@")


# ---------- Reading ----------

def _strip_eol(line: str) -> str:
    """Strip trailing CR/LF characters but preserve all other whitespace."""
    return line.rstrip("\r\n")


def tokenize_line(line: str, lineno: int = 0) -> Record:
    """
    Parse a single GEDCOM line into a Record.

    The required order is strict:
        <level> [<@id@>] <tag> [<value> | <@pointer@>]

    Examples:
        "0 HEAD"
        "0 @I1@ INDI"
        "1 FAMS @F1@"
        "1 NOTE mail me at joe@@example.com"

    Raises:
        GedcomSyntaxError: with ``lineno`` set, if the line does not fit.
    """
    raw = _strip_eol(line)

    # Handle optional BOM left over on the very first line.
    if lineno == 1 and raw.startswith("\ufeff"):
        raw = raw[1:]

    if not raw.strip():
        raise GedcomSyntaxError("empty or whitespace-only line", lineno)

    # --- 1. Extract level -------------------------------------------------
    parts = raw.lstrip(" \t").split(" ", 1)
    level_str = parts[0]
    if not level_str.isdigit() or not level_str.isascii():
        raise GedcomSyntaxError(
            f"level is not numeric -> {level_str!r} in {raw!r}", lineno
        )
    if len(parts) == 1:
        raise GedcomSyntaxError(f"missing tag (only level found) -> {raw!r}", lineno)

    level = int(level_str)
    rest = parts[1].lstrip(" ")

    if not rest:
        raise GedcomSyntaxError(f"missing tag after level -> {raw!r}", lineno)

    # --- 2. Extract optional id -------------------------------------------
    xref_id: Optional[str] = None

    if rest.startswith("@"):
        token, _, rest = rest.partition(" ")
        xref_id = parse_xref(token)
        if xref_id is None:
            raise GedcomSyntaxError(
                f"malformed cross-reference id {token!r} -> {raw!r}", lineno
            )
        rest = rest.lstrip(" ")
        if not rest:
            raise GedcomSyntaxError(f"id present but missing tag -> {raw!r}", lineno)

    # --- 3. Extract tag and optional value/pointer --------------------------
    # Everything after the first space following the tag is kept verbatim.
    tag, _, payload = rest.partition(" ")

    pointer = parse_xref(payload)
    value = "" if pointer else unescape_value(payload)

    return Record(
        level=level,
        tag=tag,
        xref_id=xref_id,
        value=value,
        pointer=pointer,
        lineno=lineno,
    )


def split_physical_lines(text: str) -> Tuple[List[str], Optional[str]]:
    """
    Split decoded text on CR LF, CR or LF only.

    ``str.splitlines`` is not used because it also breaks on form feeds and
    Unicode separators, which may legitimately appear inside values.

    Returns:
        (lines, terminator) where terminator is the first line ending seen,
        or None for single-line text without one.
    """
    match = _EOL.search(text)
    terminator = match.group(0) if match else None
    lines = _EOL.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines, terminator


def tokenize_text(text: str) -> Iterator[Record]:
    """
    Return an iterator of Records, one per non-blank line of ``text``.

    Blank lines are skipped but still counted, so ``Record.lineno`` always
    matches the physical line in the source.
    """
    lines, _ = split_physical_lines(text)
    return tokenize_lines(lines)


def tokenize_lines(lines: Iterable[str]) -> Iterator[Record]:
    """Tokenize already-split physical lines, numbering them from 1."""
    for lineno, line in enumerate(lines, start=1):
        if not line.strip(" \t\ufeff"):
            continue
        yield tokenize_line(line, lineno=lineno)


# ---------- Writing ----------

def format_record(record: Record) -> str:
    """
    Render ``record`` as one GEDCOM line (without a line terminator).

    DATE values are emitted as-is: their grammar uses ``@#D...@`` calendar
    escapes that must not be doubled.
    """
    parts = [str(record.level)]
    if record.xref_id:
        parts.append(f"@{record.xref_id}@")
    parts.append(record.tag)

    if record.pointer:
        parts.append(f"@{record.pointer}@")
    elif record.value:
        if record.kind is GedcomTag.DATE:
            parts.append(record.value)
        else:
            parts.append(escape_value(record.value))

    return " ".join(parts)
