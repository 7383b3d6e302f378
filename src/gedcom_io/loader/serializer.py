# src/gedcom_io/loader/serializer.py

"""
Serializer: walks a GEDCOMTree and emits one physical line per record.

Encoding is strict. A character the output charset cannot represent is a
write-path failure (``GedcomEncodeError``), reported with the output line
number so it can be told apart from problems found while reading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Union

from gedcom_io.core.exceptions import GedcomEncodeError
from gedcom_io.logging import get_logger

from .charset import canonical_charset
from .node import GEDCOMNode
from .splitter import split
from .tokenizer import format_record
from .tree_builder import GEDCOMTree

log = get_logger(__name__)


def _walk(node: GEDCOMNode) -> Iterator[GEDCOMNode]:
    for child in node.children:
        yield child
        yield from _walk(child)


def serialize_lines(tree: GEDCOMTree) -> Iterator[str]:
    """Yield the text of every line in document order, without terminators."""
    for node in _walk(tree.root):
        yield format_record(node.record)


def serialize(tree: GEDCOMTree) -> str:
    """Render the whole tree as text, each line ended by ``tree.line_terminator``."""
    eol = tree.line_terminator or "\n"
    return "".join(line + eol for line in serialize_lines(tree))


def encode_document(tree: GEDCOMTree, charset: Optional[str] = None) -> bytes:
    """
    Serialize and encode ``tree``.

    Args:
        charset: Output charset; defaults to ``tree.charset``, then UTF-8.

    Raises:
        GedcomEncodeError: if some character has no encoding in ``charset``.
    """
    target = canonical_charset(charset or tree.charset) or "utf-8"
    eol = tree.line_terminator or "\n"
    text = serialize(tree)

    # One encode call, so utf-16/utf-32 get a single BOM.
    try:
        return text.encode(target)
    except UnicodeEncodeError as exc:
        lineno = text.count(eol, 0, exc.start) + 1
        raise GedcomEncodeError(target, lineno, exc.object[exc.start]) from exc


def write_tree(
    tree: GEDCOMTree,
    path: Union[str, Path],
    *,
    charset: Optional[str] = None,
    max_width: Optional[int] = None,
    wrap: bool = True,
) -> Path:
    """
    Wrap long values (unless ``wrap`` is False) and write ``tree`` to ``path``.

    Returns:
        The path written.
    """
    if wrap:
        split(tree, max_width)

    out = Path(path)
    data = encode_document(tree, charset)
    out.write_bytes(data)
    log.info("Wrote %d bytes to %s", len(data), out)
    return out
