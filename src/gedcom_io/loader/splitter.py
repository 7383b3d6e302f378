# src/gedcom_io/loader/splitter.py

"""
Line splitter: the write-side inverse of ``concatenation.normalize``.

A free-text value that is wider than the target width, or that holds
newlines, is cut into the parent line plus a chain of CONC / CONT
children so that ``normalize`` folds it back into exactly the same text.

Breaks fall wherever the width runs out, including in the middle of a run
of spaces. Documents written this way already depend on those exact break
points, so they are kept.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from gedcom_io.config import get_config
from gedcom_io.logging import get_logger

from .node import GEDCOMNode
from .tags import SPLITTABLE_TAGS, GedcomTag
from .tree_builder import GEDCOMTree

log = get_logger(__name__)


def resolve_width(tree: GEDCOMTree, max_width: Optional[int] = None) -> int:
    """Explicit width, else the width recorded from the source, else the configured default."""
    if max_width is not None:
        width = max_width
    elif tree.max_line_length:
        width = tree.max_line_length
    else:
        width = int(get_config().writer["max_width"])

    if width < 1:
        raise ValueError(f"Line width must be greater than 0, got {width}")
    return width


def needs_split(value: str, width: int) -> bool:
    return len(value) > width or "\n" in value


def split_value(value: str, width: int) -> List[Tuple[Optional[GedcomTag], str]]:
    """
    Cut ``value`` into ``(kind, text)`` segments.

    The first segment has kind None (it stays on the original line); each
    later one is CONT if a newline ended the segment before it, CONC if the
    width did. A trailing segment is always produced, even when empty.
    """
    segments: List[Tuple[Optional[GedcomTag], str]] = []
    kind: Optional[GedcomTag] = None
    buf: List[str] = []

    for ch in value:
        if ch == "\n":
            segments.append((kind, "".join(buf)))
            buf = []
            kind = GedcomTag.CONT
        elif len(buf) >= width:
            segments.append((kind, "".join(buf)))
            buf = [ch]
            kind = GedcomTag.CONC
        else:
            buf.append(ch)

    segments.append((kind, "".join(buf)))
    return segments


def _split_node(node: GEDCOMNode, width: int) -> int:
    created = 0
    for child in list(node.children):
        created += _split_node(child, width)

    record = node.record
    if record is None or record.kind not in SPLITTABLE_TAGS:
        return created
    if not needs_split(record.value, width):
        return created

    segments = split_value(record.value, width)
    _, first = segments[0]
    node.record = record.replace_value(first)

    # The chain goes ahead of whatever children the line already had.
    node.insert_children(
        0,
        (GEDCOMNode(record.create_child(kind.value, text)) for kind, text in segments[1:]),
    )
    return created + len(segments) - 1


def split(tree: GEDCOMTree, max_width: Optional[int] = None) -> int:
    """
    Wrap every long or multi-line free-text value in ``tree``.

    Only tags in ``SPLITTABLE_TAGS`` are touched; dates, pointers and
    other structured values stay on one line whatever their length.

    Returns:
        The number of CONC/CONT records created.
    """
    width = resolve_width(tree, max_width)
    created = 0
    for record in tree.records:
        created += _split_node(record, width)

    if created:
        log.info("Created %d CONC/CONT records at width %d", created, width)
    return created
