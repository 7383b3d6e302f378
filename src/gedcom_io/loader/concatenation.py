# src/gedcom_io/loader/concatenation.py

"""
Concatenation normalizer: folds GEDCOM CONC / CONT records into their parent.

Rules (GEDCOM 5.5.1 / 5.5.5):
    - CONC: Append text directly to the parent's value.
            No newline added.

    - CONT: Append a newline + the text.
            Always produces a new line in the logical output.

Examples:
    Parent NOTE value: "Line one"
    Child CONC value:  " and more"
        → "Line one and more"

    Child CONT value:  "Second line"
        → "Line one and more\nSecond line"

Only the run of CONC/CONT children at the head of a node's child list is
folded. A continuation record that follows some other child is not part of
the parent's value and is left where it is, as is a run under a pointer line.

While folding, the longest physical segment of any wrapped value is noted
on the tree (``max_line_length``) so a later write can wrap at the same
width the source document used.
"""

from __future__ import annotations

from typing import List

from gedcom_io.logging import get_logger

from .node import GEDCOMNode
from .tags import CONTINUATION_TAGS, GedcomTag
from .tree_builder import GEDCOMTree

log = get_logger(__name__)


class _FoldStats:
    def __init__(self) -> None:
        self.folded = 0
        self.widest = 0


def _normalize_node(node: GEDCOMNode, stats: _FoldStats) -> None:
    """
    Recursively fold continuation children for this node and its children.
    Replaces the node's record; never edits a record in place.
    """
    run = 0
    for child in node.children:
        if child.record is None or child.record.kind not in CONTINUATION_TAGS:
            break
        run += 1

    # a pointer line has no text to continue; its CONC/CONT run is kept as read
    if run and node.record is not None and not node.record.pointer:
        pieces: List[str] = [node.value]
        widest = 0
        previous = len(node.value)
        for child in node.children[:run]:
            if child.record.kind is GedcomTag.CONT:
                pieces.append("\n")
            else:
                # the physical line before a CONC was cut at the source's width
                widest = max(widest, previous)
            pieces.append(child.value)
            previous = len(child.value)

        node.record = node.record.replace_value("".join(pieces))
        del node.children[:run]

        stats.folded += run
        stats.widest = max(stats.widest, widest)

    for child in node.children:
        _normalize_node(child, stats)


def normalize(tree: GEDCOMTree) -> int:
    """
    Fold every leading CONC/CONT run in ``tree`` into its parent's value.

    Idempotent: a second call finds nothing to fold.

    Returns:
        The number of continuation records removed.
    """
    stats = _FoldStats()
    for record in tree.records:
        _normalize_node(record, stats)

    if stats.widest and tree.max_line_length is None:
        tree.max_line_length = stats.widest
        log.debug("Recorded source wrapping width %d", stats.widest)

    if stats.folded:
        log.info("Folded %d CONC/CONT records", stats.folded)
    return stats.folded
