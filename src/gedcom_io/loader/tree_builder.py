# src/gedcom_io/loader/tree_builder.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from gedcom_io.core.exceptions import CharsetConversionError, GEDCOMStructureError
from gedcom_io.logging import get_logger

from .charset import GEDCOM_CHARSET_NAMES, canonical_charset
from .node import GEDCOMNode
from .tags import GedcomTag
from .tokenizer import Record

log = get_logger(__name__)


@dataclass
class GEDCOMTree:
    """
    A whole GEDCOM document: a virtual root whose children are the level-0
    records, plus document-level state.

    This structure is the canonical representation handed to downstream
    components (object-graph builders, query tools, writers).

    Attributes:
        root: Virtual root node (no record, level -1).
        charset: Canonical Python codec name the document was read with.
        max_line_length: Width recorded from the source document's
            CONC wrapping, reused when the tree is written back.
        line_terminator: Line ending found in the source document.
    """

    root: GEDCOMNode = field(default_factory=GEDCOMNode)
    charset: Optional[str] = None
    max_line_length: Optional[int] = None
    line_terminator: str = "\n"

    _xref_index: Dict[str, GEDCOMNode] = field(
        default_factory=dict, init=False, repr=False
    )

    # ------------------------------------------------------------------ #
    # Core helpers
    # ------------------------------------------------------------------ #

    @property
    def records(self) -> List[GEDCOMNode]:
        """The level-0 nodes (HEAD, INDI, FAM, ..., TRLR) in file order."""
        return self.root.children

    def __len__(self) -> int:  # pragma: no cover - trivial wrapper
        return len(self.records)

    def __iter__(self) -> Iterator[GEDCOMNode]:  # pragma: no cover - simple
        return iter(self.records)

    def iter_nodes(self) -> Iterator[GEDCOMNode]:
        """
        Iterate over every record-bearing node (depth-first), excluding
        the virtual root.
        """
        for record in self.records:
            yield from record.iter_subtree()

    # ------------------------------------------------------------------ #
    # Id index
    # ------------------------------------------------------------------ #

    def register_xref(self, xref_id: str, node: GEDCOMNode) -> bool:
        """
        Index ``node`` under ``xref_id``. The first registration wins; a
        duplicate is left for downstream data-quality checks.

        Returns:
            True if the node was indexed.
        """
        if xref_id in self._xref_index:
            log.debug("Duplicate id @%s@ at line %d ignored in index", xref_id, node.lineno)
            return False
        self._xref_index[xref_id] = node
        return True

    def find_by_xref(self, xref: str) -> Optional[GEDCOMNode]:
        """
        Return the node with the given id, if any.

        Args:
            xref: e.g. 'I1' or '@I1@'.
        """
        if not xref:
            return None
        return self._xref_index.get(xref.strip("@"))

    def find_records_by_tag(self, tag: str) -> List[GEDCOMNode]:
        """Return all level-0 records with the given tag (case-sensitive)."""
        return [n for n in self.records if n.tag == tag]

    def all_tags(self) -> List[str]:
        """Return a list of distinct tags found among level-0 records."""
        return sorted({rec.tag for rec in self.records if rec.tag})

    @property
    def header(self) -> Optional[GEDCOMNode]:
        return self.root.find_first(GedcomTag.HEAD.value)

    # ------------------------------------------------------------------ #
    # Charset
    # ------------------------------------------------------------------ #

    def set_charset(self, charset: str) -> None:
        """
        Record the document charset.

        The first call only records it (that is the charset the document was
        read with). Later calls convert the document: HEAD.CHAR is rewritten
        to the GEDCOM name of the new charset.

        Raises:
            CharsetConversionError: if GEDCOM has no name for ``charset``.
        """
        canonical = canonical_charset(charset)
        if self.charset is None:
            self.charset = canonical or charset
            return

        gedcom_name = GEDCOM_CHARSET_NAMES.get(canonical or "")
        if gedcom_name is None:
            raise CharsetConversionError(f"Cannot convert to encoding {charset}")

        head = self.header
        if head is not None:
            char_nodes = head.find_children(GedcomTag.CHAR.value)
            for node in char_nodes:
                node.record = node.record.replace_value(gedcom_name)
            if not char_nodes:
                head.add_child(GEDCOMNode(head.record.create_child(GedcomTag.CHAR.value, gedcom_name)))

        log.info("Document charset changed from %s to %s", self.charset, canonical)
        self.charset = canonical

    @classmethod
    def minimal(cls, charset: str = "utf-8") -> "GEDCOMTree":
        """Synthesize an empty document: HEAD with a CHAR line, then TRLR."""
        canonical = canonical_charset(charset) or charset
        head = Record.header()
        tree = cls(charset=canonical)
        head_node = GEDCOMNode(head)
        head_node.add_child(
            GEDCOMNode(head.create_child(GedcomTag.CHAR.value, GEDCOM_CHARSET_NAMES.get(canonical, "UTF-8")))
        )
        tree.root.add_child(head_node)
        tree.root.add_child(GEDCOMNode(Record.trailer()))
        return tree

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return f"<GEDCOMTree records={len(self.records)} charset={self.charset}>"


class TreeBuilder:
    """
    Attaches records, in file order, to a GEDCOMTree.

    The builder keeps the path from the root to the most recently attached
    node. A record at level L hangs off the node at depth L of that path,
    so the path is popped ``current_level + 1 - L`` times first. A negative
    pop count means the record skipped a level, which is fatal.

    The builder is throwaway state for a single pass; the tree outlives it.
    """

    def __init__(self, tree: Optional[GEDCOMTree] = None):
        self.tree = tree if tree is not None else GEDCOMTree()
        self._path: List[GEDCOMNode] = [self.tree.root]

    @property
    def current_level(self) -> int:
        return len(self._path) - 2

    @property
    def current_node(self) -> GEDCOMNode:
        return self._path[-1]

    def attach(self, record: Record) -> GEDCOMNode:
        """
        Append ``record`` below the correct parent.

        Raises:
            GEDCOMStructureError: if the level is more than one deeper than
                the previous record's.
        """
        pops = self.current_level + 1 - record.level
        if pops < 0:
            raise GEDCOMStructureError(
                f"Level jumped from {self.current_level} to {record.level} "
                f"without intermediate parent ({record.tag})",
                record.lineno,
            )

        if pops:
            del self._path[-pops:]

        node = GEDCOMNode(record)
        self._path[-1].add_child(node)
        self._path.append(node)

        if record.xref_id:
            self.tree.register_xref(record.xref_id, node)

        return node


def build_tree(records: Iterable[Record], charset: Optional[str] = None) -> GEDCOMTree:
    """
    Build a GEDCOMTree from a record stream.

    This function is the main entry point for the loader pipeline:

        records -> GEDCOMTree(root=[GEDCOMNode, ...])

    Downstream components (value normalization, writers, etc.) should
    operate on this tree.
    """
    tree = GEDCOMTree(charset=canonical_charset(charset) if charset else None)
    builder = TreeBuilder(tree)
    count = 0
    for record in records:
        builder.attach(record)
        count += 1

    log.debug("Built tree from %d records (%d level-0)", count, len(tree.records))
    return tree
