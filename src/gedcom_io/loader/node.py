# src/gedcom_io/loader/node.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional

from .tokenizer import Record


@dataclass(eq=False)
class GEDCOMNode:
    """
    One position in the GEDCOM tree.

    Attributes:
        record: The line held at this position; None only for the virtual
            root of a GEDCOMTree.
        children: Nested GEDCOMNode list ordered as they appeared.

    Nodes are compared by identity. They hold no reference to their parent:
    each node is owned once, by its parent's ``children`` list.
    """

    record: Optional[Record] = None
    children: List["GEDCOMNode"] = field(default_factory=list)

    # ---------- Record accessors ----------

    @property
    def level(self) -> int:
        return self.record.level if self.record is not None else -1

    @property
    def tag(self) -> str:
        return self.record.tag if self.record is not None else ""

    @property
    def value(self) -> str:
        return self.record.value if self.record is not None else ""

    @property
    def pointer(self) -> Optional[str]:
        return self.record.pointer if self.record is not None else None

    @property
    def xref_id(self) -> Optional[str]:
        return self.record.xref_id if self.record is not None else None

    @property
    def lineno(self) -> int:
        return self.record.lineno if self.record is not None else 0

    # ---------- Helper Methods ----------

    def add_child(self, child: "GEDCOMNode") -> None:
        self.children.append(child)

    def insert_children(self, index: int, nodes: Iterable["GEDCOMNode"]) -> None:
        """Insert ``nodes`` in order so the first of them lands at ``index``."""
        self.children[index:index] = list(nodes)

    def find_children(self, tag: str) -> List["GEDCOMNode"]:
        """Return all direct children of this node with a given tag."""
        return [c for c in self.children if c.tag == tag]

    def find_first(self, tag: str) -> Optional["GEDCOMNode"]:
        """Return the first direct child with this tag, or None."""
        for c in self.children:
            if c.tag == tag:
                return c
        return None

    def iter_subtree(self) -> Iterator["GEDCOMNode"]:
        """Yield this node and all descendants in depth-first order."""
        yield self
        for child in self.children:
            yield from child.iter_subtree()

    def __repr__(self) -> str:
        if self.record is None:
            return f"<GEDCOMNode root children={len(self.children)}>"
        xref = f" @{self.xref_id}@" if self.xref_id else ""
        payload = f"@{self.pointer}@" if self.pointer else repr(self.value)
        return f"<GEDCOMNode {self.level}{xref} {self.tag}: {payload}>"
