from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from gedcom_io.loader.node import GEDCOMNode
from gedcom_io.loader.tags import GedcomTag
from gedcom_io.loader.tree_builder import GEDCOMTree

_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def format_gedcom_date(when: datetime) -> str:
    return f"{when.day} {_MONTHS[when.month - 1]} {when.year}"


def _set_child_value(parent: GEDCOMNode, tag: GedcomTag, value: str) -> GEDCOMNode:
    node = parent.find_first(tag.value)
    if node is None:
        node = GEDCOMNode(parent.record.create_child(tag.value, value))
        parent.add_child(node)
    else:
        node.record = node.record.replace_value(value)
    return node


def stamp_header(tree: GEDCOMTree, when: Optional[datetime] = None) -> bool:
    """
    Set HEAD.DATE and HEAD.DATE.TIME to ``when`` (default: now), in UTC.

    Returns:
        False if the document has no HEAD record to stamp.
    """
    head = tree.header
    if head is None:
        return False

    when = (when or datetime.now(timezone.utc)).astimezone(timezone.utc)
    date_node = _set_child_value(head, GedcomTag.DATE, format_gedcom_date(when))
    _set_child_value(date_node, GedcomTag.TIME, when.strftime("%H:%M:%S"))
    return True
