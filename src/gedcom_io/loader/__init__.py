# src/gedcom_io/loader/__init__.py

"""
Public interface for the GEDCOM loader stack.

Intended usage from other parts of the project and tests:

    from gedcom_io.loader import (
        CharsetResolver,
        Record,
        GEDCOMNode,
        GEDCOMTree,
        read_file,
        normalize,
        split,
        encode_document,
    )
"""

from __future__ import annotations

from .charset import (
    CharsetDecision,
    CharsetResolver,
    CharsetSource,
    canonical_charset,
    detect_charset,
    resolve_forced,
)
from .concatenation import normalize
from .node import GEDCOMNode
from .reader import read_bytes, read_file, read_stream
from .serializer import encode_document, serialize, serialize_lines, write_tree
from .splitter import split, split_value
from .tags import CONTINUATION_TAGS, SPLITTABLE_TAGS, GedcomTag
from .tokenizer import Record, format_record, tokenize_line, tokenize_text
from .tree_builder import GEDCOMTree, TreeBuilder, build_tree

__all__ = [
    "CharsetDecision",
    "CharsetResolver",
    "CharsetSource",
    "canonical_charset",
    "detect_charset",
    "resolve_forced",
    "normalize",
    "GEDCOMNode",
    "read_bytes",
    "read_file",
    "read_stream",
    "encode_document",
    "serialize",
    "serialize_lines",
    "write_tree",
    "split",
    "split_value",
    "CONTINUATION_TAGS",
    "SPLITTABLE_TAGS",
    "GedcomTag",
    "Record",
    "format_record",
    "tokenize_line",
    "tokenize_text",
    "GEDCOMTree",
    "TreeBuilder",
    "build_tree",
]
