"""
parser_core.py
Central read/write engine with full logging integration.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional, Union

from gedcom_io.config import get_config
from gedcom_io.logging import get_logger
from gedcom_io.loader.reader import read_file, read_stream
from gedcom_io.loader.serializer import encode_document, write_tree
from gedcom_io.loader.splitter import split
from gedcom_io.loader.tree_builder import GEDCOMTree


class GEDCOMParser:
    """
    High-level parser:
      - detects the input charset (or takes a forced one)
      - tokenizes and builds the tree
      - folds CONC/CONT values
    and, on the way out:
      - re-wraps long values
      - serializes and encodes
    """

    def __init__(self, config=None):
        self.cfg = config if config is not None else get_config()
        self.log = get_logger("gedcom_io.parser_core")
        self.tree: Optional[GEDCOMTree] = None

    # ---------------------------------------------------------
    # Read
    # ---------------------------------------------------------
    def read(
        self,
        source: Union[str, Path, BinaryIO],
        *,
        charset: Optional[str] = None,
        normalize: bool = True,
    ) -> GEDCOMTree:
        """Parse a path or binary stream into a GEDCOMTree."""
        self.log.info("Reading GEDCOM input: %s", getattr(source, "name", source))
        try:
            if isinstance(source, (str, Path)):
                self.tree = read_file(source, charset=charset, normalize=normalize)
            else:
                self.tree = read_stream(source, charset=charset, normalize=normalize)
        except Exception:
            self.log.exception("Reading failed.")
            raise

        if self.cfg.debug:
            self.log.debug("Level-0 record count = %d", len(self.tree.records))
        return self.tree

    # ---------------------------------------------------------
    # Write
    # ---------------------------------------------------------
    def to_bytes(
        self,
        tree: Optional[GEDCOMTree] = None,
        *,
        max_width: Optional[int] = None,
        charset: Optional[str] = None,
        wrap: bool = True,
    ) -> bytes:
        """Wrap long values (unless ``wrap`` is False) and encode the tree."""
        tree = tree if tree is not None else self.tree
        if tree is None:
            raise ValueError("Nothing to write: no tree given and none read yet.")

        if wrap:
            split(tree, max_width)
        try:
            return encode_document(tree, charset)
        except Exception:
            self.log.exception("Writing failed.")
            raise

    def write(self, tree: Optional[GEDCOMTree], path: Union[str, Path], **kwargs) -> Path:
        """Write to ``path``; keyword arguments as ``to_bytes``."""
        tree = tree if tree is not None else self.tree
        if tree is None:
            raise ValueError("Nothing to write: no tree given and none read yet.")
        try:
            return write_tree(tree, path, **kwargs)
        except Exception:
            self.log.exception("Writing failed.")
            raise
