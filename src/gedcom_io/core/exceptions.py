from __future__ import annotations

from typing import Optional


class GedcomError(Exception):
    """Base exception for gedcom-io failures."""


class GedcomReadError(GedcomError):
    """Raised while ingesting a document; carries the 1-based input line number."""

    def __init__(self, message: str, lineno: Optional[int] = None):
        self.lineno = lineno
        if lineno:
            message = f"Line {lineno}: {message}"
        super().__init__(message)


class GedcomSyntaxError(GedcomReadError, ValueError):
    """Raised when a GEDCOM line cannot be parsed according to basic syntax."""


class GEDCOMStructureError(GedcomReadError):
    """Raised when a line's level is more than one deeper than the line before it."""


class GedcomWriteError(GedcomError):
    """Raised while emitting a document."""


class GedcomEncodeError(GedcomWriteError, UnicodeError):
    """A character of the tree cannot be represented in the output charset."""

    def __init__(self, charset: str, lineno: int, char: str):
        self.charset = charset
        self.lineno = lineno
        self.char = char
        super().__init__(
            f"Output line {lineno}: character {char!r} (U+{ord(char):04X}) "
            f"cannot be encoded as {charset}"
        )


class CharsetConversionError(GedcomWriteError):
    """The tree cannot be re-declared in the requested charset."""


class UnknownCharsetError(GedcomError, LookupError):
    """A caller-supplied charset name is not known to Python's codec registry."""


class PipelineError(GedcomError):
    """Raised when the read/rewrite pipeline fails."""
