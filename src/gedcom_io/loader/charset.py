# src/gedcom_io/loader/charset.py

"""
Charset resolution for raw GEDCOM bytes.

Nothing can be tokenized until the byte encoding is known, and GEDCOM files
in the wild lie about it often enough that the declared ``HEAD.CHAR`` value
cannot simply be trusted. ``CharsetResolver`` weighs four signals:

1. Magic bytes: byte-order marks, or the ``"0 "`` that every GEDCOM file
   starts with, spelled in 16- or 32-bit code units. Either one settles the
   question outright.
2. The declared encoding in ``HEAD.CHAR``, mapped through a table of the
   vendor names seen in real files (ANSI, IBMPC, MACINTOSH, ...).
3. A statistical guess from ``chardet`` over a bounded sample: lines with
   bytes above 0x7F, or failing that the NAME lines.
4. A policy reconciling (2) and (3), with fallbacks to windows-1252 and
   finally UTF-8, so resolution itself never fails.

The stream is rewound after every pass so the tokenizer can read it again.
"""

from __future__ import annotations

import codecs
import io
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import BinaryIO, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple, Union

import ansel
from chardet import UniversalDetector

from gedcom_io.config import get_config
from gedcom_io.core.exceptions import UnknownCharsetError
from gedcom_io.logging import get_logger

log = get_logger(__name__)

# Registers the "ansel" and "gedcom" (ANSEL plus the GEDCOM extensions) codecs.
ansel.register()

ANSEL_CODEC = "gedcom"
FALLBACK_CHARSET = "windows-1252"
LAST_RESORT_CHARSET = "utf-8"

_READ_CHUNK = 4 * 1024
_MAGIC_LENGTH = 8
_ASCII_PROBE = "0 @I1@ INDI\n1 NAME John /Doe/\n"


def canonical_charset(name: Optional[str]) -> Optional[str]:
    """Return Python's canonical codec name for ``name``, or None if unknown."""
    if not name:
        return None
    try:
        return codecs.lookup(name).name
    except LookupError:
        return None


def _canonical_set(names) -> FrozenSet[str]:
    return frozenset(c for c in (canonical_charset(n) for n in names) if c)


# -----------------------------------------------------------------------------
# Static tables
# -----------------------------------------------------------------------------

# Declared HEAD.CHAR values, upper-cased, to the charset they mean in practice.
# Most come from Tamura Jones, "GEDCOM Character Encodings".
DECLARED_CHARSET_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "IBMPC": "cp437",
        "IBM-PC": "cp437",
        "IBM": "cp437",
        "PC": "cp437",
        "OEM": "cp437",

        "MSDOS": "cp850",
        "MS-DOS": "cp850",
        "DOS": "cp850",
        "IBM DOS": "cp850",

        "ANSI": "windows-1252",
        "WINDOWS": "windows-1252",
        "WIN": "windows-1252",
        "IBM WINDOWS": "windows-1252",
        "IBM_WINDOWS": "windows-1252",

        # Windows tools write these but mean windows-1252.
        "ASCII": "windows-1252",
        "CP1252": "windows-1252",
        "ISO-8859-1": "windows-1252",
        "ISO8859-1": "windows-1252",
        "ISO-8859": "windows-1252",
        "LATIN1": "windows-1252",

        "MAC": "mac-roman",
        "MACINTOSH": "mac-roman",

        "UNICODE": "utf-16",
        "UTF-8": "utf-8",

        "ANSEL": ANSEL_CODEC,
    }
)

# Charsets chardet can report. A declared charset in this set only needs a
# weak detection to be overridden, because chardet could have confirmed it.
DETECTABLE_CHARSETS: FrozenSet[str] = _canonical_set(
    (
        "ascii", "utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be",
        "utf-32", "utf-32-le", "utf-32-be",
        "big5", "gb2312", "gb18030", "euc-jp", "euc-kr", "shift_jis", "cp932",
        "cp949", "johab", "iso-2022-jp", "iso-2022-kr",
        "koi8-r", "mac-cyrillic", "ibm855", "ibm866", "iso-8859-5", "windows-1251",
        "iso-8859-2", "windows-1250", "iso-8859-1", "windows-1252",
        "iso-8859-7", "windows-1253", "iso-8859-8", "windows-1255",
        "iso-8859-9", "windows-1254", "tis-620", "mac-roman",
    )
)

# Canonical charset to the HEAD.CHAR value written when converting a tree.
GEDCOM_CHARSET_NAMES: Mapping[str, str] = MappingProxyType(
    {
        canonical_charset("utf-8"): "UTF-8",
        canonical_charset("utf-16"): "UNICODE",
        canonical_charset(ANSEL_CODEC): "ANSEL",
        canonical_charset("ascii"): "ASCII",
    }
)

_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

# "0 " as the first code unit pair, for BOM-less wide encodings.
_SIGNATURES = (
    ("0 ".encode("utf-32-le"), "utf-32-le"),
    ("0 ".encode("utf-32-be"), "utf-32-be"),
    ("0 ".encode("utf-16-le"), "utf-16-le"),
    ("0 ".encode("utf-16-be"), "utf-16-be"),
)

_HEAD_LINE = re.compile(r"0\s+HEAD\b.*")
_CHAR_LINE = re.compile(r"1\s+CHAR\s+(.*)")
_REC0_LINE = re.compile(r"0\s+.*")
_BYTE_EOL = re.compile(rb"\r\n|\r|\n")
_HIGH_BYTE = re.compile(rb"[\x80-\xff]")


# -----------------------------------------------------------------------------
# Decision
# -----------------------------------------------------------------------------

class CharsetSource(str, Enum):
    """Where a charset decision came from."""

    BOM = "bom"
    SIGNATURE = "signature"
    DECLARED = "declared"
    DETECTED = "detected"
    FORCED = "forced"
    DEFAULT = "default"
    EMPTY = "empty"


@dataclass(frozen=True)
class CharsetDecision:
    """
    The charset to decode with, and why.

    Attributes:
        charset: Canonical Python codec name; None only for empty input.
        source: Which signal won.
        declared: Raw HEAD.CHAR token, upper-cased, if one was found.
        detected: What the statistical detector reported, if it ran.
        confidence: The detector's confidence (0.0-1.0), if it ran.
    """

    charset: Optional[str]
    source: CharsetSource
    declared: Optional[str] = None
    detected: Optional[str] = None
    confidence: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.source is CharsetSource.EMPTY


def resolve_forced(name: str) -> CharsetDecision:
    """
    Validate a caller-supplied charset that bypasses detection.

    Raises:
        UnknownCharsetError: if Python has no codec called ``name``.
    """
    canonical = canonical_charset(name)
    if canonical is None:
        raise UnknownCharsetError(f"Unknown character encoding: {name}")
    log.info("Using forced character encoding %s", canonical)
    return CharsetDecision(charset=canonical, source=CharsetSource.FORCED)


def _ascii_compatible(charset: str) -> bool:
    try:
        return _ASCII_PROBE.encode(charset) == _ASCII_PROBE.encode("ascii")
    except (LookupError, UnicodeError):
        return False


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------

class CharsetResolver:
    """
    Guess the encoding of a rewindable binary stream.

    Usage:
        decision = CharsetResolver(stream).detect()
        text = stream.read().decode(decision.charset)

    ``detect`` leaves the stream positioned where it found it.
    """

    def __init__(self, stream: BinaryIO, settings: Optional[Dict] = None):
        if not stream.seekable():
            raise ValueError("CharsetResolver needs a seekable stream")
        self.stream = stream
        self.settings = dict(settings if settings is not None else get_config().charset)
        self.default_charset = canonical_charset(self.settings.get("default")) or canonical_charset(
            FALLBACK_CHARSET
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def detect(self) -> CharsetDecision:
        if not self._peek(1):
            log.warning("Input is empty; no character encoding to detect.")
            return CharsetDecision(charset=None, source=CharsetSource.EMPTY)

        magic = self.detect_magic()
        declared = self.find_declared(magic[0] if magic else None)

        if magic is not None:
            charset, source = magic
            if declared and canonical_charset(DECLARED_CHARSET_ALIASES.get(declared)) != charset:
                log.warning(
                    "Declared encoding %s contradicts %s %s; using %s",
                    declared, source.value, charset, charset,
                )
            log.info("Will use character encoding: %s (%s)", charset, source.value)
            return CharsetDecision(charset=charset, source=source, declared=declared)

        detected, confidence = self.detect_statistically()
        decision = self.resolve(declared, detected, confidence)
        log.info("Will use character encoding: %s (%s)", decision.charset, decision.source.value)
        return decision

    # ------------------------------------------------------------------ #
    # Stage 1: magic bytes
    # ------------------------------------------------------------------ #

    def detect_magic(self) -> Optional[Tuple[str, CharsetSource]]:
        """Return ``(charset, source)`` if a BOM or wide signature is present."""
        head = self._peek(_MAGIC_LENGTH)

        for bom, charset in _BOMS:
            if head.startswith(bom):
                log.info("Found %s byte-order mark.", charset)
                return canonical_charset(charset), CharsetSource.BOM

        for signature, charset in _SIGNATURES:
            if head.startswith(signature):
                log.info("Found 0 HEAD spelled in %s without byte-order mark.", charset)
                return canonical_charset(charset), CharsetSource.SIGNATURE

        if not head.startswith(b"0 HEAD"):
            log.error(
                "Input does not start with a 0 HEAD line, and therefore probably is not a GEDCOM file."
            )
        return None

    # ------------------------------------------------------------------ #
    # Stage 2: declared HEAD.CHAR
    # ------------------------------------------------------------------ #

    def find_declared(self, charset: Optional[str] = None) -> Optional[str]:
        """
        Return the upper-cased HEAD.CHAR token, or None.

        Only the header record is searched: the scan stops at the first
        level-0 line after ``0 HEAD``, or after ``header_scan_bytes``.
        ``charset`` is the encoding already known from magic bytes, if any.
        """
        raw = self._peek(int(self.settings["header_scan_bytes"]))
        text = raw.decode(charset or FALLBACK_CHARSET, errors="replace")

        in_head = False
        for line in text.splitlines():
            line = line.strip().lstrip("\ufeff")
            if not in_head:
                if _HEAD_LINE.fullmatch(line):
                    log.debug("Found HEAD line.")
                    in_head = True
                continue

            if _REC0_LINE.fullmatch(line):
                log.warning("Could not find CHAR line in HEAD.")
                return None

            match = _CHAR_LINE.fullmatch(line)
            if match:
                token = match.group(1).strip().upper()
                log.info("Found CHAR line with value: %s", token)
                return token or None

        if not in_head:
            log.warning("Could not find HEAD line.")
        else:
            log.warning("Could not find CHAR line within the first %d bytes.", len(raw))
        return None

    # ------------------------------------------------------------------ #
    # Stage 3: statistical detection
    # ------------------------------------------------------------------ #

    def detect_statistically(self) -> Tuple[Optional[str], Optional[float]]:
        """Return ``(charset, confidence)`` from chardet, or ``(None, None)``."""
        sample = self.collect_sample(lambda line: bool(_HIGH_BYTE.search(line)))
        if sample:
            log.info("Using sample of %d bytes for statistical detection.", len(sample))
        else:
            log.warning("Could not find any bytes out of range 0-127. Finding NAME records instead.")
            sample = self.collect_sample(_is_name_line)
            if not sample:
                log.warning("Could not find any NAME records for statistical detection.")
                return None, None
            log.info("Using sample of %d bytes from NAME records for statistical detection.", len(sample))

        detector = UniversalDetector()
        for offset in range(0, len(sample), _READ_CHUNK):
            detector.feed(sample[offset:offset + _READ_CHUNK])
            if detector.done:
                break
        detector.close()

        name = detector.result.get("encoding")
        confidence = float(detector.result.get("confidence") or 0.0)
        if not name:
            log.info("Statistical detector returned no result.")
            return None, None

        log.info("Statistical detector reported %s with %.0f%% confidence.", name, confidence * 100)
        return name, confidence

    def collect_sample(self, wanted: Callable[[bytes], bool]) -> bytes:
        """
        Concatenate the lines ``wanted`` accepts, bounded by the configured
        ``sample_bytes`` and ``sample_lines`` ceilings.
        """
        sample = bytearray()
        limit = int(self.settings["sample_bytes"])
        max_lines = int(self.settings["sample_lines"])

        start = self.stream.tell()
        try:
            for scanned, line in enumerate(self._iter_byte_lines(), start=1):
                if scanned > max_lines:
                    log.warning("Hit sample line limit (%d lines).", max_lines)
                    break
                if wanted(line):
                    sample += line
                    sample += b"\n"
                    if len(sample) >= limit:
                        log.warning("Hit sample byte limit (%d bytes).", limit)
                        break
        finally:
            self.stream.seek(start)

        return bytes(sample[:limit])

    # ------------------------------------------------------------------ #
    # Stage 4: policy
    # ------------------------------------------------------------------ #

    def resolve(
        self,
        declared: Optional[str],
        detected: Optional[str],
        confidence: Optional[float],
    ) -> CharsetDecision:
        """
        Reconcile the declared token with the detector's guess.

        A detection overrides the declared charset only with enough
        confidence: ``low_confidence`` if chardet could have reported the
        declared charset itself, ``high_confidence`` otherwise. Plain ASCII
        never contradicts an ASCII-compatible charset.
        """
        declared_charset = canonical_charset(DECLARED_CHARSET_ALIASES.get(declared or ""))
        hint = None
        if declared and declared_charset is None:
            hint = canonical_charset(declared)
            if hint:
                log.warning("%s is not a known GEDCOM CHAR value; keeping it as a hint (%s).", declared, hint)
            else:
                log.warning("%s is not a known GEDCOM CHAR value.", declared)

        if declared_charset or hint:
            use, source = declared_charset or hint, CharsetSource.DECLARED
        else:
            use, source = self.default_charset, CharsetSource.DEFAULT

        detected_charset = canonical_charset(detected)
        if detected and detected_charset is None:
            log.warning("Detector returned unknown charset name %s; ignoring.", detected)

        if detected_charset is None or detected_charset == use:
            pass
        elif detected_charset == canonical_charset("ascii") and _ascii_compatible(use):
            log.info("Detected plain ASCII, which %s already covers.", use)
        else:
            threshold = float(
                self.settings["low_confidence"]
                if declared_charset in DETECTABLE_CHARSETS
                else self.settings["high_confidence"]
            )
            if (confidence or 0.0) >= threshold:
                log.info("Detector confidence is above threshold of %.0f%%.", threshold * 100)
                use, source = detected_charset, CharsetSource.DETECTED
            else:
                log.warning("Detector confidence is BELOW threshold of %.0f%%; ignoring.", threshold * 100)

        if use is None:
            use, source = canonical_charset(LAST_RESORT_CHARSET), CharsetSource.DEFAULT

        return CharsetDecision(
            charset=use,
            source=source,
            declared=declared,
            detected=detected_charset,
            confidence=confidence,
        )

    # ------------------------------------------------------------------ #
    # Stream helpers
    # ------------------------------------------------------------------ #

    def _peek(self, size: int) -> bytes:
        start = self.stream.tell()
        try:
            return self.stream.read(size)
        finally:
            self.stream.seek(start)

    def _iter_byte_lines(self) -> Iterator[bytes]:
        """
        Yield lines without terminators, reading at most ``scan_bytes``.

        Only each new chunk is split; a line longer than ``sample_bytes`` is
        cut to that length and the rest of it is skipped.
        """
        max_scan = int(self.settings["scan_bytes"])
        max_line = int(self.settings["sample_bytes"])
        parts: List[bytes] = []
        kept = 0
        scanned = 0

        while scanned < max_scan:
            chunk = self.stream.read(_READ_CHUNK)
            if not chunk:
                break
            scanned += len(chunk)
            if chunk.endswith(b"\r"):
                # keep a CR LF pair inside one chunk
                chunk += self.stream.read(1)

            *complete, tail = _BYTE_EOL.split(chunk)
            for piece in complete:
                if kept < max_line:
                    parts.append(piece)
                yield b"".join(parts)[:max_line]
                parts, kept = [], 0

            if tail and kept < max_line:
                parts.append(tail)
                kept += len(tail)
        else:
            log.warning("Hit sample scan limit (%d bytes).", max_scan)

        if parts:
            yield b"".join(parts)[:max_line]


def _is_name_line(line: bytes) -> bool:
    return len(line) > 5 and line[0:1] == b"1" and line[2:6] == b"NAME"


def detect_charset(source: Union[bytes, BinaryIO]) -> CharsetDecision:
    """Convenience wrapper accepting raw bytes or a seekable binary stream."""
    stream = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    return CharsetResolver(stream).detect()
