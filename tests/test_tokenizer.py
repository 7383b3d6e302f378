# tests/test_tokenizer.py

from __future__ import annotations

import pytest

from gedcom_io.core.exceptions import GedcomReadError, GedcomSyntaxError
from gedcom_io.loader import GedcomTag, Record, format_record, tokenize_line, tokenize_text
from gedcom_io.loader.tokenizer import parse_xref, split_physical_lines


def test_tokenize_line_simple_head() -> None:
    rec = tokenize_line("0 HEAD", lineno=1)
    assert rec.lineno == 1
    assert rec.level == 0
    assert rec.xref_id is None
    assert rec.pointer is None
    assert rec.tag == "HEAD"
    assert rec.value == ""


def test_tokenize_line_with_id_and_tag_only() -> None:
    rec = tokenize_line("0 @I1@ INDI", lineno=1)
    assert rec.level == 0
    assert rec.xref_id == "I1"
    assert rec.tag == "INDI"
    assert rec.value == ""


def test_tokenize_line_with_pointer() -> None:
    rec = tokenize_line("1 FAMS @F1@", lineno=4)
    assert rec.pointer == "F1"
    assert rec.value == ""
    assert rec.is_pointer


def test_tokenize_line_keeps_value_whitespace() -> None:
    rec = tokenize_line("2 CONC  and more ", lineno=3)
    assert rec.value == " and more "


def test_tokenize_line_collapses_double_at() -> None:
    rec = tokenize_line("1 NOTE mail me at joe@@example.com", lineno=2)
    assert rec.value == "mail me at joe@example.com"
    assert rec.pointer is None


def test_tokenize_line_with_bom_on_first_line() -> None:
    rec = tokenize_line("\ufeff0 HEAD", lineno=1)
    assert rec.level == 0
    assert rec.tag == "HEAD"


def test_tokenize_line_strips_line_ending() -> None:
    rec = tokenize_line("1 SEX M\r\n", lineno=5)
    assert rec.value == "M"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        "X HEAD",
        "0",
        "0 ",
        "0 @I1 INDI",
        "0 @I1@",
        "0 @@ INDI",
    ],
)
def test_tokenize_line_rejects_malformed(line: str) -> None:
    with pytest.raises(GedcomSyntaxError) as excinfo:
        tokenize_line(line, lineno=7)
    assert excinfo.value.lineno == 7
    assert str(excinfo.value).startswith("Line 7:")


def test_syntax_error_is_a_read_error_and_value_error() -> None:
    with pytest.raises(GedcomReadError):
        tokenize_line("Q HEAD", lineno=1)
    with pytest.raises(ValueError):
        tokenize_line("Q HEAD", lineno=1)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("@I1@", "I1"),
        ("@F23@", "F23"),
        ("@@", None),
        ("@I1@@", None),
        ("@I@1@", None),
        ("I1", None),
        ("@I1", None),
    ],
)
def test_parse_xref(text: str, expected) -> None:
    assert parse_xref(text) == expected


def test_tokenize_text_counts_blank_lines() -> None:
    records = list(tokenize_text("0 HEAD\n\n1 CHAR UTF-8\r\n0 TRLR"))
    assert [r.tag for r in records] == ["HEAD", "CHAR", "TRLR"]
    assert [r.lineno for r in records] == [1, 3, 4]


def test_split_physical_lines_reports_first_terminator() -> None:
    lines, eol = split_physical_lines("0 HEAD\r\n1 NOTE a\x0cb\r\n0 TRLR\r\n")
    assert eol == "\r\n"
    # form feed is value content, not a line break
    assert lines == ["0 HEAD", "1 NOTE a\x0cb", "0 TRLR"]


def test_split_physical_lines_handles_bare_cr() -> None:
    lines, eol = split_physical_lines("0 HEAD\r0 TRLR\r")
    assert eol == "\r"
    assert lines == ["0 HEAD", "0 TRLR"]


@pytest.mark.parametrize(
    "line",
    [
        "0 HEAD",
        "0 @I1@ INDI",
        "1 FAMC @F1@",
        "1 NOTE  leading and trailing ",
        "1 NOTE joe@@example.com",
        "1 NOTE @@@@",
        "2 DATE @#DJULIAN@ 1 JAN 1700",
        "1 _CUSTOM anything goes",
    ],
)
def test_format_record_is_inverse_of_tokenize(line: str) -> None:
    assert format_record(tokenize_line(line, lineno=1)) == line


def test_record_rejects_value_and_pointer_together() -> None:
    with pytest.raises(ValueError):
        Record(level=1, tag="NOTE", value="text", pointer="N1")


def test_record_rejects_negative_level() -> None:
    with pytest.raises(ValueError):
        Record(level=-1, tag="HEAD")


def test_record_equality_ignores_line_number() -> None:
    assert tokenize_line("1 SEX F", lineno=3) == tokenize_line("1 SEX F", lineno=99)


def test_create_child_is_one_level_deeper() -> None:
    parent = tokenize_line("1 NOTE text", lineno=1)
    child = parent.create_child("CONT", "more")
    assert child.level == 2
    assert str(child) == "2 CONT more"


@pytest.mark.parametrize(
    "tag, kind",
    [
        ("NOTE", GedcomTag.NOTE),
        ("CONC", GedcomTag.CONC),
        ("note", GedcomTag.UNKNOWN),
        ("_UID", GedcomTag.UNKNOWN),
        ("XYZZY", GedcomTag.UNKNOWN),
    ],
)
def test_record_kind_matches_catalog_case_sensitively(tag: str, kind: GedcomTag) -> None:
    assert Record(level=1, tag=tag).kind is kind
    assert GedcomTag.lookup(tag) is kind
