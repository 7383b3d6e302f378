# tests/test_serializer.py

from __future__ import annotations

import pytest

from gedcom_io.core.exceptions import GedcomEncodeError, GedcomReadError, GedcomWriteError
from gedcom_io.loader import GEDCOMTree, build_tree, encode_document, serialize, serialize_lines, tokenize_text, write_tree


def _tree(text: str, charset: str = "utf-8") -> GEDCOMTree:
    return build_tree(tokenize_text(text), charset=charset)


def _note(value: str) -> str:
    tree = _tree("0 @N1@ NOTE x\n")
    node = tree.records[0]
    node.record = node.record.replace_value(value)
    return next(serialize_lines(tree))


@pytest.mark.parametrize(
    "value, wire",
    [
        ("no at sign", "no at sign"),
        ("joe@example.com", "joe@@example.com"),
        ("a@b@c", "a@@b@@c"),
        ("@@", "@@@@"),
        ("@", "@@"),
    ],
)
def test_at_signs_are_doubled(value: str, wire: str) -> None:
    assert _note(value) == f"0 @N1@ NOTE {wire}"


def test_date_escapes_pass_through() -> None:
    text = "0 @I1@ INDI\n1 BIRT\n2 DATE @#DJULIAN@ 5 MAR 1700\n"
    lines = list(serialize_lines(_tree(text)))

    assert lines[-1] == "2 DATE @#DJULIAN@ 5 MAR 1700"


def test_pointers_and_ids_are_delimited() -> None:
    text = "0 @F1@ FAM\n1 HUSB @I1@\n"

    assert list(serialize_lines(_tree(text))) == ["0 @F1@ FAM", "1 HUSB @I1@"]


def test_serialize_uses_tree_line_terminator() -> None:
    tree = _tree("0 HEAD\n0 TRLR\n")
    tree.line_terminator = "\r\n"

    assert serialize(tree) == "0 HEAD\r\n0 TRLR\r\n"


def test_encode_document_uses_tree_charset() -> None:
    tree = _tree("0 HEAD\n1 NOTE café\n0 TRLR\n", charset="cp1252")

    assert encode_document(tree) == b"0 HEAD\n1 NOTE caf\xe9\n0 TRLR\n"


def test_encode_document_explicit_charset() -> None:
    tree = _tree("0 HEAD\n1 NOTE café\n0 TRLR\n", charset="cp1252")

    assert encode_document(tree, "utf-8") == "0 HEAD\n1 NOTE café\n0 TRLR\n".encode("utf-8")


def test_utf16_output_has_single_bom() -> None:
    data = encode_document(_tree("0 HEAD\n0 TRLR\n", charset="utf-16"))

    assert data.decode("utf-16") == "0 HEAD\n0 TRLR\n"
    assert data.count(b"\xff\xfe") + data.count(b"\xfe\xff") == 1


def test_unencodable_character_is_a_write_error() -> None:
    tree = _tree("0 HEAD\n1 CHAR ASCII\n0 @I1@ INDI\n1 NAME Zoë\n0 TRLR\n", charset="ascii")

    with pytest.raises(GedcomEncodeError) as excinfo:
        encode_document(tree)

    err = excinfo.value
    assert err.lineno == 4
    assert err.char == "ë"
    assert err.charset == "ascii"
    assert isinstance(err, GedcomWriteError)
    assert not isinstance(err, GedcomReadError)


def test_write_tree_wraps_and_writes(tmp_path) -> None:
    tree = _tree("0 HEAD\n0 @N1@ NOTE " + "n" * 15 + "\n0 TRLR\n")
    out = write_tree(tree, tmp_path / "out.ged", max_width=10)

    assert out.read_bytes() == b"0 HEAD\n0 @N1@ NOTE nnnnnnnnnn\n1 CONC nnnnn\n0 TRLR\n"


def test_write_tree_without_wrapping(tmp_path) -> None:
    tree = _tree("0 HEAD\n0 @N1@ NOTE " + "n" * 15 + "\n0 TRLR\n")
    out = write_tree(tree, tmp_path / "out.ged", max_width=10, wrap=False)

    assert out.read_bytes().count(b"\n") == 3
