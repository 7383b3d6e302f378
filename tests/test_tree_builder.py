# tests/test_tree_builder.py

from __future__ import annotations

import pytest

from gedcom_io.core.exceptions import CharsetConversionError, GEDCOMStructureError
from gedcom_io.loader import GEDCOMTree, Record, TreeBuilder, build_tree, tokenize_text

SAMPLE = """\
0 HEAD
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 BIRT
2 DATE 1 JAN 1900
2 PLAC Boston
1 FAMS @F1@
0 @F1@ FAM
1 HUSB @I1@
0 TRLR
"""


def _tree(text: str = SAMPLE) -> GEDCOMTree:
    return build_tree(tokenize_text(text), charset="utf-8")


def test_build_tree_returns_gedcom_tree_instance() -> None:
    tree = _tree()

    assert isinstance(tree, GEDCOMTree)
    assert [r.tag for r in tree.records] == ["HEAD", "INDI", "FAM", "TRLR"]
    assert all(r.level == 0 for r in tree.records)


def test_every_child_is_one_level_deeper() -> None:
    tree = _tree()

    for node in tree.iter_nodes():
        for child in node.children:
            assert child.level == node.level + 1


def test_children_keep_file_order() -> None:
    indi = _tree().records[1]

    assert [c.tag for c in indi.children] == ["NAME", "BIRT", "FAMS"]
    assert [c.tag for c in indi.children[1].children] == ["DATE", "PLAC"]


def test_iter_nodes_is_document_order() -> None:
    tree = _tree()
    linenos = [n.lineno for n in tree.iter_nodes()]

    assert linenos == list(range(1, 12))


def test_find_by_xref_accepts_bare_or_delimited() -> None:
    tree = _tree()

    indi = tree.find_by_xref("I1")
    assert indi is tree.records[1]
    assert tree.find_by_xref("@I1@") is indi
    assert tree.find_by_xref("F1").tag == "FAM"
    assert tree.find_by_xref("X9") is None
    assert tree.find_by_xref("") is None


def test_duplicate_id_first_wins() -> None:
    tree = _tree("0 @I1@ INDI\n1 NAME First\n0 @I1@ INDI\n1 NAME Second\n")

    assert len(tree.records) == 2
    assert tree.find_by_xref("I1").children[0].value == "First"


def test_level_jump_raises_with_line_number() -> None:
    with pytest.raises(GEDCOMStructureError) as excinfo:
        _tree("0 HEAD\n1 SOUR X\n3 VERS 1\n0 TRLR\n")

    assert excinfo.value.lineno == 3


def test_first_record_must_be_level_zero() -> None:
    with pytest.raises(GEDCOMStructureError):
        _tree("1 NAME Orphan\n")


def test_builder_tracks_current_level() -> None:
    builder = TreeBuilder()
    assert builder.current_level == -1

    for record in tokenize_text("0 HEAD\n1 GEDC\n2 VERS 5.5.1\n0 TRLR\n"):
        builder.attach(record)
        assert builder.current_level == record.level
        assert builder.current_node.record is record


def test_find_records_by_tag_and_all_tags() -> None:
    tree = _tree()

    assert [n.xref_id for n in tree.find_records_by_tag("INDI")] == ["I1"]
    assert tree.find_records_by_tag("indi") == []
    assert tree.all_tags() == ["FAM", "HEAD", "INDI", "TRLR"]


# ---------- Charset ----------

def test_set_charset_first_call_only_records() -> None:
    tree = build_tree(tokenize_text("0 HEAD\n1 CHAR ANSI\n0 TRLR\n"))
    tree.set_charset("cp1252")

    assert tree.charset == "cp1252"
    assert tree.header.find_first("CHAR").value == "ANSI"


def test_set_charset_rewrites_head_char() -> None:
    tree = build_tree(tokenize_text("0 HEAD\n1 CHAR ANSI\n0 TRLR\n"), charset="cp1252")
    tree.set_charset("UTF8")

    assert tree.charset == "utf-8"
    assert tree.header.find_first("CHAR").value == "UTF-8"


def test_set_charset_adds_missing_head_char() -> None:
    tree = build_tree(tokenize_text("0 HEAD\n1 SOUR X\n0 TRLR\n"), charset="cp1252")
    tree.set_charset("utf-16")

    char = tree.header.children[-1]
    assert (char.tag, char.value, char.level) == ("CHAR", "UNICODE", 1)


def test_set_charset_without_gedcom_name_raises() -> None:
    tree = build_tree(tokenize_text("0 HEAD\n1 CHAR ANSI\n0 TRLR\n"), charset="cp1252")

    with pytest.raises(CharsetConversionError):
        tree.set_charset("koi8-r")
    assert tree.charset == "cp1252"


def test_minimal_tree() -> None:
    tree = GEDCOMTree.minimal()

    assert [r.tag for r in tree.records] == ["HEAD", "TRLR"]
    assert tree.header.find_first("CHAR").value == "UTF-8"
    assert tree.charset == "utf-8"


# ---------- Level rule at depth ----------

def _deep_builder(depth: int) -> TreeBuilder:
    builder = TreeBuilder()
    for level in range(depth + 1):
        builder.attach(Record(level=level, tag="NOTE", lineno=level + 1))
    return builder


@pytest.mark.parametrize("depth", [0, 1, 7, 50])
def test_any_shallower_or_next_level_attaches_at_depth(depth: int) -> None:
    for level in range(depth + 2):
        builder = _deep_builder(depth)
        assert builder.current_level == depth

        node = builder.attach(Record(level=level, tag="CONT", lineno=depth + 2))

        assert builder.current_level == level
        assert builder.current_node is node


@pytest.mark.parametrize("depth", [0, 1, 7, 50])
@pytest.mark.parametrize("jump", [2, 3, 10])
def test_skipping_a_level_raises_at_depth(depth: int, jump: int) -> None:
    builder = _deep_builder(depth)

    with pytest.raises(GEDCOMStructureError) as excinfo:
        builder.attach(Record(level=depth + jump, tag="NOTE", lineno=depth + 2))

    assert excinfo.value.lineno == depth + 2
    assert builder.current_level == depth


def test_deep_chain_nests_one_level_per_step() -> None:
    builder = _deep_builder(50)
    node = builder.tree.records[0]

    for level in range(1, 51):
        assert len(node.children) == 1
        node = node.children[0]
        assert node.level == level
