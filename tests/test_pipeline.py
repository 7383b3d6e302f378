# tests/test_pipeline.py

from __future__ import annotations

import pytest

from gedcom_io.config import get_config
from gedcom_io.core.context import RewriteContext
from gedcom_io.core.exceptions import GedcomEncodeError, PipelineError
from gedcom_io.core.pipeline import Pipeline
from gedcom_io.logging import get_logger
from gedcom_io.parser_core import GEDCOMParser


def _context(path, **kwargs) -> RewriteContext:
    return RewriteContext(
        config=get_config(),
        logger=get_logger("tests.pipeline"),
        input_path=str(path),
        **kwargs,
    )


def test_pipeline_rewrites_unchanged_by_default(tmp_path, ged) -> None:
    data = ged("0 HEAD", "1 CHAR UTF-8", "0 @N1@ NOTE hello", "1 CONT world", "0 TRLR")
    src = tmp_path / "in.ged"
    src.write_bytes(data)
    ctx = _context(src)

    assert Pipeline(ctx).run() == data
    assert ctx.stats["records"] == 3
    assert ctx.stats["input_charset"] == "utf-8"


def test_pipeline_converts_to_utf8(tmp_path, ged) -> None:
    src = tmp_path / "in.ged"
    src.write_bytes(ged("0 HEAD", "1 CHAR ANSI", "0 @N1@ NOTE café", "0 TRLR", charset="cp1252"))
    out = tmp_path / "out.ged"
    ctx = _context(src, output_path=str(out), charset="cp1252", to_utf8=True)

    data = Pipeline(ctx).run()

    assert out.read_bytes() == data
    assert data == "0 HEAD\n1 CHAR UTF-8\n0 @N1@ NOTE café\n0 TRLR\n".encode("utf-8")
    assert ctx.stats["output_charset"] == "utf-8"


def test_pipeline_rewraps_at_requested_width(tmp_path, ged) -> None:
    src = tmp_path / "in.ged"
    src.write_bytes(ged("0 HEAD", "0 @N1@ NOTE abcdefgh", "0 TRLR"))

    data = Pipeline(_context(src, width=3)).run()

    assert data == b"0 HEAD\n0 @N1@ NOTE abc\n1 CONC def\n1 CONC gh\n0 TRLR\n"


def test_pipeline_timestamps_header(tmp_path, ged) -> None:
    src = tmp_path / "in.ged"
    src.write_bytes(ged("0 HEAD", "0 TRLR"))

    data = Pipeline(_context(src, timestamp=True)).run()

    assert b"1 DATE " in data
    assert b"2 TIME " in data


def test_pipeline_keeps_gedcom_errors(tmp_path, ged) -> None:
    src = tmp_path / "in.ged"
    src.write_bytes(ged("0 HEAD", "1 CHAR ASCII", "1 NOTE Zoë", "0 TRLR", charset="utf-8"))

    # undecodable bytes become U+FFFD, which ASCII cannot encode on the way out
    with pytest.raises(GedcomEncodeError) as excinfo:
        Pipeline(_context(src, charset="ascii")).run()
    assert excinfo.value.lineno == 3


def test_pipeline_wraps_unexpected_errors(tmp_path) -> None:
    missing = tmp_path / "missing.ged"

    with pytest.raises(PipelineError) as excinfo:
        Pipeline(_context(missing)).run()
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_parser_requires_a_tree() -> None:
    with pytest.raises(ValueError):
        GEDCOMParser().to_bytes()
