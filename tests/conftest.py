import sys
from pathlib import Path

import pytest

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def ged():
    """Build GEDCOM bytes from lines: ged("0 HEAD", "0 TRLR", eol="\\r\\n", charset="ascii")."""

    def _build(*lines: str, eol: str = "\n", charset: str = "utf-8") -> bytes:
        return "".join(line + eol for line in lines).encode(charset)

    return _build
