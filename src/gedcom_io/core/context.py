from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RewriteContext:
    """
    Options and running totals for one rewrite.

    ``charset`` forces the input encoding; ``width`` overrides the wrapping
    width; ``normalize`` False writes CONC/CONT lines exactly as read.
    """

    config: Any
    logger: Any

    input_path: Optional[str] = None
    # None writes to stdout
    output_path: Optional[str] = None

    charset: Optional[str] = None
    width: Optional[int] = None
    to_utf8: bool = False
    timestamp: bool = False
    normalize: bool = True

    stats: Dict[str, Any] = field(default_factory=dict)

    debug: bool = False
