from __future__ import annotations
import sys
from pathlib import Path
from vizr.core.logging import get_logger

_log = get_logger(__name__)


def read_payload_text(path: str) -> str:
    """
    Raw text of a payload file ("-" reads stdin). The text is handed to the
    normalizer as-is, so JSON, markdown answers and prose all work.
    Raises OSError / UnicodeDecodeError; callers decide how to surface them.
    """
    if path == "-":
        text = sys.stdin.read()
        _log.info("Read %d chars of payload from stdin", len(text))
        return text
    p = Path(path).expanduser()
    text = p.read_text(encoding="utf-8-sig")
    _log.info("Read %d chars of payload from %s", len(text), p)
    return text
