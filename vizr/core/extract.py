"""
Recover a JSON value from text that may wrap it in prose or markdown fences.

Generated answers routinely arrive as "Here you go: ```json {...} ```", so the
fenced patterns are tried before the blind bracket scan.
"""
from __future__ import annotations

import json
import re
from typing import Any, Optional, Tuple

from vizr.core.logging import get_logger

_log = get_logger(__name__)

# Sentinel so a literal JSON `null` can be told apart from "nothing parsed".
_MISSING = object()

EXTRACTION_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("fenced json object", re.compile(r"```json\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)),
    ("fenced block", re.compile(r"```[\w-]*\s*([\[{][\s\S]*?[\]}])\s*```")),
    ("bare object", re.compile(r"(\{[\s\S]*?\})")),
    ("bare array", re.compile(r"(\[[\s\S]*?\])")),
)


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return _MISSING


def _scan_from_first_bracket(text: str) -> Any:
    starts = [i for i in (text.find("{"), text.find("[")) if i >= 0]
    if not starts:
        return _MISSING
    first = min(starts)
    # Shortest-first; a JSON object/array can only end on a closing bracket.
    for end in range(first + 1, len(text) + 1):
        if text[end - 1] not in "}]":
            continue
        value = _loads(text[first:end])
        if value is not _MISSING:
            return value
    return _MISSING


def extract_json(payload: Any) -> Any:
    """
    Non-strings are returned unchanged. Strings go through, in order: a direct
    parse, the fenced/bare extraction patterns (first match of each), and a
    scan from the first bracket. Returns None when nothing parses.
    """
    value, _ = extract_json_traced(payload)
    return value


def extract_json_traced(payload: Any) -> Tuple[Any, str]:
    """Like extract_json, also naming the strategy that succeeded."""
    if not isinstance(payload, str):
        return payload, "passthrough"

    value = _loads(payload)
    if value is not _MISSING:
        return value, "parsed JSON"

    for name, pattern in EXTRACTION_PATTERNS:
        match = pattern.search(payload)
        if not match:
            continue
        value = _loads(match.group(1))
        if value is not _MISSING:
            return value, f"extracted JSON ({name})"

    value = _scan_from_first_bracket(payload)
    if value is not _MISSING:
        return value, "extracted JSON (bracket scan)"

    _log.debug("No JSON found in %d chars of text", len(payload))
    return None, "no JSON found"
