"""Recover a JSON object from free-form model output.

Providers routinely wrap the requested JSON in prose or markdown fences.
extract_json() tries, in order:
1. strict parse of the whole text
2. balanced-brace candidates, scanning from each "{" (bounded)
3. the greedy first-"{"-to-last-"}" slice

It is a bounded search, not a parser: the first candidate that parses to a
JSON object wins, and None means nothing usable was found.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Upper bound on "{" start positions tried by the balanced scan
_MAX_CANDIDATES = 16


def extract_json(text: str | None) -> dict[str, Any] | None:
    """Return the first JSON object embedded in ``text``, or None."""
    if not text or not text.strip():
        return None

    parsed = _loads_object(text.strip())
    if parsed is not None:
        return parsed

    for candidate in _balanced_candidates(text):
        parsed = _loads_object(candidate)
        if parsed is not None:
            return parsed

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        parsed = _loads_object(text[first : last + 1])
        if parsed is not None:
            return parsed

    logger.debug("No JSON object recovered from %d chars of output", len(text))
    return None


def _loads_object(candidate: str) -> dict[str, Any] | None:
    try:
        value = json.loads(candidate)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _balanced_candidates(text: str) -> list[str]:
    """Slices that start at a "{" and end where its brace depth returns to 0.

    Braces inside JSON string literals are ignored.
    """
    candidates: list[str] = []
    start = text.find("{")
    while start != -1 and len(candidates) < _MAX_CANDIDATES:
        end = _matching_brace(text, start)
        if end is not None:
            candidates.append(text[start : end + 1])
        start = text.find("{", start + 1)
    return candidates


def _matching_brace(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None
