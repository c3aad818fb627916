"""Extract a JSON array of tag ids from free-form model output."""

import json
import re
from typing import Any, Optional

_FENCED_BLOCK = re.compile(r"^```(?:json)?\s*\n(.*?)\n```\s*$", re.IGNORECASE | re.DOTALL)


def parse_tag_array(response_text: Optional[str]) -> list[Any]:
    """
    Parse the first JSON array out of a model response.

    Handles a bare array, an array wrapped in a ```json fenced block, and an
    array embedded in prose. Never raises; returns [] when no array can be
    parsed.
    """
    text = (response_text or "").strip()
    if not text:
        return []

    fence = _FENCED_BLOCK.match(text)
    if fence:
        text = fence.group(1).strip()

    parsed = _loads_array(text)
    if parsed is not None:
        return parsed

    candidate = _extract_first_array(text)
    if candidate is not None:
        parsed = _loads_array(candidate)
        if parsed is not None:
            return parsed

    return []


def _loads_array(text: str) -> Optional[list[Any]]:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, list) else None


def _extract_first_array(text: str) -> Optional[str]:
    """Slice from the first '[' to its matching ']', ignoring brackets inside strings."""
    start = text.find("[")
    if start == -1:
        return None

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
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return None
