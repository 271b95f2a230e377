"""Extraction of a JSON object embedded in free text.

Chat-completion services are asked to answer with JSON only but routinely
wrap the object in prose or markdown fences. The scanner below walks the
text, matches braces while honouring JSON string literals, and returns the
first balanced candidate that decodes to an object.
"""

import json
from typing import Any, Optional


def _find_matching_brace(text: str, start: int) -> Optional[int]:
    """Return the index of the brace closing the one at ``start``, if any."""
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


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first JSON object found in ``text``.

    Args:
        text: Free text possibly containing a JSON object

    Returns:
        Decoded object

    Raises:
        ValueError: If no balanced, decodable JSON object is present
    """
    if not text:
        raise ValueError("Empty response")

    start = text.find("{")
    while start != -1:
        end = _find_matching_brace(text, start)
        if end is not None:
            try:
                value = json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                value = None
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    raise ValueError("No JSON object found in response")
