"""Isolate the structured payload embedded in free-form model text."""

import json

from nutrition_planner.domain.errors import MalformedSyntax, NoStructureFound

_CLOSERS = {"{": "}", "[": "]"}


def extract(raw_text: str) -> dict[str, object]:
    """Return the first top-level JSON object found in ``raw_text``.

    Leading or trailing prose and code fences are ignored. A span that opens
    but never closes (truncated generation) is reported as malformed.
    """
    start = raw_text.find("{")
    if start == -1:
        raise NoStructureFound("No JSON object found in model response")
    span = _balanced_span(raw_text, start)
    try:
        value = json.loads(span, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedSyntax(f"Model response is not valid JSON: {exc}") from exc
    return value


def _balanced_span(text: str, start: int) -> str:
    """Scan from ``start`` to the matching close bracket, skipping strings."""
    stack: list[str] = []
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
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]":
            if not stack or stack.pop() != char:
                raise MalformedSyntax(f"Unbalanced '{char}' at offset {index}")
            if not stack:
                return text[start : index + 1]
    raise MalformedSyntax("Model response ended before the JSON object closed")


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite number {name} is not allowed")
