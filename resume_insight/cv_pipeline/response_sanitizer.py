"""
Repair near-JSON replies from the extraction model into strict JSON.

The model is told to answer with a single JSON object but sometimes wraps it in
a markdown fence, adds prose around it, or leaves stray commas. Each repair is
a small pure ``str -> str`` pass so it can be tested on its own; they run in
this order:

1. strip_code_fence        - drop one fence wrapping the whole reply
2. truncate_to_object      - keep the first '{' through the last '}'
3. remove_trailing_commas  - ',' right before '}' or ']'
4. remove_leading_commas   - ',' right after '{' or '['
5. collapse_comma_runs     - ',,' (whitespace allowed) -> ',' until stable
6. passes 3 and 4 again
7. strip surrounding whitespace

Comma passes only edit text between complete double-quoted string literals.
An unterminated literal cannot be told apart from structure, so a reply that
breaks off inside a string may still have commas rewritten.
"""

import json
import re
from typing import Any, Callable, List

from resume_insight.errors import UnparseableResponseError
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

_FENCE = re.compile(r"^```[\w+.-]*[ \t]*\r?\n?(.*?)\r?\n?\s*```$", re.DOTALL)
_STRING_LITERAL = re.compile(r'("(?:[^"\\]|\\.)*")', re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_LEADING_COMMA = re.compile(r"([{\[])\s*,")
_COMMA_RUN = re.compile(r",\s*,")

# Mirrors the "no information" object the prompt asks the model to send
EMPTY_RESPONSE: dict = {
    "Full Name": None,
    "Email": None,
    "Phone Number": None,
    "ATS Score": 0,
    "Work Experience": [],
}


def _outside_strings(text: str, fix: Callable[[str], str]) -> str:
    """Apply ``fix`` to every segment of ``text`` that is not a string literal."""
    parts = _STRING_LITERAL.split(text)
    # re.split with one capture group: odd indices are the literals
    return "".join(part if i % 2 else fix(part) for i, part in enumerate(parts))


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE.match(stripped)
    if match:
        return match.group(1).strip()
    return text


def _find_object_span(text: str) -> tuple:
    return text.find("{"), text.rfind("}")


def truncate_to_object(text: str) -> str:
    first, last = _find_object_span(text)
    if first != -1 and last > first:
        return text[first : last + 1]
    return text


def remove_trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda s: _TRAILING_COMMA.sub(r"\1", s))


def remove_leading_commas(text: str) -> str:
    return _outside_strings(text, lambda s: _LEADING_COMMA.sub(r"\1", s))


def _collapse(segment: str) -> str:
    while True:
        collapsed = _COMMA_RUN.sub(",", segment)
        if collapsed == segment:
            return segment
        segment = collapsed


def collapse_comma_runs(text: str) -> str:
    return _outside_strings(text, _collapse)


SANITIZE_PASSES: List[Callable[[str], str]] = [
    strip_code_fence,
    truncate_to_object,
    remove_trailing_commas,
    remove_leading_commas,
    collapse_comma_runs,
    remove_trailing_commas,
    remove_leading_commas,
    str.strip,
]


def _run_passes(text: str) -> str:
    for repair in SANITIZE_PASSES:
        text = repair(text)
    return text


def sanitize_response(raw: str) -> str:
    """
    Repair a model reply into text intended for json.loads.

    The pass pipeline is repeated until its output stops changing (every pass
    only ever shortens the text), so sanitizing a sanitized string is a no-op.
    Raises UnparseableResponseError if ``raw`` is not a string.
    """
    if not isinstance(raw, str):
        raise UnparseableResponseError(
            "AI response text is not in the expected string format.",
            {"type": type(raw).__name__},
        )
    first, last = _find_object_span(strip_code_fence(raw))
    if first == -1 or last <= first:
        logger.warning(
            "Could not find valid outer braces {} in the response string after fence removal: %.200s",
            raw,
        )
    text = raw
    while True:
        repaired = _run_passes(text)
        if repaired == text:
            return text
        text = repaired


def parse_response(raw: str) -> Any:
    """
    Sanitize and decode a model reply.

    An empty reply (after sanitizing) means the model found nothing and yields
    a copy of EMPTY_RESPONSE. Anything json.loads rejects raises
    UnparseableResponseError.
    """
    text = sanitize_response(raw)
    if text == "":
        logger.warning("JSON string became empty after all sanitization. Assuming no valid data.")
        return json.loads(json.dumps(EMPTY_RESPONSE))
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(
            "Failed to parse JSON response.\nRaw response: %.2000s\nString attempted for parsing: %.2000s\nParse error: %s",
            raw,
            text,
            e,
        )
        raise UnparseableResponseError(details={"error": str(e), "position": e.pos}) from e
