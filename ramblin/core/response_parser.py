"""
Response Parsing Module
========================
Turns raw generation output into JSON values.

Models are asked for pure JSON but regularly wrap it in markdown code
fences or surround it with prose ("Sure! Here's the result: {...}").

1. **clean()** strips fence markers and surrounding whitespace.
2. **extract()** tries a strict parse first, then falls back to a
   bracket-depth scanner that isolates balanced top-level {...} spans.
   Exactly one span that parses as an object is accepted; zero or
   several are reported as unparsable content.

Callers must rule out empty content (EmptyResponse) before calling
these functions.
"""

import json
import re
import logging
from typing import Any, Iterator

from ramblin.core.result import Err, ErrorKind, NormalizedResult, Ok

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200

# Fence markers wrapping the whole response; the closing one may be missing
LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")
# A fenced block embedded in prose, fences on their own lines
FENCED_BLOCK = re.compile(r"^```(?:json)?[ \t]*\n([\s\S]*?)\n[ \t]*```[ \t]*$", re.IGNORECASE | re.MULTILINE)


def _is_strict_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def clean(raw: str) -> str:
    """
    Remove markdown fence markers and trim surrounding whitespace.

    Text that already parses as JSON is returned as-is, so backticks inside
    string values survive. Otherwise only fences wrapping the whole text, or
    fences sitting on their own lines around a block, are removed.

    Args:
        raw: Raw text content returned by the generation API

    Returns:
        The text with fences removed, fenced content preserved
    """
    text = (raw or "").strip()
    if _is_strict_json(text):
        return text

    if text.startswith("```"):
        text = LEADING_FENCE.sub("", text, count=1)
        text = TRAILING_FENCE.sub("", text, count=1)
        return text.strip()

    return FENCED_BLOCK.sub(r"\1", text).strip()


def _matching_brace(text: str, start: int) -> int | None:
    """Index of the brace closing the object opened at ``start``, or None if unbalanced."""
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
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
                return i

    return None


def iter_object_spans(text: str) -> Iterator[str]:
    """
    Yield every balanced top-level {...} span in the text, left to right.

    Braces inside JSON string literals are ignored. An opening brace that
    is never closed is skipped so a stray "{" in prose does not hide a
    real object further along.
    """
    pos = 0
    while pos < len(text):
        start = text.find("{", pos)
        if start < 0:
            return

        end = _matching_brace(text, start)
        if end is None:
            pos = start + 1
            continue

        yield text[start:end + 1]
        pos = end + 1


def _preview(text: str) -> str:
    return text[:PREVIEW_CHARS]


def extract(cleaned: str) -> NormalizedResult[Any]:
    """
    Recover a JSON value from cleaned model output.

    Args:
        cleaned: Output of clean()

    Returns:
        Ok(value) on success, Err(UNPARSABLE_CONTENT) otherwise
    """
    # Strict parse of the whole text
    try:
        return Ok(json.loads(cleaned))
    except (json.JSONDecodeError, TypeError):
        pass

    # Embedded object(s) surrounded by prose
    candidates: list[dict] = []
    for span in iter_object_spans(cleaned or ""):
        try:
            value = json.loads(span)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            candidates.append(value)

    if len(candidates) == 1:
        logger.info("Recovered JSON object embedded in surrounding text")
        return Ok(candidates[0])

    if candidates:
        return Err(
            ErrorKind.UNPARSABLE_CONTENT,
            f"Found {len(candidates)} separate JSON objects, expected one: {_preview(cleaned)!r}",
        )

    return Err(
        ErrorKind.UNPARSABLE_CONTENT,
        f"No JSON object found in response: {_preview(cleaned)!r}",
    )
