"""Lenient parser for the flat/nested JSON objects returned by quote APIs.

Only objects are understood: quoted strings, nested objects, numbers,
booleans and null. Arrays and escape sequences are left as raw text. The
parser never raises; anything that does not look like an object decodes to
an empty mapping, and unrecognised values are kept as their raw text.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List

from .values import Value, ValueObject, freeze

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_object(text: str) -> ValueObject:
    """Decode a brace-delimited object into a read-only mapping of values."""
    body = text.strip()
    if not _delimited(body, "{", "}"):
        logger.debug("Not an object, returning empty result: %.40r", body)
        return freeze({})

    result: Dict[str, Value] = {}
    for segment in split_top_level(body[1:-1]):
        colon = find_separator(segment)
        # A segment without a key (no colon, or colon first) is dropped.
        if colon <= 0:
            continue
        key = _unquote(segment[:colon].strip())
        result[key] = decode_value(segment[colon + 1:].strip())
    return freeze(result)


def split_top_level(body: str) -> List[str]:
    """Split an object body on commas outside strings and nested objects."""
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    depth = 0

    for ch in body:
        # The escape check looks at the segment buffer, not the raw input.
        if ch == '"' and (not current or current[-1] != "\\"):
            in_quotes = not in_quotes
        if not in_quotes:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1

        if ch == "," and not in_quotes and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    if current:
        parts.append("".join(current).strip())
    return parts


def find_separator(segment: str) -> int:
    """Return the index of the first ':' outside a quoted string, or -1."""
    in_quotes = False
    for i, ch in enumerate(segment):
        if ch == '"' and (i == 0 or segment[i - 1] != "\\"):
            in_quotes = not in_quotes
        if ch == ":" and not in_quotes:
            return i
    return -1


def decode_value(raw: str) -> Value:
    """Decode one raw value: object, string, literal, number or raw text."""
    if _delimited(raw, "{", "}"):
        return parse_object(raw)
    if _delimited(raw, '"', '"'):
        return raw[1:-1]
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None

    if "." in raw:
        if _FLOAT_RE.fullmatch(raw):
            return float(raw)
    elif _INT_RE.fullmatch(raw):
        return int(raw)
    return raw


def _delimited(raw: str, opening: str, closing: str) -> bool:
    return len(raw) >= 2 and raw.startswith(opening) and raw.endswith(closing)


def _unquote(key: str) -> str:
    if _delimited(key, '"', '"'):
        return key[1:-1]
    return key
