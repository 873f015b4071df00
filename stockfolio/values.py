"""Decoded value tree produced by the lenient object parser.

Scalars are plain Python builtins: ``None``, ``bool``, ``int``/``float`` and
``str``. Objects are read-only, insertion-ordered mappings keyed by ``str``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Optional, Union

Value = Union[None, bool, int, float, str, "Mapping[str, Value]"]
ValueObject = Mapping[str, Value]


def freeze(items: Dict[str, Value]) -> ValueObject:
    """Wrap decoded object members in a read-only view."""
    return MappingProxyType(items)


def get_object(tree: Value, key: str) -> Optional[ValueObject]:
    """Return the nested object stored under ``key``, or None."""
    if not isinstance(tree, Mapping):
        return None
    value = tree.get(key)
    if isinstance(value, Mapping):
        return value
    return None


def get_text(tree: Value, key: str, default: str = "") -> str:
    """Return the value under ``key`` as text, or ``default`` if absent."""
    if not isinstance(tree, Mapping) or key not in tree:
        return default
    value = tree[key]
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_float(tree: Value, key: str, default: float = 0.0) -> float:
    """Return the value under ``key`` as a float.

    Absent keys give ``default``. Quote APIs send prices as strings, so
    text values are converted too; anything non-numeric raises ValueError.
    """
    if not isinstance(tree, Mapping) or key not in tree:
        return default
    value = tree[key]
    if isinstance(value, bool) or value is None or isinstance(value, Mapping):
        raise ValueError(f"{key!r} is not numeric: {value!r}")
    return float(value)
