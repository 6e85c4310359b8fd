"""Accessors over untyped JSON-shaped payload values."""

from __future__ import annotations

from collections.abc import Mapping
import math
from typing import Any, TypeAlias, Union


JsonValue: TypeAlias = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]


def as_mapping(value: object) -> Mapping[str, Any] | None:
    """Return ``value`` when it is a mapping, otherwise ``None``."""
    return value if isinstance(value, Mapping) else None


def as_list(value: object) -> list[Any]:
    """Return list payloads as-is; anything else is treated as empty."""
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return []


def as_text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def as_number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def first_text(node: Mapping[str, Any], *keys: str) -> str | None:
    """First non-blank string among ``keys``."""
    for key in keys:
        text = as_text(node.get(key))
        if text is not None:
            return text
    return None


def first_number(node: Mapping[str, Any], *keys: str) -> float | None:
    for key in keys:
        number = as_number(node.get(key))
        if number is not None:
            return number
    return None


def text_list(value: object) -> list[str]:
    """Non-blank strings of a list payload; a lone string becomes one item."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [item for item in as_list(value) if isinstance(item, str) and item.strip()]


def coerce_identifier(value: object) -> str | None:
    """Stringify string/integer identifiers; other shapes are not identifiers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return None
