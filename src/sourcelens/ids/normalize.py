"""Identifier canonicalization shared by merge and citation lookup."""

from __future__ import annotations

import re
from urllib.parse import unquote


_SCHEME_PREFIX_RE = re.compile(
    r"^(?:groundx:|azure:|gx:|bing:|file:|web:|blob:|https?://)",
    re.IGNORECASE,
)
_MALFORMED_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PATH_SEPARATOR_RE = re.compile(r"[\\/]")


def _decode_percent(value: str) -> str:
    if "%" not in value or _MALFORMED_ESCAPE_RE.search(value):
        return value
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def _normalize_once(value: str) -> str:
    stripped = _SCHEME_PREFIX_RE.sub("", value, count=1)
    spaced = stripped.replace("+", " ")
    return _decode_percent(spaced)


def normalize_identifier(raw: object) -> str:
    """Return the comparable form of an opaque source identifier.

    Strips one known scheme prefix, turns ``+`` into spaces and percent-decodes
    when the value carries ``%`` escapes. Undecodable values are kept as-is.
    The steps repeat until the value is stable, which makes the function
    idempotent for stacked prefixes and doubly encoded values.
    """
    if raw is None or isinstance(raw, bool):
        return ""
    value = raw if isinstance(raw, str) else str(raw)

    while True:
        normalized = _normalize_once(value)
        if normalized == value:
            return normalized
        value = normalized


def file_name_segment(value: str | None) -> str:
    """Trailing path segment of a filename, URL path or identifier."""
    if not value:
        return ""
    segments = _PATH_SEPARATOR_RE.split(value.rstrip("/\\"))
    return segments[-1] if segments else ""
