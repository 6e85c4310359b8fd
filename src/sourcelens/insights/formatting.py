"""Display helpers for sizes, dates and file names."""

from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlparse

from sourcelens.ids.normalize import file_name_segment


def format_file_size(size: int | float | None) -> str:
    if size is None:
        return "Unknown size"
    if size < 1024:
        return f"{int(size)} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / (1024 * 1024 * 1024):.1f} GB"


def parse_date(value: str | None) -> datetime | None:
    """Parse an ISO-8601 date/datetime; naive values are taken as UTC."""
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: str | None) -> str:
    """Render a publication date as ``Jan 5, 2024``; unparseable input is returned as-is."""
    if not value:
        return "Unknown date"
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def display_file_name(path: str | None) -> str:
    """Readable file name for a path or URL, with ``+`` shown as spaces."""
    if not path:
        return "Unknown"
    if "://" in path:
        parsed = urlparse(path)
        return file_name_segment(parsed.path) or parsed.netloc or path
    return (file_name_segment(path) or path).replace("+", " ")
