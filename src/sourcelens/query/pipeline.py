"""Filter, sort and paginate a reconciled source list for display."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import math
from typing import Any, Literal

from sourcelens.insights.formatting import parse_date
from sourcelens.reconcile.models import Source


PAGE_SIZE = 10
SortOption = Literal["relevance", "date", "name"]
SORT_OPTIONS: tuple[str, ...] = ("relevance", "date", "name")


@dataclass
class SourceQuery:
    """Display options applied on top of the canonical source list."""

    text: str | None = None              # matches file name, title, author, excerpts
    name_filter: str | None = None       # matches file name, title, author only
    min_score: float = 0.0
    document_types: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    sort: SortOption = "relevance"
    page: int = 1
    max_displayed: int | None = None


@dataclass(slots=True)
class SourcePage:
    items: list[Source]
    page: int
    page_size: int
    total_count: int
    total_pages: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "items": [source.to_dict() for source in self.items],
        }


def _haystack(source: Source, *, include_excerpts: bool) -> str:
    parts = [source.file_name or "", source.title or "", source.author or ""]
    if include_excerpts:
        parts.extend(source.excerpts)
    return " ".join(parts).lower()


def filter_by_text(sources: Sequence[Source], text: str | None, *, include_excerpts: bool = True) -> list[Source]:
    if not text:
        return list(sources)
    needle = text.lower()
    return [source for source in sources if needle in _haystack(source, include_excerpts=include_excerpts)]


def _contains_any(value: str | None, wanted: Sequence[str]) -> bool:
    lowered = (value or "").lower()
    return any(item.lower() in lowered for item in wanted)


def filter_by_attributes(
    sources: Sequence[Source],
    *,
    min_score: float = 0.0,
    document_types: Sequence[str] = (),
    authors: Sequence[str] = (),
) -> list[Source]:
    """Apply score, type and author constraints (all optional, AND-combined)."""
    kept: list[Source] = []
    for source in sources:
        if min_score > 0 and (source.score is None or source.score < min_score):
            continue
        if document_types and not _contains_any(source.type, document_types):
            continue
        if authors and not _contains_any(source.author, authors):
            continue
        kept.append(source)
    return kept


def _timestamp(source: Source) -> float:
    parsed = parse_date(source.date_published)
    return parsed.timestamp() if parsed is not None else 0.0


def sort_sources(sources: Sequence[Source], option: str) -> list[Source]:
    """Stable sort by score, publication date (both descending) or file name."""
    if option == "relevance":
        return sorted(sources, key=lambda source: source.score or 0.0, reverse=True)
    if option == "date":
        return sorted(sources, key=_timestamp, reverse=True)
    if option == "name":
        return sorted(sources, key=lambda source: (source.file_name or "").casefold())
    raise ValueError(f"Unsupported sort option: {option!r}")


def paginate(sources: Sequence[Source], page: int, *, page_size: int = PAGE_SIZE) -> SourcePage:
    total = len(sources)
    total_pages = math.ceil(total / page_size)
    items = list(sources[(page - 1) * page_size : page * page_size]) if page >= 1 else []
    return SourcePage(
        items=items,
        page=page,
        page_size=page_size,
        total_count=total,
        total_pages=total_pages,
    )


def run_query(sources: Sequence[Source], query: SourceQuery | None = None) -> SourcePage:
    """Free-text filter, attribute filter, sort, then paginate."""
    resolved = query or SourceQuery()
    matched = filter_by_text(sources, resolved.text)
    matched = filter_by_text(matched, resolved.name_filter, include_excerpts=False)
    matched = filter_by_attributes(
        matched,
        min_score=resolved.min_score,
        document_types=resolved.document_types,
        authors=resolved.authors,
    )
    ordered = sort_sources(matched, resolved.sort)
    result = paginate(ordered, resolved.page)
    if resolved.max_displayed:
        result.items = result.items[: resolved.max_displayed]
    return result
