"""Canonical source records produced by reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class XRayChunk:
    """One content element of an X-Ray analysis."""

    id: str | int | None = None
    content_type: list[str] = field(default_factory=list)
    text: str | None = None
    suggested_text: str | None = None
    section_summary: str | None = None
    narrative: list[str] = field(default_factory=list)
    parsed_data: dict[str, Any] | None = None
    original_text: str | None = None
    json: Any = None
    page_numbers: list[Any] | None = None
    bounding_boxes: list[Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "contentType": list(self.content_type),
            "text": self.text,
            "suggestedText": self.suggested_text,
            "sectionSummary": self.section_summary,
            "narrative": list(self.narrative),
            "parsedData": self.parsed_data,
            "originalText": self.original_text,
            "json": self.json,
            "pageNumbers": self.page_numbers,
            "boundingBoxes": self.bounding_boxes,
        }


@dataclass(slots=True)
class XRayAnalysis:
    """Document-level X-Ray breakdown attached to a source."""

    summary: str | None = None
    keywords: str | list[str] | None = None
    language: str | None = None
    chunks: list[XRayChunk] = field(default_factory=list)
    summary_data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "keywords": list(self.keywords) if isinstance(self.keywords, list) else self.keywords,
            "language": self.language,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "summaryData": self.summary_data,
        }


@dataclass(slots=True)
class Source:
    """Deduplicated, merged representation of one logical document."""

    id: str
    file_name: str | None = None
    title: str | None = None
    score: float | None = None
    excerpts: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    author: str | None = None
    date_published: str | None = None
    url: str | None = None
    file_size: int | None = None
    type: str | None = None
    snippets: list[str] = field(default_factory=list)
    narrative: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    highlights: list[str] = field(default_factory=list)
    xray: XRayAnalysis | None = None

    @property
    def display_name(self) -> str:
        return self.file_name or self.title or f"Document {self.id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "title": self.title,
            "score": self.score,
            "excerpts": list(self.excerpts),
            "metadata": dict(self.metadata),
            "author": self.author,
            "datePublished": self.date_published,
            "url": self.url,
            "fileSize": self.file_size,
            "type": self.type,
            "snippets": list(self.snippets),
            "narrative": list(self.narrative),
            "tags": list(self.tags),
            "highlights": list(self.highlights),
            "xray": self.xray.to_dict() if self.xray is not None else None,
        }
