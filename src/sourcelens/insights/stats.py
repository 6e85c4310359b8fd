"""Aggregate analytics over a reconciled source list."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sourcelens.insights.formatting import parse_date
from sourcelens.insights.keywords import extract_keywords
from sourcelens.insights.relevance import relevance_explanation
from sourcelens.reconcile.models import Source
from sourcelens.reconcile.values import as_mapping


_EXTENSION_TYPES = {
    "pdf": "pdf",
    "doc": "word",
    "docx": "word",
    "xls": "spreadsheet",
    "xlsx": "spreadsheet",
    "csv": "spreadsheet",
    "txt": "text",
    "htm": "web",
    "html": "web",
}
_INSIGHT_KEYS = (
    "queryAnalysis",
    "sourceRelevance",
    "keyTerms",
    "suggestedQueries",
    "searchStrategy",
    "executionDetails",
)
_GENERIC_FOLLOWUPS = (
    "Can you provide more specific examples?",
    "What are the main limitations of this approach?",
    "What are the alternative perspectives on this topic?",
)


@dataclass(slots=True)
class RelevanceBuckets:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(slots=True)
class DocumentStats:
    """Summary figures shown above the source list."""

    total_sources: int
    unique_authors: int
    avg_score: float
    doc_types: dict[str, int]
    oldest: Source | None
    newest: Source | None
    total_file_size: int
    count_by_relevance: RelevanceBuckets = field(default_factory=RelevanceBuckets)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSources": self.total_sources,
            "uniqueAuthors": self.unique_authors,
            "avgScore": self.avg_score,
            "docTypes": dict(self.doc_types),
            "oldestDoc": self.oldest.id if self.oldest is not None else None,
            "newestDoc": self.newest.id if self.newest is not None else None,
            "totalFileSize": self.total_file_size,
            "countByRelevance": {
                "high": self.count_by_relevance.high,
                "medium": self.count_by_relevance.medium,
                "low": self.count_by_relevance.low,
            },
        }


def average_score(sources: Sequence[Source]) -> float | None:
    scores = [source.score for source in sources if source.score is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)


def count_document_types(sources: Sequence[Source]) -> dict[str, int]:
    """Count sources per type, inferring from the file extension when untyped."""
    counts: dict[str, int] = {}
    for source in sources:
        document_type = source.type
        if not document_type and source.file_name and "." in source.file_name:
            extension = source.file_name.rsplit(".", 1)[-1].lower()
            document_type = _EXTENSION_TYPES.get(extension, extension) or None
        key = document_type or "unknown"
        counts[key] = counts.get(key, 0) + 1
    return counts


def _dated(sources: Sequence[Source]) -> list[tuple[datetime, Source]]:
    dated: list[tuple[datetime, Source]] = []
    for source in sources:
        parsed = parse_date(source.date_published)
        if parsed is not None:
            dated.append((parsed, source))
    return dated


def document_stats(sources: Sequence[Source]) -> DocumentStats | None:
    if not sources:
        return None

    buckets = RelevanceBuckets()
    for source in sources:
        score = source.score or 0.0
        if score > 0.8:
            buckets.high += 1
        elif score >= 0.5:
            buckets.medium += 1
        else:
            buckets.low += 1

    oldest: Source | None = None
    newest: Source | None = None
    oldest_date: datetime | None = None
    newest_date: datetime | None = None
    for parsed, source in _dated(sources):
        if oldest_date is None or parsed < oldest_date:
            oldest_date, oldest = parsed, source
        if newest_date is None or parsed > newest_date:
            newest_date, newest = parsed, source

    return DocumentStats(
        total_sources=len(sources),
        unique_authors=len({source.author for source in sources if source.author}),
        avg_score=average_score(sources) or 0.0,
        doc_types=count_document_types(sources),
        oldest=oldest,
        newest=newest,
        total_file_size=sum(source.file_size or 0 for source in sources),
        count_by_relevance=buckets,
    )


def suggested_queries(text: str, keywords: Sequence[str]) -> list[str]:
    if not text or len(text) < 10:
        return []

    suggestions: list[str] = []
    if keywords:
        suggestions.append(f"Tell me more about {keywords[0]}")
    if len(keywords) > 1:
        suggestions.append(f"How does {keywords[1]} relate to this topic?")
        suggestions.append(f"What's the connection between {keywords[0]} and {keywords[1]}?")
    suggestions.extend(_GENERIC_FOLLOWUPS)
    return suggestions[:5]


def _provided_insights(payload: Mapping[str, Any]) -> dict[str, Any] | None:
    search_results = as_mapping(payload.get("searchResults"))
    query_context = payload.get("queryContext")
    provided = (
        as_mapping(payload.get("enhancedResults"))
        or as_mapping(payload.get("searchInsights"))
        or as_mapping(payload.get("queryAnalysis"))
        or ({"queryContext": query_context} if query_context else None)
        or (as_mapping(search_results.get("insights")) if search_results is not None else None)
    )
    if provided is None:
        return None
    picked = {key: provided[key] for key in _INSIGHT_KEYS if provided.get(key)}
    return picked or dict(provided)


def search_insights(payload: object, sources: Sequence[Source], answer_text: str = "") -> dict[str, Any] | None:
    """Insight block from the payload, or one derived from the sources."""
    root = as_mapping(payload)
    if root is not None:
        provided = _provided_insights(root)
        if provided is not None:
            return provided
    if not sources:
        return None

    key_terms = extract_keywords(answer_text)
    top_documents = ", ".join(source.display_name for source in sources[:3])
    return {
        "queryAnalysis": {
            "intent": "Information Retrieval",
            "searchStrategy": "Document Analysis",
            "sourcesUsed": len(sources),
            "topDocuments": top_documents,
            "keywords": key_terms,
        },
        "sourceRelevance": [
            {
                "fileName": source.display_name,
                "score": source.score,
                "relevanceExplanation": relevance_explanation(source, answer_text),
            }
            for source in sources[:5]
        ],
        "keyTerms": key_terms,
        "suggestedQueries": suggested_queries(answer_text, key_terms),
    }
