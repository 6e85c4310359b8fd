"""Confidence scoring and templated relevance explanations for sources."""

from __future__ import annotations

import math

from sourcelens.insights.formatting import format_date
from sourcelens.insights.keywords import extract_keywords
from sourcelens.reconcile.models import Source
from sourcelens.reconcile.values import as_number


DEFAULT_CONFIDENCE_SCORE = 0.6
HIGH_CONFIDENCE_THRESHOLD = 80
LOW_CONFIDENCE_THRESHOLD = 50
GENERIC_EXPLANATION = "This document contains information relevant to your query."

_NAME_KEYWORD_TYPES = (
    ("agreement", "agreement"),
    ("contract", "contract"),
    ("license", "license"),
)
_NAME_MARKER_TYPES = (
    ((".pdf",), "PDF document"),
    ((".docx", ".doc"), "Word document"),
    ((".xlsx", ".xls"), "spreadsheet"),
    (("http",), "web page"),
)


def source_score(source: Source) -> float | None:
    """Score of the record, falling back to ``metadata['score']``."""
    if source.score is not None:
        return source.score
    return as_number(source.metadata.get("score"))


def confidence_percent(source: Source) -> int:
    score = source_score(source)
    bounded = min(1.0, score if score is not None else DEFAULT_CONFIDENCE_SCORE)
    return math.floor(bounded * 100 + 0.5)


def confidence_phrase(percent: int) -> str:
    if percent > HIGH_CONFIDENCE_THRESHOLD:
        return "high confidence"
    if percent < LOW_CONFIDENCE_THRESHOLD:
        return "some relevance"
    return "medium confidence"


def describe_confidence(source: Source) -> str:
    """E.g. ``"high confidence (92%)"``."""
    percent = confidence_percent(source)
    return f"{confidence_phrase(percent)} ({percent}%)"


def _clean_file_name(file_name: str | None) -> str:
    return (file_name or "").replace("+", " ").replace("%5B", "[").replace("%5D", "]")


def infer_document_type(source: Source) -> str:
    if source.type:
        return source.type.lower()

    lowered = _clean_file_name(source.file_name).lower()
    for keyword, document_type in _NAME_KEYWORD_TYPES:
        if keyword in lowered:
            return document_type
    for markers, document_type in _NAME_MARKER_TYPES:
        if any(marker in lowered for marker in markers):
            return document_type
    if source.url and source.url.lower().startswith("http"):
        return "web page"
    return "document"


def relevance_explanation(source: Source | None, answer_text: object) -> str:
    """One-paragraph explanation of why ``source`` supports the answer."""
    if source is None or not isinstance(answer_text, str) or not answer_text.strip():
        return GENERIC_EXPLANATION

    keywords = extract_keywords(answer_text)
    topic = " and ".join(keywords[:2]) if keywords else "topics relevant to your query"

    explanation = (
        f"This {infer_document_type(source)} provides information about {topic}. "
        f"The system has {describe_confidence(source)} that this source contributes "
        "valuable information to the answer."
    )
    if source.date_published:
        explanation += f" This information was published on {format_date(source.date_published)}."
    if source.author:
        explanation += f" Author: {source.author}."
    return explanation
