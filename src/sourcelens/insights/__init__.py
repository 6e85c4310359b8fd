"""Relevance explanations and analytics derived from reconciled sources."""

from .keywords import extract_keywords
from .relevance import confidence_percent, describe_confidence, infer_document_type, relevance_explanation
from .stats import DocumentStats, document_stats, search_insights

__all__ = [
    "DocumentStats",
    "confidence_percent",
    "describe_confidence",
    "document_stats",
    "extract_keywords",
    "infer_document_type",
    "relevance_explanation",
    "search_insights",
]
