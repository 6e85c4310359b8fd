"""Reconciliation of heterogeneous retrieval payloads into canonical sources."""

from .citations import CitationMatch, InlineCitation, extract_inline_citations, find_citation_match, resolve_citation
from .config import ReconcileSettings
from .engine import ReconciledAnswer, SourceReconciler
from .merge import SourceCollection, reconcile_sources
from .models import Source, XRayAnalysis, XRayChunk

__all__ = [
    "CitationMatch",
    "InlineCitation",
    "ReconcileSettings",
    "ReconciledAnswer",
    "Source",
    "SourceCollection",
    "SourceReconciler",
    "XRayAnalysis",
    "XRayChunk",
    "extract_inline_citations",
    "find_citation_match",
    "reconcile_sources",
    "resolve_citation",
]
