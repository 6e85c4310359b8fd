"""Canonical source reconciliation for document-retrieval answers."""

from sourcelens.reconcile import ReconcileSettings, Source, SourceReconciler, reconcile_sources, resolve_citation
from sourcelens.insights import relevance_explanation
from sourcelens.query import SourceQuery, run_query

__all__ = [
    "ReconcileSettings",
    "Source",
    "SourceQuery",
    "SourceReconciler",
    "reconcile_sources",
    "relevance_explanation",
    "resolve_citation",
    "run_query",
]
