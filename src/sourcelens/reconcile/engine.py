"""Facade tying reconciliation, lookup and derivation together for one answer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from sourcelens.insights.relevance import relevance_explanation
from sourcelens.insights.stats import DocumentStats, document_stats, search_insights
from sourcelens.query.pipeline import SourcePage, SourceQuery, run_query
from sourcelens.reconcile.citations import CitationMatch, InlineCitation, extract_inline_citations, find_citation_match
from sourcelens.reconcile.config import ReconcileSettings
from sourcelens.reconcile.merge import reconcile_sources
from sourcelens.reconcile.models import Source
from sourcelens.reconcile.values import as_mapping


@dataclass(slots=True)
class ReconciledAnswer:
    """Canonical sources of one answer payload plus on-demand lookups."""

    payload: Any
    sources: list[Source]
    settings: ReconcileSettings

    def query(self, query: SourceQuery | None = None) -> SourcePage:
        resolved = query or SourceQuery()
        if resolved.max_displayed is None and self.settings.max_sources_displayed is not None:
            resolved = replace(resolved, max_displayed=self.settings.max_sources_displayed)
        return run_query(self.sources, resolved)

    def match_citation(self, identifier: object) -> CitationMatch | None:
        return find_citation_match(self.sources, identifier)

    def resolve_citation(self, identifier: object) -> Source | None:
        match = self.match_citation(identifier)
        return match.source if match is not None else None

    def relevance_explanation(self, source: Source | None, answer_text: object) -> str:
        return relevance_explanation(source, answer_text)

    def inline_citations(self, answer_text: object) -> list[InlineCitation]:
        root = as_mapping(self.payload)
        citations = root.get("citations") if root is not None else None
        return extract_inline_citations(answer_text, citations)

    def insights(self, answer_text: str = "") -> dict[str, Any] | None:
        return search_insights(self.payload, self.sources, answer_text)

    def stats(self) -> DocumentStats | None:
        return document_stats(self.sources)


class SourceReconciler:
    """Entry point used by presentation code on every render."""

    def __init__(self, settings: ReconcileSettings | None = None) -> None:
        self._settings = settings or ReconcileSettings()

    @classmethod
    def from_env(cls) -> "SourceReconciler":
        return cls(ReconcileSettings.from_env())

    @property
    def settings(self) -> ReconcileSettings:
        return self._settings

    def reconcile(
        self,
        payload: Any,
        search_results: Any = None,
        document_excerpts: Any = None,
    ) -> ReconciledAnswer:
        sources = reconcile_sources(
            payload,
            search_results,
            document_excerpts,
            debug_mode=self._settings.debug_mode,
        )
        return ReconciledAnswer(payload=payload, sources=sources, settings=self._settings)
