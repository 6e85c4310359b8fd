"""Display pipeline over reconciled sources."""

from .pipeline import PAGE_SIZE, SourcePage, SourceQuery, run_query

__all__ = [
    "PAGE_SIZE",
    "SourcePage",
    "SourceQuery",
    "run_query",
]
