"""Build canonical sources from raw nodes and merge duplicates in order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import logging
from typing import Any

from sourcelens.ids.normalize import normalize_identifier
from sourcelens.reconcile.containers import CandidateNode, iter_candidate_nodes
from sourcelens.reconcile.excerpts import extract_excerpts
from sourcelens.reconcile.jsonfields import unpack_xray
from sourcelens.reconcile.models import Source, XRayAnalysis
from sourcelens.reconcile.values import (
    as_list,
    as_mapping,
    as_number,
    coerce_identifier,
    first_number,
    first_text,
    text_list,
)


logger = logging.getLogger(__name__)

_SCORE_KEYS = ("score", "relevanceScore", "confidenceScore", "rankingScore")
_SCALAR_FIELDS = ("file_name", "title", "score", "author", "date_published", "url", "file_size", "type")
_LIST_FIELDS = ("excerpts", "snippets", "narrative", "tags", "highlights")
DEBUG_SAMPLE_COUNT = 5


def candidate_identifier(candidate: CandidateNode, *, debug_mode: bool = False) -> str | None:
    """Pick the raw identifier of a node: id, document id, chunk id, chunk number."""
    node = candidate.node
    for key in ("id", "documentId", "document_id", "fileId", "chunkId"):
        identifier = coerce_identifier(node.get(key))
        if identifier is not None:
            return identifier

    chunk_number = as_number(node.get("chunk"))
    if chunk_number is not None and chunk_number.is_integer():
        return f"chunk-{int(chunk_number)}"
    if debug_mode:
        return f"{candidate.container}-{candidate.position}"
    return None


def _best_score(node: Mapping[str, Any]) -> float | None:
    for key in _SCORE_KEYS:
        score = as_number(node.get(key))
        if score is not None and score > 0:
            return score
    for key in ("metadata", "searchData"):
        nested = as_mapping(node.get(key))
        score = as_number(nested.get("score")) if nested is not None else None
        if score is not None and score > 0:
            return score
    return None


def _file_size(node: Mapping[str, Any]) -> int | None:
    size = first_number(node, "fileSize", "size")
    if size is None or size < 0:
        return None
    return int(size)


def _metadata(node: Mapping[str, Any]) -> dict[str, Any]:
    metadata: dict[str, Any] = {}
    for key in ("metadata", "searchData"):
        nested = as_mapping(node.get(key))
        if nested is None:
            continue
        for name, value in nested.items():
            metadata.setdefault(str(name), value)
    page_numbers = as_list(node.get("pageNumbers"))
    if page_numbers:
        metadata.setdefault("pageNumbers", list(page_numbers))
    return metadata


def build_source(identifier: str, node: Mapping[str, Any]) -> Source:
    """Populate a new source directly from one raw node."""
    metadata = _metadata(node)
    xray_raw = node.get("xray")
    return Source(
        id=identifier,
        file_name=first_text(node, "fileName", "file_name", "name"),
        title=first_text(node, "title") or first_text(metadata, "title"),
        score=_best_score(node),
        excerpts=extract_excerpts(node),
        metadata=metadata,
        author=first_text(node, "author"),
        date_published=first_text(node, "datePublished", "date", "published"),
        url=first_text(node, "url", "sourceUrl", "link"),
        file_size=_file_size(node),
        type=first_text(node, "type", "documentType", "fileType"),
        snippets=text_list(node.get("snippets")),
        narrative=text_list(node.get("narrative")),
        tags=text_list(node.get("tags")),
        highlights=text_list(node.get("highlights")),
        xray=unpack_xray(xray_raw) if xray_raw is not None else None,
    )


def _union(existing: list[str], incoming: Iterable[str]) -> None:
    seen = set(existing)
    for value in incoming:
        if value not in seen:
            seen.add(value)
            existing.append(value)


def _merge_xray(existing: XRayAnalysis, incoming: XRayAnalysis) -> None:
    for name in ("summary", "keywords", "language", "summary_data"):
        if getattr(existing, name) is None and getattr(incoming, name) is not None:
            setattr(existing, name, getattr(incoming, name))
    known_ids = {chunk.id for chunk in existing.chunks if chunk.id is not None}
    for chunk in incoming.chunks:
        if chunk.id is not None and chunk.id in known_ids:
            continue
        existing.chunks.append(chunk)
        if chunk.id is not None:
            known_ids.add(chunk.id)


def _merge_page_numbers(existing: dict[str, Any], incoming: Mapping[str, Any]) -> None:
    # pages accumulate across the chunks of one document
    current = existing.get("pageNumbers")
    extra = incoming.get("pageNumbers")
    if isinstance(current, list) and isinstance(extra, list):
        existing["pageNumbers"] = current + [page for page in extra if page not in current]


def merge_source(existing: Source, incoming: Source) -> None:
    """Fold ``incoming`` into ``existing``: lists union, scalars first-write-wins."""
    for name in _LIST_FIELDS:
        _union(getattr(existing, name), getattr(incoming, name))
    for name in _SCALAR_FIELDS:
        if getattr(existing, name) is None and getattr(incoming, name) is not None:
            setattr(existing, name, getattr(incoming, name))
    _merge_page_numbers(existing.metadata, incoming.metadata)
    for key, value in incoming.metadata.items():
        existing.metadata.setdefault(key, value)
    if existing.xray is None:
        existing.xray = incoming.xray
    elif incoming.xray is not None:
        _merge_xray(existing.xray, incoming.xray)


class SourceCollection:
    """Insertion-ordered sources keyed by normalized identifier."""

    def __init__(self) -> None:
        self._sources: list[Source] = []
        self._positions: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[Source]:
        return iter(self._sources)

    def __contains__(self, identifier: object) -> bool:
        return normalize_identifier(identifier) in self._positions

    def get(self, identifier: str) -> Source | None:
        position = self._positions.get(normalize_identifier(identifier))
        return self._sources[position] if position is not None else None

    def add(self, identifier: str, node: Mapping[str, Any]) -> Source | None:
        """Insert a node under ``identifier`` or merge it into the existing source."""
        normalized = normalize_identifier(identifier)
        if not normalized:
            logger.debug("Skipping node whose identifier normalizes to empty: %r", identifier)
            return None

        incoming = build_source(normalized, node)
        position = self._positions.get(normalized)
        if position is None:
            self._positions[normalized] = len(self._sources)
            self._sources.append(incoming)
            return incoming

        existing = self._sources[position]
        merge_source(existing, incoming)
        logger.debug("Merged duplicate source %s", normalized)
        return existing

    def to_list(self) -> list[Source]:
        return list(self._sources)


def debug_sample_sources() -> list[Source]:
    """Deterministic placeholder sources shown when debugging an empty payload."""
    return [
        Source(
            id=f"debug-source-{index}",
            file_name=f"Debug Document {index + 1}.pdf",
            title=f"Sample Debug Document {index + 1}",
            author="Debug Author",
            date_published="2024-01-01",
            type="pdf",
            score=round(0.7 + index * 0.05, 2),
            excerpts=[
                f"This is a debug excerpt {index + 1} for testing the sources view component.",
                f"Another debug excerpt from document {index + 1} with additional context.",
            ],
        )
        for index in range(DEBUG_SAMPLE_COUNT)
    ]


def reconcile_sources(
    payload: object,
    search_results: object = None,
    document_excerpts: object = None,
    *,
    debug_mode: bool = False,
) -> list[Source]:
    """Turn a raw answer payload into the canonical, ordered source list."""
    collection = SourceCollection()
    skipped = 0
    for candidate in iter_candidate_nodes(
        payload,
        search_results=search_results,
        document_excerpt_items=document_excerpts,
    ):
        identifier = candidate_identifier(candidate, debug_mode=debug_mode)
        if identifier is None:
            skipped += 1
            continue
        collection.add(identifier, candidate.node)

    if skipped:
        logger.debug("Skipped %d source nodes without an identifier", skipped)
    if debug_mode and not len(collection):
        logger.debug("Payload produced no sources; using debug samples")
        return debug_sample_sources()
    return collection.to_list()
