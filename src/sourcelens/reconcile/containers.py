"""Enumerate raw source nodes from every known payload container.

Each recognized payload shape has one mapping function below. A container
that is absent or has the wrong shape contributes nothing.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from sourcelens.reconcile.values import as_list, as_mapping, as_text


SEARCH_TEXT_ID = "search-text"


@dataclass(frozen=True, slots=True)
class CandidateNode:
    """A raw source node and where it was found."""

    container: str
    position: int
    node: Mapping[str, Any]


def _mapped(container: str, items: list[Any]) -> Iterator[CandidateNode]:
    for position, item in enumerate(items):
        node = as_mapping(item)
        if node is not None:
            yield CandidateNode(container=container, position=position, node=node)


def _one_or_many(value: object) -> list[Any]:
    if as_mapping(value) is not None:
        return [value]
    return as_list(value)


def combined_search_text(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    search = as_mapping(payload.get("search"))
    text = as_text(search.get("text")) if search is not None else None
    if text is None:
        return
    node = {"id": SEARCH_TEXT_ID, "title": "Combined search results", "text": text}
    yield CandidateNode(container="search-text", position=0, node=node)


def result_arrays(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    yield from _mapped("results", as_list(payload.get("results")))
    search = as_mapping(payload.get("search"))
    if search is not None:
        yield from _mapped("search-results", as_list(search.get("results")))


def document_excerpts(payload: Mapping[str, Any], auxiliary: object = None) -> Iterator[CandidateNode]:
    yield from _mapped("document-excerpts", as_list(payload.get("documentExcerpts")))
    yield from _mapped("document-excerpts-arg", as_list(auxiliary))


def search_result_sources(payload: Mapping[str, Any], auxiliary: object = None) -> Iterator[CandidateNode]:
    search_results = as_mapping(payload.get("searchResults"))
    if search_results is not None:
        yield from _mapped("search-result-sources", as_list(search_results.get("sources")))
    yield from _mapped("sources", _one_or_many(payload.get("sources")))

    if isinstance(auxiliary, list):
        yield from _mapped("search-results-arg", auxiliary)
        return
    extra = as_mapping(auxiliary)
    if extra is not None:
        yield from _mapped("search-results-arg", as_list(extra.get("sources")))
        yield from _mapped("search-results-arg-results", as_list(extra.get("results")))


def documents(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    yield from _mapped("documents", _one_or_many(payload.get("documents")))


def citations(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    raw = payload.get("citations")
    grouped = as_mapping(raw)
    if grouped is not None:
        yield from _mapped("citation-sources", as_list(grouped.get("sources")))
        yield from _mapped("citation-documents", as_list(grouped.get("documents")))
        return
    for candidate in _mapped("citations", as_list(raw)):
        if as_text(candidate.node.get("fileName")) is None:
            continue
        yield candidate


def document_pages(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    document_id = payload.get("documentId")
    file_name = payload.get("fileName")
    position = 0
    for page in as_list(payload.get("documentPages")):
        page_node = as_mapping(page)
        if page_node is None:
            continue
        for raw_chunk in as_list(page_node.get("chunks")):
            chunk = as_mapping(raw_chunk)
            if chunk is None:
                continue
            node: dict[str, Any] = dict(chunk)
            if document_id is not None:
                node.setdefault("documentId", document_id)
            if file_name is not None:
                node.setdefault("fileName", file_name)
            if page_node.get("pageNumber") is not None and "pageNumbers" not in node:
                node["pageNumbers"] = [page_node.get("pageNumber")]
            yield CandidateNode(container="document-pages", position=position, node=node)
            position += 1


def xray_record(payload: Mapping[str, Any]) -> Iterator[CandidateNode]:
    xray = payload.get("xray")
    if xray is None or xray == "":
        return
    node: dict[str, Any] = {"xray": xray}
    for key in ("documentId", "fileName", "title"):
        if payload.get(key) is not None:
            node[key] = payload[key]
    yield CandidateNode(container="xray", position=0, node=node)


def iter_candidate_nodes(
    payload: object,
    *,
    search_results: object = None,
    document_excerpt_items: object = None,
) -> Iterator[CandidateNode]:
    """Yield raw nodes from all recognized containers in a fixed order."""
    root = as_mapping(payload)
    if root is None:
        root = {}
    yield from combined_search_text(root)
    yield from result_arrays(root)
    yield from document_excerpts(root, document_excerpt_items)
    yield from search_result_sources(root, search_results)
    yield from documents(root)
    yield from citations(root)
    yield from document_pages(root)
    yield from xray_record(root)
