"""Collect the textual evidence attached to one raw source node."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sourcelens.reconcile.values import as_mapping, as_text, text_list


GENERIC_EXCERPT_LIMIT = 300
_ELLIPSIS = "..."


def _truncate(text: str) -> str:
    if len(text) <= GENERIC_EXCERPT_LIMIT:
        return text
    return text[:GENERIC_EXCERPT_LIMIT] + _ELLIPSIS


def _nested_summaries(node: Mapping[str, Any]) -> list[str]:
    summaries: list[str] = []
    for key in ("metadata", "searchData"):
        nested = as_mapping(node.get(key))
        if nested is None:
            continue
        summary = as_text(nested.get("summary"))
        if summary is not None:
            summaries.append(summary)
    return summaries


def extract_excerpts(node: object) -> list[str]:
    """Return the ordered, de-duplicated excerpts of a raw source node.

    Fields are probed from the most specific (text rewritten for retrieval)
    to the most generic (``content``/``textContent``); the generic ones are
    cut to ``GENERIC_EXCERPT_LIMIT`` characters.
    """
    mapping = as_mapping(node)
    if mapping is None:
        return []

    candidates: list[str] = []
    for key in ("suggestedText", "text", "sectionSummary"):
        text = as_text(mapping.get(key))
        if text is not None:
            candidates.append(text)
    candidates.extend(_nested_summaries(mapping))
    file_summary = as_text(mapping.get("fileSummary"))
    if file_summary is not None:
        candidates.append(file_summary)
    for key in ("excerpts", "snippets", "narrative"):
        candidates.extend(text_list(mapping.get(key)))
    for key in ("content", "textContent"):
        text = as_text(mapping.get(key))
        if text is not None:
            candidates.append(_truncate(text))

    excerpts: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if candidate in seen:
            continue
        seen.add(candidate)
        excerpts.append(candidate)
    return excerpts
