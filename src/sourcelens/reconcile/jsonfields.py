"""Try-parse-else-passthrough handling of JSON encoded inside string fields.

X-Ray payloads nest JSON at three levels: the analysis record itself may be
a JSON string, its ``summary`` may encode an object with summary, keywords
and language, and every chunk's ``text``/``json`` may encode structured data.
Each level is unpacked independently; a fragment that fails to parse keeps
its original string and never affects sibling or parent fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from typing import Any

from sourcelens.reconcile.models import XRayAnalysis, XRayChunk
from sourcelens.reconcile.values import as_list, as_mapping, as_text, coerce_identifier, text_list


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JsonFragment:
    """Outcome of one parse attempt: the parsed object or the untouched input."""

    parsed: bool
    value: Any


def parse_json_fragment(value: object) -> JsonFragment:
    """Parse ``value`` when it is a string that plausibly holds a JSON object."""
    if not isinstance(value, str) or not value.strip().startswith("{"):
        return JsonFragment(parsed=False, value=value)
    try:
        decoded = json.loads(value)
    except (ValueError, RecursionError) as exc:
        logger.debug("Keeping undecodable JSON fragment as text: %s", type(exc).__name__)
        return JsonFragment(parsed=False, value=value)
    if not isinstance(decoded, dict):
        return JsonFragment(parsed=False, value=value)
    return JsonFragment(parsed=True, value=decoded)


def _first_present(mapping: Mapping[str, Any] | None, *keys: str) -> Any:
    if mapping is None:
        return None
    for key in keys:
        value = mapping.get(key)
        if value is not None and value != "":
            return value
    return None


def _content_types(value: object) -> list[str]:
    if isinstance(value, str):
        return [value] if value else []
    return [item for item in as_list(value) if isinstance(item, str) and item]


def _keywords(value: object) -> str | list[str] | None:
    if isinstance(value, str):
        return value if value.strip() else None
    items = text_list(value)
    return items or None


def unpack_chunk(raw: object) -> XRayChunk | None:
    """Build one chunk, lifting summary/data out of JSON-encoded ``text``."""
    node = as_mapping(raw)
    if node is None:
        return None

    chunk_id = node.get("id")
    if chunk_id is None:
        chunk_id = node.get("chunk")
    if coerce_identifier(chunk_id) is None:
        chunk_id = None

    chunk = XRayChunk(
        id=chunk_id,
        content_type=_content_types(node.get("contentType")),
        suggested_text=as_text(node.get("suggestedText")),
        section_summary=as_text(node.get("sectionSummary")),
        narrative=text_list(node.get("narrative")),
        page_numbers=as_list(node.get("pageNumbers")) or None,
        bounding_boxes=as_list(node.get("boundingBoxes")) or None,
    )

    raw_json = node.get("json")
    if raw_json is not None:
        chunk.json = parse_json_fragment(raw_json).value

    text = node.get("text")
    if isinstance(text, str):
        chunk.text = text
        fragment = parse_json_fragment(text)
        if fragment.parsed:
            chunk.parsed_data = fragment.value
            chunk.original_text = text
            if chunk.section_summary is None:
                chunk.section_summary = as_text(_first_present(fragment.value, "summary", "Summary"))
            if chunk.json is None:
                chunk.json = _first_present(fragment.value, "data", "Data")
    return chunk


def _raw_chunks(node: Mapping[str, Any]) -> list[Any]:
    chunks = as_list(node.get("chunks"))
    if chunks:
        return chunks
    flattened: list[Any] = []
    for page in as_list(node.get("documentPages")):
        page_node = as_mapping(page)
        if page_node is not None:
            flattened.extend(as_list(page_node.get("chunks")))
    return flattened


def unpack_xray(raw: object) -> XRayAnalysis | None:
    """Build an X-Ray analysis from a mapping or a JSON-encoded string."""
    top = parse_json_fragment(raw)
    if not top.parsed and isinstance(top.value, str):
        text = as_text(top.value)
        return XRayAnalysis(summary=text) if text is not None else None
    node = as_mapping(top.value)
    if node is None:
        return None

    analysis = XRayAnalysis(
        keywords=_keywords(_first_present(node, "keywords", "fileKeywords")),
        language=as_text(node.get("language")),
    )

    summary_raw = _first_present(node, "summary", "fileSummary")
    summary = parse_json_fragment(summary_raw)
    if summary.parsed:
        analysis.summary_data = summary.value
        analysis.summary = as_text(_first_present(summary.value, "summary", "Summary")) or summary_raw
        if analysis.keywords is None:
            analysis.keywords = _keywords(_first_present(summary.value, "keywords", "Keywords"))
        if analysis.language is None:
            analysis.language = as_text(_first_present(summary.value, "language", "Language"))
    else:
        analysis.summary = as_text(summary.value)

    for raw_chunk in _raw_chunks(node):
        chunk = unpack_chunk(raw_chunk)
        if chunk is not None:
            analysis.chunks.append(chunk)
    return analysis
