"""Resolve citation references back to canonical sources."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import logging
import re

from sourcelens.ids.normalize import file_name_segment, normalize_identifier
from sourcelens.reconcile.models import Source
from sourcelens.reconcile.values import as_mapping, as_number, as_text, coerce_identifier


logger = logging.getLogger(__name__)

_INLINE_CITATION_RE = re.compile(r"\[(.*?(?:\.(?:pdf|docx?|txt))?(?:#page=(\d+))?)\]")
_PAGE_RE = re.compile(r"#page=(\d+)")


@dataclass(frozen=True, slots=True)
class CitationMatch:
    source: Source
    strategy: str


@dataclass(slots=True)
class InlineCitation:
    """A citation reference found in (or attached to) an answer."""

    id: str
    file_name: str
    page: int | None
    index: int
    text: str

    def to_dict(self) -> dict[str, str | int | None]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "page": self.page,
            "index": self.index,
            "text": self.text,
        }


def _has_path_separator(value: str) -> bool:
    return "/" in value or "\\" in value


def _match_pass(
    requested: str,
    raw_request: str,
    sources: Sequence[Source],
    *,
    fold: Callable[[str], str],
    suffix: str,
) -> CitationMatch | None:
    wanted = fold(requested)
    candidates = [(source, fold(normalize_identifier(source.id))) for source in sources]

    for source, candidate_id in candidates:
        if candidate_id == wanted:
            return CitationMatch(source=source, strategy=f"exact{suffix}")

    if _has_path_separator(raw_request):
        wanted_segment = fold(file_name_segment(raw_request))
        if wanted_segment:
            for source in sources:
                segment = fold(file_name_segment(source.file_name))
                if segment and segment == wanted_segment:
                    return CitationMatch(source=source, strategy=f"file-name{suffix}")

    if wanted:
        for source, candidate_id in candidates:
            if candidate_id and (wanted in candidate_id or candidate_id in wanted):
                return CitationMatch(source=source, strategy=f"contains{suffix}")
    return None


def _plus_to_space(value: str) -> str:
    return value.replace("+", " ")


def find_citation_match(sources: Iterable[Source], identifier: object) -> CitationMatch | None:
    """Run the resolution cascade and report which strategy matched."""
    if not isinstance(identifier, str) or not identifier.strip():
        return None
    pool = list(sources)
    requested = normalize_identifier(identifier)

    match = _match_pass(requested, identifier, pool, fold=lambda value: value, suffix="")
    if match is None:
        match = _match_pass(requested, identifier, pool, fold=_plus_to_space, suffix="-plus")
    if match is None:
        logger.info("Citation %r did not match any of %d sources", identifier, len(pool))
    return match


def resolve_citation(sources: Iterable[Source], identifier: object) -> Source | None:
    """Return the source a citation refers to, or ``None`` when nothing matches."""
    match = find_citation_match(sources, identifier)
    return match.source if match is not None else None


def extract_inline_citations(answer_text: object, citations: object = None) -> list[InlineCitation]:
    """Collect ``[file.pdf#page=3]`` style references plus structured citations."""
    found: list[InlineCitation] = []
    if isinstance(answer_text, str):
        for match in _INLINE_CITATION_RE.finditer(answer_text):
            reference = match.group(1)
            file_name = reference
            page: int | None = None
            page_match = _PAGE_RE.search(reference)
            if page_match:
                page = int(page_match.group(1))
                file_name = reference.split("#", 1)[0]
            if not file_name or ("." not in file_name and page is None):
                continue
            index = len(found) + 1
            found.append(
                InlineCitation(
                    id=f"citation-{index}",
                    file_name=file_name,
                    page=page,
                    index=index,
                    text=match.group(0),
                )
            )

    next_index = len(found) + 1
    for position, raw in enumerate(citations if isinstance(citations, list) else []):
        node = as_mapping(raw)
        if node is None:
            continue
        file_name = as_text(node.get("fileName")) or "Document"
        page_number = as_number(node.get("page"))
        page = int(page_number) if page_number is not None else None
        if any(item.file_name == file_name and item.page == page for item in found):
            continue
        index = next_index + position
        page_suffix = f"#page={page}" if page else ""
        found.append(
            InlineCitation(
                id=coerce_identifier(node.get("id")) or f"citation-{index}",
                file_name=file_name,
                page=page,
                index=index,
                text=as_text(node.get("text")) or f"[{file_name}{page_suffix}]",
            )
        )
    return found
