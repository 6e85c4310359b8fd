from __future__ import annotations

import json

from sourcelens.reconcile.merge import (
    DEBUG_SAMPLE_COUNT,
    SourceCollection,
    candidate_identifier,
    reconcile_sources,
)
from sourcelens.reconcile.containers import CandidateNode


def _payload() -> dict[str, object]:
    return {
        "search": {
            "results": [
                {
                    "documentId": "groundx:Report+v2",
                    "fileName": "Report v2.pdf",
                    "score": 0.91,
                    "text": "first excerpt",
                    "suggestedText": "rewritten excerpt",
                },
                {"documentId": "other", "fileName": "Other.docx", "text": "other text"},
            ]
        },
        "searchResults": {
            "sources": [
                {
                    "id": "Report v2",
                    "fileName": "Renamed.pdf",
                    "author": "Legal Team",
                    "score": 0.5,
                    "text": "first excerpt",
                    "excerpts": ["second excerpt"],
                    "metadata": {"region": "EU"},
                }
            ]
        },
    }


def test_sources_sharing_a_normalized_identifier_are_merged() -> None:
    sources = reconcile_sources(_payload())

    assert [source.id for source in sources] == ["Report v2", "other"]
    report = sources[0]
    assert report.excerpts == ["rewritten excerpt", "first excerpt", "second excerpt"]
    assert report.file_name == "Report v2.pdf"
    assert report.score == 0.91
    assert report.author == "Legal Team"
    assert report.metadata == {"region": "EU"}


def test_reconciliation_is_idempotent() -> None:
    payload = _payload()

    first = [source.to_dict() for source in reconcile_sources(payload)]
    second = [source.to_dict() for source in reconcile_sources(payload)]

    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
    assert payload == _payload()


def test_same_document_from_different_containers_collapses() -> None:
    payload = {
        "documents": [{"id": "doc-7", "title": "Lease", "snippets": ["a", "b"]}],
        "citations": {"sources": [{"id": "DOC-7"}, {"id": "doc-7", "snippets": ["b", "c"], "url": "https://x"}]},
    }

    sources = reconcile_sources(payload)

    assert [source.id for source in sources] == ["doc-7", "DOC-7"]
    assert sources[0].snippets == ["a", "b", "c"]
    assert sources[0].url == "https://x"


def test_metadata_is_unioned_with_existing_keys_winning() -> None:
    payload = {
        "results": [
            {"id": "a", "metadata": {"k": 1, "title": "Meta title"}},
            {"id": "a", "metadata": {"k": 2, "extra": True}, "searchData": {"score": 0.4}},
        ]
    }

    source = reconcile_sources(payload)[0]

    assert source.metadata == {"k": 1, "title": "Meta title", "extra": True, "score": 0.4}
    assert source.title == "Meta title"
    assert source.score == 0.4


def test_identifier_priority_and_skipping() -> None:
    def identifier(node: dict[str, object], *, debug_mode: bool = False) -> str | None:
        return candidate_identifier(CandidateNode("results", 4, node), debug_mode=debug_mode)

    assert identifier({"id": "x", "documentId": "y", "chunkId": "z"}) == "x"
    assert identifier({"documentId": 12, "chunkId": "z"}) == "12"
    assert identifier({"chunkId": "z", "chunk": 3}) == "z"
    assert identifier({"chunk": 3}) == "chunk-3"
    assert identifier({"text": "orphan"}) is None
    assert identifier({"text": "orphan"}, debug_mode=True) == "results-4"


def test_nodes_without_identifier_are_skipped_unless_debugging() -> None:
    payload = {"results": [{"text": "orphan one"}, {"text": "orphan two"}]}

    assert reconcile_sources(payload) == []
    debug_sources = reconcile_sources(payload, debug_mode=True)
    assert [source.id for source in debug_sources] == ["results-0", "results-1"]


def test_document_page_chunks_accumulate_into_one_source() -> None:
    payload = {
        "documentId": "doc-9",
        "fileName": "manual.pdf",
        "documentPages": [
            {"pageNumber": 1, "chunks": [{"chunk": 1, "text": "intro", "sectionSummary": "Intro"}]},
            {"pageNumber": 2, "chunks": [{"chunk": 2, "text": "body"}]},
        ],
        "xray": {"fileSummary": "Manual summary", "chunks": [{"id": 1, "text": "intro"}]},
    }

    sources = reconcile_sources(payload)

    assert len(sources) == 1
    manual = sources[0]
    assert manual.excerpts == ["intro", "Intro", "body"]
    assert manual.metadata == {"pageNumbers": [1, 2]}
    assert manual.xray is not None
    assert manual.xray.summary == "Manual summary"


def test_xray_is_merged_without_duplicate_chunks() -> None:
    payload = {
        "results": [
            {"id": "d", "xray": {"chunks": [{"id": 1, "text": "one"}]}},
            {"id": "d", "xray": {"summary": "later", "chunks": [{"id": 1, "text": "dup"}, {"id": 2, "text": "two"}]}},
        ]
    }

    xray = reconcile_sources(payload)[0].xray

    assert xray is not None
    assert xray.summary == "later"
    assert [chunk.text for chunk in xray.chunks] == ["one", "two"]


def test_auxiliary_inputs_are_reconciled_with_the_payload() -> None:
    sources = reconcile_sources(
        {"sources": [{"id": "a", "text": "from payload"}]},
        search_results={"sources": [{"id": "a", "text": "from search"}]},
        document_excerpts=[{"id": "b", "excerpts": ["excerpt"]}],
    )

    assert [source.id for source in sources] == ["b", "a"]
    assert sources[1].excerpts == ["from payload", "from search"]


def test_empty_or_garbage_payloads_give_empty_collections() -> None:
    assert reconcile_sources(None) == []
    assert reconcile_sources({}) == []
    assert reconcile_sources("<html>oops</html>") == []
    assert reconcile_sources({"results": [None, 1, "x", {"id": ""}]}) == []


def test_debug_mode_supplies_samples_for_empty_payloads() -> None:
    samples = reconcile_sources({}, debug_mode=True)

    assert len(samples) == DEBUG_SAMPLE_COUNT
    assert samples[0].id == "debug-source-0"
    assert samples == reconcile_sources({}, debug_mode=True)


def test_collection_lookup_uses_normalized_identifiers() -> None:
    collection = SourceCollection()
    collection.add("groundx:Report+v2", {"text": "a"})
    collection.add("Report%20v2", {"text": "b"})

    assert len(collection) == 1
    assert "Report v2" in collection
    source = collection.get("gx:Report+v2")
    assert source is not None
    assert source.excerpts == ["a", "b"]
    assert collection.add("groundx:", {"text": "empty"}) is None


def test_page_numbers_from_upstream_metadata_are_not_mutated() -> None:
    upstream = {"pageNumbers": [4]}
    payload = {
        "results": [
            {"id": "doc", "metadata": upstream},
            {"id": "doc", "pageNumbers": [4, 5]},
        ]
    }

    source = reconcile_sources(payload)[0]

    assert source.metadata["pageNumbers"] == [4, 5]
    assert upstream == {"pageNumbers": [4]}
