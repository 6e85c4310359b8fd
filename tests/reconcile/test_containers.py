from __future__ import annotations

from sourcelens.reconcile.containers import SEARCH_TEXT_ID, iter_candidate_nodes


def _containers(payload: object, **kwargs: object) -> list[str]:
    return [candidate.container for candidate in iter_candidate_nodes(payload, **kwargs)]


def test_every_known_container_is_enumerated_in_fixed_order() -> None:
    payload = {
        "xray": {"summary": "x"},
        "documentId": "doc-x",
        "documentPages": [{"pageNumber": 1, "chunks": [{"chunk": 1, "text": "page text"}]}],
        "citations": {"sources": [{"id": "c1"}], "documents": [{"id": "c2"}]},
        "documents": {"id": "d1"},
        "sources": [{"id": "s1"}],
        "searchResults": {"sources": [{"id": "sr1"}]},
        "documentExcerpts": [{"id": "e1"}],
        "results": [{"id": "r1"}],
        "search": {"text": "combined", "results": [{"id": "r2"}]},
        "unrelated": [{"id": "ignored"}],
    }

    assert _containers(payload, search_results={"sources": [{"id": "a1"}]}, document_excerpt_items=[{"id": "a2"}]) == [
        "search-text",
        "results",
        "search-results",
        "document-excerpts",
        "document-excerpts-arg",
        "search-result-sources",
        "sources",
        "search-results-arg",
        "documents",
        "citation-sources",
        "citation-documents",
        "document-pages",
        "xray",
    ]


def test_combined_search_text_becomes_a_single_node() -> None:
    candidates = list(iter_candidate_nodes({"search": {"text": "all the text"}}))

    assert len(candidates) == 1
    assert candidates[0].node["id"] == SEARCH_TEXT_ID
    assert candidates[0].node["text"] == "all the text"


def test_document_page_chunks_inherit_document_identity() -> None:
    payload = {
        "documentId": "doc-1",
        "fileName": "lease.pdf",
        "documentPages": [
            {"pageNumber": 3, "chunks": [{"chunk": 7, "text": "clause"}, "garbage"]},
            "not a page",
        ],
    }

    candidates = list(iter_candidate_nodes(payload))

    assert len(candidates) == 1
    node = candidates[0].node
    assert node["documentId"] == "doc-1"
    assert node["fileName"] == "lease.pdf"
    assert node["pageNumbers"] == [3]
    assert payload["documentPages"][0]["chunks"][0] == {"chunk": 7, "text": "clause"}


def test_citation_lists_require_a_file_name() -> None:
    payload = {"citations": [{"id": "c1", "fileName": "a.pdf"}, {"id": "c2"}]}

    candidates = list(iter_candidate_nodes(payload))

    assert [candidate.node["id"] for candidate in candidates] == ["c1"]


def test_auxiliary_search_results_may_be_a_plain_list() -> None:
    assert _containers({}, search_results=[{"id": "a"}, "junk", {"id": "b"}]) == [
        "search-results-arg",
        "search-results-arg",
    ]


def test_garbage_payloads_yield_no_nodes() -> None:
    assert _containers(None) == []
    assert _containers("just a string") == []
    assert _containers([1, 2, 3]) == []
    assert _containers({"results": "nope", "sources": 5, "search": []}) == []
