from __future__ import annotations

import json

from sourcelens.reconcile.jsonfields import parse_json_fragment, unpack_chunk, unpack_xray
from sourcelens.reconcile.merge import reconcile_sources


def test_fragment_parses_object_strings_only() -> None:
    parsed = parse_json_fragment('{"a": 1}')
    assert parsed.parsed is True
    assert parsed.value == {"a": 1}

    array = parse_json_fragment("[1, 2]")
    assert array.parsed is False
    assert array.value == "[1, 2]"

    broken = parse_json_fragment("{not json")
    assert broken.parsed is False
    assert broken.value == "{not json"

    assert parse_json_fragment(None).value is None


def test_chunk_text_with_json_summary_is_lifted() -> None:
    chunk = unpack_chunk({"id": 1, "text": '{"summary":"S1"}'})

    assert chunk is not None
    assert chunk.section_summary == "S1"
    assert chunk.original_text == '{"summary":"S1"}'
    assert chunk.parsed_data == {"summary": "S1"}


def test_chunk_plain_prose_is_left_alone() -> None:
    chunk = unpack_chunk({"id": 2, "text": "Plain prose about the lease."})

    assert chunk is not None
    assert chunk.parsed_data is None
    assert chunk.original_text is None
    assert chunk.text == "Plain prose about the lease."


def test_upstream_section_summary_and_json_win_over_parsed_values() -> None:
    chunk = unpack_chunk(
        {
            "id": 3,
            "sectionSummary": "upstream",
            "json": '{"rows": [1]}',
            "text": json.dumps({"Summary": "parsed", "Data": {"rows": [2]}}),
        }
    )

    assert chunk is not None
    assert chunk.section_summary == "upstream"
    assert chunk.json == {"rows": [1]}


def test_capitalized_keys_are_accepted() -> None:
    chunk = unpack_chunk({"chunk": 4, "text": json.dumps({"Summary": "Cap", "Data": [1, 2]})})

    assert chunk is not None
    assert chunk.id == 4
    assert chunk.section_summary == "Cap"
    assert chunk.json == [1, 2]


def test_malformed_chunk_json_field_stays_a_string() -> None:
    chunk = unpack_chunk({"id": 5, "json": "{broken", "text": '{"summary": "ok"}'})

    assert chunk is not None
    assert chunk.json == "{broken"
    assert chunk.section_summary == "ok"


def test_xray_string_payload_with_nested_summary_is_unpacked() -> None:
    raw = json.dumps(
        {
            "summary": json.dumps({"summary": "Doc summary", "keywords": "lease, rent", "language": "en"}),
            "chunks": [
                {"id": 1, "contentType": ["table"], "text": '{"summary":"Table"}'},
                {"id": 2, "contentType": "text", "text": "{oops"},
            ],
        }
    )

    analysis = unpack_xray(raw)

    assert analysis is not None
    assert analysis.summary == "Doc summary"
    assert analysis.keywords == "lease, rent"
    assert analysis.language == "en"
    assert analysis.summary_data == {"summary": "Doc summary", "keywords": "lease, rent", "language": "en"}
    assert [chunk.section_summary for chunk in analysis.chunks] == ["Table", None]
    assert analysis.chunks[1].text == "{oops"
    assert analysis.chunks[1].content_type == ["text"]


def test_xray_top_level_fields_beat_summary_fields() -> None:
    analysis = unpack_xray(
        {
            "fileSummary": '{"summary": "inner", "keywords": "inner-kw"}',
            "fileKeywords": "outer-kw",
        }
    )

    assert analysis is not None
    assert analysis.summary == "inner"
    assert analysis.keywords == "outer-kw"


def test_xray_chunks_flatten_document_pages() -> None:
    analysis = unpack_xray(
        {
            "documentPages": [
                {"pageNumber": 1, "chunks": [{"chunk": 1, "text": "a"}]},
                {"pageNumber": 2, "chunks": [{"chunk": 2, "text": "b"}]},
            ]
        }
    )

    assert analysis is not None
    assert [chunk.id for chunk in analysis.chunks] == [1, 2]


def test_xray_unparseable_string_becomes_summary_text() -> None:
    analysis = unpack_xray("{definitely not json")

    assert analysis is not None
    assert analysis.summary == "{definitely not json"
    assert analysis.chunks == []


def test_xray_rejects_unusable_shapes() -> None:
    assert unpack_xray(None) is None
    assert unpack_xray(12) is None
    assert unpack_xray("   ") is None


def _deeply_nested(depth: int = 100_000, *, closed: bool = True) -> str:
    return '{"a":' + "[" * depth + ("]" * depth + "}" if closed else "")


def test_deeply_nested_fragments_are_kept_as_text() -> None:
    for raw in (_deeply_nested(), _deeply_nested(closed=False)):
        fragment = parse_json_fragment(raw)
        assert fragment.parsed is False
        assert fragment.value == raw


def test_deeply_nested_chunk_fields_do_not_break_unpacking() -> None:
    deep = _deeply_nested()

    chunk = unpack_chunk({"id": 1, "text": deep, "json": deep, "sectionSummary": "kept"})

    assert chunk is not None
    assert chunk.text == deep
    assert chunk.parsed_data is None
    assert chunk.original_text is None
    assert chunk.json == deep
    assert chunk.section_summary == "kept"


def test_deeply_nested_xray_levels_do_not_break_unpacking() -> None:
    deep = _deeply_nested()

    top_level = unpack_xray(deep)
    assert top_level is not None
    assert top_level.summary == deep
    assert top_level.chunks == []

    nested_summary = unpack_xray({"summary": deep, "language": "en", "chunks": [{"id": 2, "text": "fine"}]})
    assert nested_summary is not None
    assert nested_summary.summary == deep
    assert nested_summary.summary_data is None
    assert nested_summary.language == "en"
    assert [chunk.text for chunk in nested_summary.chunks] == ["fine"]


def test_reconciliation_survives_deeply_nested_fragments() -> None:
    deep = _deeply_nested()
    payload = {
        "sources": [
            {"id": "doc", "xray": {"summary": deep, "chunks": [{"id": 1, "text": deep, "json": deep}]}},
            {"id": "raw", "xray": deep},
            {"id": "plain", "text": "still here"},
        ]
    }

    sources = reconcile_sources(payload)

    assert [source.id for source in sources] == ["doc", "raw", "plain"]
    doc_xray = sources[0].xray
    assert doc_xray is not None
    assert doc_xray.summary == deep
    assert doc_xray.chunks[0].text == deep
    assert doc_xray.chunks[0].parsed_data is None
    assert sources[1].xray is not None
    assert sources[1].xray.summary == deep
    assert sources[2].excerpts == ["still here"]
