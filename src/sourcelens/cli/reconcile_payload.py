"""CLI entrypoint that reconciles a saved answer payload into canonical sources."""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from sourcelens.cli.common import PayloadFileError, configure_logging, load_json_file, print_json
from sourcelens.query.pipeline import SORT_OPTIONS, SourceQuery
from sourcelens.reconcile.config import ReconcileSettings
from sourcelens.reconcile.engine import SourceReconciler


logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile a retrieval answer payload into canonical sources")
    parser.add_argument("--payload", required=True, help="Answer payload JSON file")
    parser.add_argument("--search-results", default=None, help="Optional separate search results JSON file")
    parser.add_argument("--document-excerpts", default=None, help="Optional document excerpts JSON file")
    parser.add_argument("--query", default=None, help="Free-text filter over names, authors and excerpts")
    parser.add_argument("--sort", choices=SORT_OPTIONS, default="relevance", help="Sort order for the source list")
    parser.add_argument("--page", type=int, default=1, help="1-indexed result page")
    parser.add_argument("--min-score", type=float, default=0.0, help="Minimum source score")
    parser.add_argument("--type", dest="types", action="append", default=[], help="Allowed document type (repeatable)")
    parser.add_argument("--author", dest="authors", action="append", default=[], help="Allowed author (repeatable)")
    parser.add_argument("--answer-text", default=None, help="Answer text used for relevance explanations")
    parser.add_argument("--debug", action="store_true", help="Enable synthetic identifiers and debug samples")
    args = parser.parse_args(argv)

    try:
        settings = ReconcileSettings.from_env()
    except ValueError as error:
        print_json({"error": str(error)})
        return 2
    if args.debug:
        settings = replace(settings, debug_mode=True)
    configure_logging(settings)

    try:
        payload = load_json_file(args.payload)
        search_results = load_json_file(args.search_results)
        document_excerpts = load_json_file(args.document_excerpts)
    except PayloadFileError as error:
        logger.error("Cannot load input: %s", error)
        print_json({"error": error.message, "path": error.path})
        return 2

    answer = SourceReconciler(settings).reconcile(payload, search_results, document_excerpts)
    page = answer.query(
        SourceQuery(
            text=args.query,
            min_score=args.min_score,
            document_types=args.types,
            authors=args.authors,
            sort=args.sort,
            page=args.page,
        )
    )

    result: dict[str, Any] = {
        "query": args.query,
        "sort": args.sort,
        "totalSources": len(answer.sources),
        "page": page.to_dict(),
    }
    if args.answer_text is not None:
        result["relevance"] = {
            source.id: answer.relevance_explanation(source, args.answer_text) for source in page.items
        }
        result["citations"] = [citation.to_dict() for citation in answer.inline_citations(args.answer_text)]
    stats = answer.stats()
    result["stats"] = stats.to_dict() if stats is not None else None
    print_json(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
