"""CLI entrypoint that resolves one citation reference against a payload."""

from __future__ import annotations

import argparse

from dotenv import load_dotenv

load_dotenv()

from sourcelens.cli.common import PayloadFileError, configure_logging, load_json_file, print_json
from sourcelens.reconcile.config import ReconcileSettings
from sourcelens.reconcile.engine import SourceReconciler


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve a citation identifier to its canonical source")
    parser.add_argument("--payload", required=True, help="Answer payload JSON file")
    parser.add_argument("--citation", required=True, help="Citation identifier as shown in the answer")
    parser.add_argument("--answer-text", default=None, help="Answer text used for the relevance explanation")
    args = parser.parse_args(argv)

    try:
        settings = ReconcileSettings.from_env()
    except ValueError as error:
        print_json({"error": str(error)})
        return 2
    configure_logging(settings)

    try:
        payload = load_json_file(args.payload)
    except PayloadFileError as error:
        print_json({"error": error.message, "path": error.path})
        return 2

    answer = SourceReconciler(settings).reconcile(payload)
    match = answer.match_citation(args.citation)
    if match is None:
        print_json({"citation": args.citation, "found": False, "source": None})
        return 1

    result = {
        "citation": args.citation,
        "found": True,
        "strategy": match.strategy,
        "source": match.source.to_dict(),
    }
    if args.answer_text is not None:
        result["relevanceExplanation"] = answer.relevance_explanation(match.source, args.answer_text)
    print_json(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
