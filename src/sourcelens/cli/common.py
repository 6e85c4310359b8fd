"""Shared helpers for sourcelens command-line entrypoints."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sourcelens.reconcile.config import ReconcileSettings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class PayloadFileError(Exception):
    """A payload file could not be read or decoded."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message} (path={path})")
        self.path = path
        self.message = message


def load_json_file(path: str | None) -> Any:
    if path is None:
        return None
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise PayloadFileError(path, f"Failed to read payload file: {exc}") from exc
    except ValueError as exc:
        raise PayloadFileError(path, f"Payload file is not valid JSON: {exc}") from exc


def print_json(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=True, indent=2))


def configure_logging(settings: ReconcileSettings) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=settings.log_level)
