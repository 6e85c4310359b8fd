"""Runtime configuration for source reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping


DEFAULT_LOG_LEVEL = "WARNING"
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of: 1, 0, true, false, yes, no, on, off")


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ReconcileSettings:
    """Validated reconciliation settings."""

    debug_mode: bool = False
    max_sources_displayed: int | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReconcileSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        debug_mode = _parse_bool(
            name="SOURCELENS_DEBUG_MODE",
            raw_value=source.get("SOURCELENS_DEBUG_MODE", ""),
        )

        max_sources_raw = source.get("SOURCELENS_MAX_SOURCES_DISPLAYED", "").strip()
        max_sources_displayed = (
            _parse_positive_int(name="SOURCELENS_MAX_SOURCES_DISPLAYED", raw_value=max_sources_raw)
            if max_sources_raw
            else None
        )

        log_level = source.get("SOURCELENS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if not log_level:
            raise ValueError("SOURCELENS_LOG_LEVEL cannot be empty")
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"SOURCELENS_LOG_LEVEL is not a logging level: {log_level}")

        return cls(
            debug_mode=debug_mode,
            max_sources_displayed=max_sources_displayed,
            log_level=log_level,
        )
