"""Identifier normalization primitives."""

from .normalize import file_name_segment, normalize_identifier

__all__ = [
    "file_name_segment",
    "normalize_identifier",
]
