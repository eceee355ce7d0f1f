"""
Thumbnail — extension to output encoding resolution.
"""
from __future__ import annotations

from thumbnailer.thumbnail.constants import EXTENSION_ENCODINGS, EncodingKind


def normalize_extension(extension: str | None) -> str:
    """Strip surrounding whitespace and leading separators, lower-case."""
    if not extension:
        return ""
    return extension.strip().lstrip(".").lower()


def select_encoding(extension: str | None) -> EncodingKind:
    """Return the encoding for a file extension, or UNSUPPORTED.

    ``".JPG"``, ``"jpg"`` and ``"Jpeg"`` all resolve to JPEG. An unknown or
    empty extension is a normal result, never an error.
    """
    return EXTENSION_ENCODINGS.get(normalize_extension(extension), EncodingKind.UNSUPPORTED)
