from __future__ import annotations

from pathlib import PurePosixPath

from .constants import CONTENT_TYPE_OVERRIDES, DEFAULT_CONTENT_TYPE


def classify(file_name: str) -> str:
    """Map a file name to the Content-Type it is served with."""
    ext = PurePosixPath(file_name).suffix.lower().lstrip(".")
    if not ext:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPE_OVERRIDES.get(ext, f"text/{ext}")


__all__ = ["classify"]
