# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language detection utilities for selecting relevant toolchains."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .constants import LANGUAGE_EXTENSIONS, LANGUAGE_MARKERS


class LanguageTag(str, Enum):
    """Languages with a linter chain; ``UNKNOWN`` paths are never linted."""

    JAVASCRIPT = "javascript"
    RUST = "rust"
    PYTHON = "python"
    JAVA = "java"
    GO = "go"
    UNKNOWN = "unknown"


def classify(path: Path | str) -> LanguageTag:
    """Return the language tag implied by the extension of *path*."""

    suffix = Path(path).suffix.lower()
    for language, extensions in LANGUAGE_EXTENSIONS.items():
        if suffix in extensions:
            return LanguageTag(language)
    return LanguageTag.UNKNOWN


def find_project_root(path: Path, language: LanguageTag, fallback: Path | None = None) -> Path:
    """Return the closest ancestor of *path* holding a marker for *language*.

    Args:
        path: Absolute path of the touched file.
        language: Language tag previously derived with :func:`classify`.
        fallback: Directory used when no marker exists, typically the hook ``cwd``.

    Returns:
        Path: Directory the linter should run from.
    """

    start = path.parent
    markers = LANGUAGE_MARKERS.get(language.value, ())
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in markers):
            return candidate
    if fallback is not None and (fallback == start or fallback in start.parents):
        return fallback
    return start


__all__ = ["LanguageTag", "classify", "find_project_root"]
