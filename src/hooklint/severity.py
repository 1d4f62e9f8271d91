# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class Severity(str, Enum):
    """Two-level severity scale every linter vocabulary collapses onto."""

    ERROR = "error"
    WARNING = "warning"


def severity_from_code(code: str | None, default: Severity = Severity.ERROR) -> Severity:
    """Infer severity from conventional code prefixes (e.g. E, W)."""

    if not code:
        return default
    head = code[0].upper()
    if head in {"E", "F"}:
        return Severity.ERROR
    if head == "W":
        return Severity.WARNING
    return default


def map_severity(label: object, mapping: Mapping[str, Severity], default: Severity) -> Severity:
    """Return a :class:`Severity` derived from ``label`` using ``mapping``."""

    if isinstance(label, str):
        return mapping.get(label.strip().lower(), default)
    return default


__all__ = ["Severity", "map_severity", "severity_from_code"]
