# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for Rust tooling output."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from ..models import Diagnostic
from ..severity import Severity, map_severity
from .base import (
    JsonValue,
    ParseContext,
    as_mapping,
    build_diagnostic,
    coerce_optional_int,
    coerce_optional_str,
    iter_dicts,
)

CARGO_CLIPPY_DIAGNOSTIC_REASON: Final[str] = "compiler-message"
CLIPPY_SEVERITY_MAP: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "error: internal compiler error": Severity.ERROR,
    "warning": Severity.WARNING,
}


def parse_cargo_clippy(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ``cargo clippy --message-format=json`` records.

    Messages without a source span (e.g. "aborting due to N previous errors")
    are summaries and carry no location, so they are skipped.
    """

    records = [payload] if isinstance(payload, dict) else payload
    results: list[Diagnostic] = []
    for record in iter_dicts(records):
        if record.get("reason") != CARGO_CLIPPY_DIAGNOSTIC_REASON:
            continue
        message = as_mapping(record.get("message"))
        spans = list(iter_dicts(message.get("spans") or []))
        if not spans:
            continue
        primary = next((span for span in spans if span.get("is_primary")), spans[0])
        code = coerce_optional_str(as_mapping(message.get("code")).get("code"))
        results.append(
            build_diagnostic(
                file=coerce_optional_str(primary.get("file_name")),
                line=coerce_optional_int(primary.get("line_start")),
                column=coerce_optional_int(primary.get("column_start")),
                severity=map_severity(message.get("level"), CLIPPY_SEVERITY_MAP, Severity.WARNING),
                message=coerce_optional_str(message.get("message")) or "",
                code=code,
                tool=context.tool,
            )
        )
    return results


__all__ = ["parse_cargo_clippy"]
