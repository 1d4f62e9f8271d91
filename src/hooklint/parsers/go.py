# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for Go linters."""

from __future__ import annotations

import re
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
    iter_pattern_matches,
)

GOLANGCI_TEXT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^:\n]+?\.go):(?P<line>\d+)(?::(?P<col>\d+))?:\s*(?P<message>.*?)"
    r"(?:\s+\((?P<code>[\w-]+)\))?$"
)

GO_VET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:vet:\s*)?(?P<file>[^:\n]+?\.go):(?P<line>\d+)(?::(?P<col>\d+))?:\s*(?P<message>.+)$"
)

STATICCHECK_SEVERITY_MAP: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
}


def _line_match_diagnostic(match: re.Match[str], context: ParseContext, code: str | None) -> Diagnostic:
    col = match.group("col")
    return build_diagnostic(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(col) if col else None,
        severity=Severity.ERROR,
        message=match.group("message"),
        code=code,
        tool=context.tool,
    )


def parse_golangci_text(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse golangci-lint's default ``file:line:col: message (linter)`` output.

    The originating linter name becomes the diagnostic code.
    """

    return [
        _line_match_diagnostic(match, context, match.group("code"))
        for match in iter_pattern_matches(lines, GOLANGCI_TEXT_PATTERN)
    ]


def parse_staticcheck(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ``staticcheck -f json`` JSON-lines output."""

    records = [payload] if isinstance(payload, dict) else payload
    results: list[Diagnostic] = []
    for item in iter_dicts(records):
        location = as_mapping(item.get("location"))
        results.append(
            build_diagnostic(
                file=coerce_optional_str(location.get("file")),
                line=coerce_optional_int(location.get("line")),
                column=coerce_optional_int(location.get("column")),
                severity=map_severity(item.get("severity"), STATICCHECK_SEVERITY_MAP, Severity.WARNING),
                message=coerce_optional_str(item.get("message")) or "",
                code=coerce_optional_str(item.get("code")),
                tool=context.tool,
            )
        )
    return results


def parse_go_vet(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ``go vet`` findings, which are printed on stderr."""

    return [
        _line_match_diagnostic(match, context, None)
        for match in iter_pattern_matches(lines, GO_VET_PATTERN, skip_prefixes=("#",))
    ]


__all__ = ["parse_go_vet", "parse_golangci_text", "parse_staticcheck"]
