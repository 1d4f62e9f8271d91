# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for Python-related tooling output."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Final

from ..models import Diagnostic
from ..severity import Severity, map_severity, severity_from_code
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

PYLINT_SEVERITY_MAP: Final[dict[str, Severity]] = {
    "fatal": Severity.ERROR,
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "convention": Severity.WARNING,
    "refactor": Severity.WARNING,
    "info": Severity.WARNING,
}

MYPY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^:\n]+?):(?P<line>\d+):(?:(?P<col>\d+):)?\s*"
    r"(?P<severity>error|warning|note):\s*(?P<message>.*?)(?:\s+\[(?P<code>[\w-]+)\])?$"
)

FLAKE8_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^:\n]+?):(?P<line>\d+):(?P<col>\d+):\s*(?P<code>[A-Z]+\d+)\s+(?P<message>.+)$"
)


def parse_ruff(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse Ruff JSON output into diagnostics.

    Ruff only reports rules the project enabled, so anything not in the
    ``W`` family is treated as an error.

    Args:
        payload: JSON payload returned by ``ruff check --output-format=json``.
        context: Parse context supplied by the runner.

    Returns:
        Sequence[Diagnostic]: Normalised diagnostics representing Ruff findings.
    """

    source: JsonValue = payload.get("diagnostics") if isinstance(payload, Mapping) else payload
    results: list[Diagnostic] = []
    for item in iter_dicts(source):
        location = as_mapping(item.get("location"))
        code = coerce_optional_str(item.get("code"))
        results.append(
            build_diagnostic(
                file=coerce_optional_str(item.get("filename")) or coerce_optional_str(item.get("file")),
                line=coerce_optional_int(location.get("row")),
                column=coerce_optional_int(location.get("column")),
                severity=severity_from_code(code, Severity.ERROR),
                message=coerce_optional_str(item.get("message")) or "",
                code=code,
                tool=context.tool,
            )
        )
    return results


def parse_pylint(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse Pylint JSON output into diagnostics.

    Args:
        payload: JSON payload emitted by ``pylint --output-format=json``.
        context: Parse context supplied by the runner.

    Returns:
        Sequence[Diagnostic]: Diagnostics with symbolic rule names as codes.
    """

    results: list[Diagnostic] = []
    for item in iter_dicts(payload):
        code = coerce_optional_str(item.get("symbol")) or coerce_optional_str(item.get("message-id"))
        results.append(
            build_diagnostic(
                file=coerce_optional_str(item.get("path")) or coerce_optional_str(item.get("filename")),
                line=coerce_optional_int(item.get("line")),
                column=coerce_optional_int(item.get("column")),
                severity=map_severity(item.get("type"), PYLINT_SEVERITY_MAP, Severity.WARNING),
                message=coerce_optional_str(item.get("message")) or "",
                code=code,
                tool=context.tool,
            )
        )
    return results


def parse_mypy(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse mypy's ``file:line:col: severity: message [code]`` lines."""

    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, MYPY_PATTERN):
        severity = Severity.ERROR if match.group("severity") == "error" else Severity.WARNING
        col = match.group("col")
        results.append(
            build_diagnostic(
                file=match.group("file"),
                line=int(match.group("line")),
                column=int(col) if col else None,
                severity=severity,
                message=match.group("message"),
                code=match.group("code"),
                tool=context.tool,
            )
        )
    return results


def parse_flake8(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse flake8's default ``file:line:col: CODE message`` format."""

    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, FLAKE8_PATTERN):
        code = match.group("code")
        results.append(
            build_diagnostic(
                file=match.group("file"),
                line=int(match.group("line")),
                column=int(match.group("col")),
                severity=severity_from_code(code, Severity.WARNING),
                message=match.group("message"),
                code=code,
                tool=context.tool,
            )
        )
    return results


__all__ = ["parse_flake8", "parse_mypy", "parse_pylint", "parse_ruff"]
