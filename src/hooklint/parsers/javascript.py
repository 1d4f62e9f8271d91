# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for JavaScript/TypeScript tooling and package-script output."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Diagnostic
from ..severity import Severity, map_severity
from .base import (
    JsonValue,
    ParseContext,
    build_diagnostic,
    coerce_optional_int,
    coerce_optional_str,
    iter_dicts,
    iter_pattern_matches,
)

OXLINT_UNIX_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^:\n]+?):(?P<line>\d+):(?P<col>\d+):\s*(?P<message>.*?)\s*"
    r"\[(?P<severity>Error|Warning|Advice)(?:/(?P<code>[^\]]+))?\]$"
)

WORKFLOW_COMMAND_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^::(?P<severity>error|warning|notice)(?:\s+(?P<props>[^:]*))?::(?P<message>.*)$"
)

GENERIC_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>[^\s:][^:\n]*?\.\w+):(?P<line>\d+)(?::(?P<col>\d+))?:?\s+"
    r"(?:(?P<severity>error|warning)\b:?\s*)?(?P<message>.+)$",
    re.IGNORECASE,
)

STYLISH_ENTRY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s+(?P<line>\d+):(?P<col>\d+)\s+(?P<severity>error|warning)\s+(?P<message>.+?)"
    r"(?:\s{2,}(?P<code>[\w@/-]+))?$"
)

WORKFLOW_SEVERITY_MAP: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "notice": Severity.WARNING,
}

_WORKFLOW_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("%0D", "\r"),
    ("%0A", "\n"),
    ("%3A", ":"),
    ("%2C", ","),
    ("%25", "%"),
)


def _unescape_workflow(value: str) -> str:
    for encoded, decoded in _WORKFLOW_ESCAPES:
        value = value.replace(encoded, decoded)
    return value


def parse_oxlint(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ``oxlint --format=unix`` output.

    Rule codes arrive wrapped in their plugin name, e.g. ``eslint(no-unused-vars)``.
    """

    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, OXLINT_UNIX_PATTERN):
        severity = Severity.ERROR if match.group("severity") == "Error" else Severity.WARNING
        results.append(
            build_diagnostic(
                file=match.group("file"),
                line=int(match.group("line")),
                column=int(match.group("col")),
                severity=severity,
                message=match.group("message"),
                code=match.group("code"),
                tool=context.tool,
            )
        )
    return results


def parse_biome(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ``biome lint --reporter=github`` workflow-command lines."""

    results: list[Diagnostic] = []
    for match in iter_pattern_matches(lines, WORKFLOW_COMMAND_PATTERN):
        props: dict[str, str] = {}
        for chunk in (match.group("props") or "").split(","):
            key, sep, value = chunk.partition("=")
            if sep:
                props[key.strip()] = _unescape_workflow(value.strip())
        results.append(
            build_diagnostic(
                file=props.get("file"),
                line=coerce_optional_int(props.get("line")),
                column=coerce_optional_int(props.get("col")),
                severity=map_severity(match.group("severity"), WORKFLOW_SEVERITY_MAP, Severity.WARNING),
                message=_unescape_workflow(match.group("message")),
                code=props.get("title"),
                tool=context.tool,
            )
        )
    return results


def parse_eslint(payload: JsonValue, context: ParseContext) -> Sequence[Diagnostic]:
    """Parse ESLint JSON output."""

    results: list[Diagnostic] = []
    for entry in iter_dicts(payload):
        path = coerce_optional_str(entry.get("filePath")) or coerce_optional_str(entry.get("filename"))
        for message in iter_dicts(entry.get("messages") or []):
            severity = Severity.ERROR if message.get("severity") == 2 else Severity.WARNING
            results.append(
                build_diagnostic(
                    file=path,
                    line=coerce_optional_int(message.get("line")),
                    column=coerce_optional_int(message.get("column")),
                    severity=severity,
                    message=coerce_optional_str(message.get("message")) or "",
                    code=coerce_optional_str(message.get("ruleId")),
                    tool=context.tool,
                )
            )
    return results


def parse_generic(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Best-effort parser for package scripts whose formatter is unknown.

    Recognises ``file:line[:col]: [severity] message`` lines as well as the
    ESLint "stylish" layout (a file header followed by indented entries).
    Lines without an explicit severity are treated as errors.
    """

    results: list[Diagnostic] = []
    current_file: str | None = None
    for raw_line in lines:
        if not raw_line.strip():
            continue
        stylish = STYLISH_ENTRY_PATTERN.match(raw_line)
        if stylish and current_file:
            results.append(
                build_diagnostic(
                    file=current_file,
                    line=int(stylish.group("line")),
                    column=int(stylish.group("col")),
                    severity=Severity(stylish.group("severity").lower()),
                    message=stylish.group("message"),
                    code=stylish.group("code"),
                    tool=context.tool,
                )
            )
            continue
        match = GENERIC_LINE_PATTERN.match(raw_line.strip())
        if match:
            label = match.group("severity")
            col = match.group("col")
            results.append(
                build_diagnostic(
                    file=match.group("file"),
                    line=int(match.group("line")),
                    column=int(col) if col else None,
                    severity=Severity(label.lower()) if label else Severity.ERROR,
                    message=match.group("message"),
                    tool=context.tool,
                )
            )
            continue
        if not raw_line[0].isspace():
            current_file = raw_line.strip()
    return results


__all__ = ["parse_biome", "parse_eslint", "parse_generic", "parse_oxlint"]
