# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol, TypeAlias

from ..models import Diagnostic
from ..severity import Severity

JsonValue: TypeAlias = Any


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Information a parser may need beyond the raw output."""

    tool: str
    root: Path


class Parser(Protocol):
    """Convert raw linter output into normalized diagnostics."""

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> Sequence[Diagnostic]:
        """Return diagnostics extracted from the captured streams."""
        ...


JsonTransform = Callable[[JsonValue, ParseContext], Sequence[Diagnostic]]
TextTransform = Callable[[Sequence[str], ParseContext], Sequence[Diagnostic]]


def _load_json_stream(stdout: str) -> JsonValue:
    stdout = stdout.strip()
    if not stdout:
        return []
    try:
        return json.loads(stdout)
    except json.JSONDecodeError:
        payload: list[JsonValue] = []
        for raw_line in stdout.splitlines():
            trimmed = raw_line.strip()
            if not trimmed:
                continue
            try:
                payload.append(json.loads(trimmed))
            except json.JSONDecodeError:
                continue
        return payload


def iter_dicts(value: JsonValue) -> Iterator[Mapping[str, JsonValue]]:
    """Yield mapping items from ``value`` when it is a sequence of dict-like objects."""

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            if isinstance(item, Mapping):
                yield item


def as_mapping(value: JsonValue) -> Mapping[str, JsonValue]:
    """Return ``value`` when it is a mapping, otherwise an empty mapping."""

    return value if isinstance(value, Mapping) else {}


def coerce_optional_int(value: JsonValue) -> int | None:
    """Return ``value`` as an ``int`` when it looks like one."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def coerce_optional_str(value: JsonValue) -> str | None:
    """Return ``value`` as a non-empty string, or ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    return text or None


def iter_pattern_matches(
    lines: Sequence[str],
    pattern: re.Pattern[str],
    *,
    skip_prefixes: Sequence[str] = (),
) -> Iterator[re.Match[str]]:
    """Yield regex matches from ``lines``, ignoring blanks and skipped prefixes."""

    forbidden = tuple(skip_prefixes)
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        if forbidden and line.startswith(forbidden):
            continue
        match = pattern.match(line)
        if match:
            yield match


def build_diagnostic(
    *,
    file: str | None,
    line: int | None,
    column: int | None,
    severity: Severity,
    message: str,
    tool: str,
    code: str | None = None,
) -> Diagnostic:
    """Construct a :class:`Diagnostic` from already-extracted fields."""

    return Diagnostic(
        file=file,
        line=line,
        column=column,
        severity=severity,
        message=message,
        tool=tool,
        code=code,
    )


@dataclass(slots=True)
class JsonParser:
    """Parse stdout as JSON (document or JSON-lines) and delegate to a transform."""

    transform: JsonTransform

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> Sequence[Diagnostic]:
        del stderr  # retain signature compatibility without using the value
        return self.transform(_load_json_stream(stdout), context)


@dataclass(slots=True)
class TextParser:
    """Parse line-oriented output via a text transformation function."""

    transform: TextTransform
    streams: Literal["stdout", "stderr", "both"] = "both"

    def parse(self, stdout: str, stderr: str, *, context: ParseContext) -> Sequence[Diagnostic]:
        if self.streams == "stdout":
            text = stdout
        elif self.streams == "stderr":
            text = stderr
        else:
            text = f"{stdout}\n{stderr}"
        return self.transform(text.splitlines(), context)


__all__ = [
    "JsonParser",
    "JsonTransform",
    "JsonValue",
    "ParseContext",
    "Parser",
    "TextParser",
    "TextTransform",
    "as_mapping",
    "build_diagnostic",
    "coerce_optional_int",
    "coerce_optional_str",
    "iter_dicts",
    "iter_pattern_matches",
]
