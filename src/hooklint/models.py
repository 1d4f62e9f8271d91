# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the hooklint package."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .languages import LanguageTag
from .severity import Severity


class EventKind(str, Enum):
    """Which orchestrator entry point an invocation drives."""

    COLLECT = "collect"
    TURN_END = "turn_end"
    IMMEDIATE = "immediate"


class Mode(BaseModel):
    """Per-invocation behaviour switches; never persisted."""

    model_config = ConfigDict(frozen=True)

    lenient: bool = False
    debug: bool = False


class FileEvent(BaseModel):
    """A single hook invocation as described by the calling tool."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    paths: tuple[Path, ...] = Field(default_factory=tuple)
    session_id: str
    cwd: Path


class Diagnostic(BaseModel):
    """Normalized lint diagnostic returned by tools."""

    model_config = ConfigDict(validate_assignment=True)

    file: str | None = None
    line: int | None = None
    column: int | None = None
    severity: Severity
    message: str
    tool: str
    code: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _strip_message(cls, value: object) -> str:
        return str(value or "").strip()

    def location(self) -> str:
        """Return ``file:line:column`` with the missing parts left out."""

        parts = [self.file or "<unknown>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def sort_key(self) -> tuple[str, int, int, str, str]:
        """Return a key giving diagnostics a stable, run-order independent order."""

        return (self.file or "", self.line or 0, self.column or 0, self.code or "", self.message)


class LintResult(BaseModel):
    """Outcome of one linter run for a language group."""

    model_config = ConfigDict(validate_assignment=True)

    linter: str | None
    language: LanguageTag
    root: Path
    files: tuple[Path, ...] = Field(default_factory=tuple)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    abnormal: bool = False
    unavailable: bool = False
    returncode: int | None = None
    note: str | None = None

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when any diagnostic carries error severity."""

        return any(diag.severity is Severity.ERROR for diag in self.diagnostics)


class HookResponse(BaseModel):
    """Response object written to stdout for the calling tool."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    continue_: bool = Field(default=True, alias="continue")
    system_message: str | None = Field(default=None, alias="systemMessage")

    def to_json(self) -> str:
        """Serialise using the protocol's field names, omitting empty messages."""

        return self.model_dump_json(by_alias=True, exclude_none=True)


__all__ = [
    "Diagnostic",
    "EventKind",
    "FileEvent",
    "HookResponse",
    "LintResult",
    "Mode",
]
