# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decode hook payloads from stdin and encode the JSON hook response."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping, Sequence
from itertools import groupby
from pathlib import Path
from typing import Any, Final

from .constants import DEFAULT_SESSION_ID, HOOK_TAG, TURN_END_EVENTS
from .exceptions import PayloadError
from .models import Diagnostic, EventKind, FileEvent, HookResponse, LintResult, Mode
from .severity import Severity

_PATH_KEYS: Final[tuple[str, ...]] = ("file_path", "notebook_path", "path")
_PATH_LIST_KEYS: Final[tuple[str, ...]] = ("file_paths", "paths")
FIX_INSTRUCTION: Final[str] = "Fix these lint errors before continuing."


def _iter_raw_paths(container: Mapping[str, Any]) -> Iterator[str]:
    for key in _PATH_KEYS:
        value = container.get(key)
        if isinstance(value, str) and value.strip():
            yield value.strip()
    for key in _PATH_LIST_KEYS:
        value = container.get(key)
        if isinstance(value, list):
            yield from (item.strip() for item in value if isinstance(item, str) and item.strip())


def resolve_event_kind(hook_event: str | None, *, collect: bool = False, lint_collected: bool = False) -> EventKind:
    """Map CLI mode flags and the hook event name onto an :class:`EventKind`.

    Explicit flags win. Without one, ``Stop``/``SubagentStop`` drain the
    collected files and every other event lints its own paths immediately.
    """

    if collect:
        return EventKind.COLLECT
    if lint_collected:
        return EventKind.TURN_END
    if hook_event in TURN_END_EVENTS:
        return EventKind.TURN_END
    return EventKind.IMMEDIATE


def parse_hook_input(
    text: str | bytes,
    *,
    collect: bool = False,
    lint_collected: bool = False,
    default_cwd: Path | None = None,
) -> FileEvent:
    """Decode the JSON payload sent by the editing tool.

    Args:
        text: Raw stdin contents, decoded as UTF-8 when given as bytes. Blank
            input is treated as an empty object.
        collect: ``--collect`` was passed on the command line.
        lint_collected: ``--lint-collected`` was passed on the command line.
        default_cwd: Directory used when the payload carries no ``cwd``.

    Returns:
        FileEvent: Event with absolute, de-duplicated paths.

    Raises:
        PayloadError: If the payload is not UTF-8 or not a JSON object.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PayloadError(f"hook input is not valid UTF-8: {exc}") from exc
    stripped = text.strip()
    try:
        payload = json.loads(stripped) if stripped else {}
    except json.JSONDecodeError as exc:
        raise PayloadError(f"hook input is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise PayloadError(f"hook input must be a JSON object, not {type(payload).__name__}")

    raw_cwd = payload.get("cwd")
    cwd = Path(raw_cwd) if isinstance(raw_cwd, str) and raw_cwd else (default_cwd or Path.cwd())
    session = payload.get("session_id")
    session_id = session if isinstance(session, str) and session else DEFAULT_SESSION_ID
    event_name = payload.get("hook_event_name")

    raw_paths: list[str] = []
    tool_input = payload.get("tool_input")
    if isinstance(tool_input, dict):
        raw_paths.extend(_iter_raw_paths(tool_input))
    raw_paths.extend(_iter_raw_paths({key: payload.get(key) for key in _PATH_LIST_KEYS}))

    paths: list[Path] = []
    for raw in raw_paths:
        candidate = Path(raw)
        resolved = candidate if candidate.is_absolute() else cwd / candidate
        if resolved not in paths:
            paths.append(resolved)

    return FileEvent(
        kind=resolve_event_kind(
            event_name if isinstance(event_name, str) else None,
            collect=collect,
            lint_collected=lint_collected,
        ),
        paths=tuple(paths),
        session_id=session_id,
        cwd=cwd,
    )


def format_diagnostic(diag: Diagnostic) -> str:
    """Render one diagnostic as ``file:line:col: [code] message (tool)``."""

    code = f"[{diag.code}] " if diag.code else ""
    return f"{diag.location()}: {code}{diag.message} ({diag.tool})"


def _render_grouped(diagnostics: Sequence[Diagnostic], limit: int) -> list[str]:
    lines: list[str] = []
    shown = 0
    for _file, group in groupby(diagnostics, key=lambda diag: diag.file or ""):
        if shown >= limit:
            break
        if lines:
            lines.append("")
        for diag in group:
            if shown >= limit:
                break
            lines.append(format_diagnostic(diag))
            shown += 1
    hidden = len(diagnostics) - shown
    if hidden > 0:
        lines.append(f"... and {hidden} more")
    return lines


def describe_result(result: LintResult) -> str:
    """Return a one-line status summary for debug output."""

    where = f"{result.language.value} in {result.root}"
    if result.linter is None:
        return f"no linter available for {result.language.value} ({result.root})"
    if result.unavailable:
        return f"{result.note or result.linter + ' unavailable'} ({where})"
    if result.abnormal:
        return f"{result.note or result.linter + ' ended abnormally'} ({where})"
    errors = sum(1 for diag in result.diagnostics if diag.severity is Severity.ERROR)
    warnings = len(result.diagnostics) - errors
    if not result.diagnostics:
        return f"{result.linter}: no issues found ({where})"
    return f"{result.linter}: {errors} error(s), {warnings} warning(s) ({where})"


def encode(
    results: Iterable[LintResult],
    mode: Mode,
    *,
    statuses: Sequence[str] = (),
    max_reported: int = 50,
) -> HookResponse:
    """Build the hook response for the aggregated lint results.

    ``continue`` is always true. A message is attached when any error
    diagnostic exists, listing errors grouped by file up to *max_reported*
    entries. Without errors the message is omitted unless debug mode is on,
    in which case status lines and warnings are always reported.

    Args:
        results: Lint results of every group handled in this invocation.
        mode: Invocation mode.
        statuses: Extra debug status lines supplied by the orchestrator.
        max_reported: Maximum number of diagnostics listed per severity.

    Returns:
        HookResponse: Response ready to be serialised on stdout.
    """

    collected = list(results)
    diagnostics = sorted(
        (diag for result in collected for diag in result.diagnostics),
        key=Diagnostic.sort_key,
    )
    errors = [diag for diag in diagnostics if diag.severity is Severity.ERROR]
    warnings = [diag for diag in diagnostics if diag.severity is not Severity.ERROR]

    sections: list[str] = []
    if errors:
        files = len({diag.file for diag in errors})
        sections.append(f"{HOOK_TAG} {len(errors)} lint error(s) in {files} file(s):")
        sections.extend(_render_grouped(errors, max_reported))
        sections.append(FIX_INSTRUCTION)
    if mode.debug:
        debug_lines = [*statuses, *(describe_result(result) for result in collected)]
        if warnings:
            debug_lines.append(f"{len(warnings)} warning(s):")
            debug_lines.extend(_render_grouped(warnings, max_reported))
        if not debug_lines:
            debug_lines.append("no issues found")
        if sections:
            sections.append("")
        else:
            debug_lines[0] = f"{HOOK_TAG} {debug_lines[0]}"
        sections.extend(debug_lines)

    if not sections:
        return HookResponse()
    return HookResponse(system_message="\n".join(sections))


def encode_error(message: str, mode: Mode) -> HookResponse:
    """Return the response used when the invocation itself failed."""

    if not mode.debug:
        return HookResponse()
    return HookResponse(system_message=f"{HOOK_TAG} {message}")


__all__ = [
    "FIX_INSTRUCTION",
    "describe_result",
    "encode",
    "encode_error",
    "format_diagnostic",
    "parse_hook_input",
    "resolve_event_kind",
]
