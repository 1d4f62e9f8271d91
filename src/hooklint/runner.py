# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execute a single linter against a group of files and normalise the outcome."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .models import Diagnostic, LintResult, Mode
from .parsers import ParseContext, normalize
from .policy import suppression_args
from .probe import Prober
from .process_utils import CommandRunner, CommandTimeoutError, run_command
from .registry import LinterSpec
from .severity import Severity

LOGGER = logging.getLogger(__name__)


def build_command(
    prefix: Sequence[str],
    spec: LinterSpec,
    targets: Sequence[str],
    mode: Mode,
) -> list[str]:
    """Return the argument vector for running *spec* over *targets*."""

    command = [*prefix, *spec.args, *suppression_args(spec, mode)]
    if spec.append_files:
        command.extend(targets)
    return command


def display_target(path: Path, root: Path) -> str:
    """Return *path* relative to *root* when it lives inside it."""

    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


def _normpath(path: str, root: Path) -> str:
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = root / candidate
    return os.path.normpath(str(candidate))


def filter_to_targets(
    diagnostics: Sequence[Diagnostic],
    paths: Sequence[Path],
    root: Path,
) -> list[Diagnostic]:
    """Keep diagnostics that point at one of *paths*.

    A diagnostic matches when its file, taken as absolute or relative to
    *root*, equals a target, or when a target ends with the reported path.
    Diagnostics without a file never match.
    """

    targets = {os.path.normpath(str(path)) for path in paths}
    kept: list[Diagnostic] = []
    for diag in diagnostics:
        if not diag.file:
            continue
        if _normpath(diag.file, root) in targets:
            kept.append(diag)
            continue
        suffix = os.sep + os.path.normpath(diag.file).lstrip(os.sep)
        if any(target.endswith(suffix) for target in targets):
            kept.append(diag)
    return kept


def run_linter(
    spec: LinterSpec,
    paths: Sequence[Path],
    mode: Mode,
    root: Path,
    *,
    prober: Prober | None = None,
    runner: CommandRunner = run_command,
    timeout: float = 30.0,
) -> LintResult:
    """Run *spec* for *paths* inside *root* and return the normalised result.

    The exit status only matters when the output could not be parsed: a
    non-zero exit without diagnostics marks the run abnormal. Timeouts and
    launch failures are abnormal too, and output containing one of the
    spec's ``missing_markers`` marks the linter unavailable so the caller
    can fall through to the next entry of the chain.

    Args:
        spec: Registry entry to execute.
        paths: Absolute paths of the files to lint.
        mode: Invocation mode controlling suppression flags.
        root: Project root used as the working directory.
        prober: Resolver for the executable prefix.
        runner: Callable compatible with :func:`run_command`.
        timeout: Seconds before the linter is killed.

    Returns:
        LintResult: Diagnostics plus run status for the group.
    """

    base = LintResult(linter=spec.name, language=spec.language, root=root, files=tuple(paths))
    prefix = (prober or Prober()).resolve(spec.probe, root)
    if prefix is None:
        return base.model_copy(update={"unavailable": True, "note": f"{spec.name} is not installed"})

    targets = [display_target(path, root) for path in paths]
    command = build_command(prefix, spec, targets, mode)
    LOGGER.debug("running %s in %s: %s", spec.name, root, " ".join(command))
    try:
        completed = runner(command, cwd=root, timeout=timeout)
    except CommandTimeoutError:
        LOGGER.warning("%s timed out after %.1fs in %s", spec.name, timeout, root)
        timed_out = Diagnostic(
            severity=Severity.WARNING,
            message=f"linter timed out after {timeout:g}s",
            tool=spec.name,
        )
        return base.model_copy(
            update={"abnormal": True, "diagnostics": [timed_out], "note": f"{spec.name} timed out"}
        )
    except OSError as exc:
        LOGGER.warning("unable to launch %s: %s", spec.name, exc)
        return base.model_copy(update={"abnormal": True, "note": f"{spec.name} failed to start: {exc}"})

    stdout = completed.stdout or ""
    stderr = completed.stderr or ""
    combined = f"{stdout}\n{stderr}"
    for marker in spec.missing_markers:
        if marker in combined:
            LOGGER.debug("%s reported missing support: %s", spec.name, marker)
            return base.model_copy(
                update={
                    "unavailable": True,
                    "returncode": completed.returncode,
                    "note": f"{spec.name} is not configured for this project",
                }
            )

    diagnostics = normalize(spec.parser, stdout, stderr, ParseContext(tool=spec.name, root=root))
    abnormal = completed.returncode != 0 and not diagnostics
    if spec.filter_to_targets:
        diagnostics = filter_to_targets(diagnostics, paths, root)
    note = None
    if abnormal:
        first_line = next((line.strip() for line in combined.splitlines() if line.strip()), "")
        note = f"{spec.name} exited with status {completed.returncode}"
        if first_line:
            note = f"{note}: {first_line}"
    LOGGER.debug("%s produced %d diagnostic(s) (exit %s)", spec.name, len(diagnostics), completed.returncode)
    return base.model_copy(
        update={
            "diagnostics": diagnostics,
            "abnormal": abnormal,
            "returncode": completed.returncode,
            "note": note,
        }
    )


__all__ = ["build_command", "display_target", "filter_to_targets", "run_linter"]
