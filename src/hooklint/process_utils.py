# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; linters are launched from vetted
# registry entries with argument lists and never through a shell.
import subprocess  # nosec B404
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


class CommandTimeoutError(RuntimeError):
    """Raised when a subprocess outlives its timeout and has been killed."""

    def __init__(self, command: Sequence[str], timeout: float, stdout: str, stderr: str) -> None:
        super().__init__(f"Command '{command[0]}' timed out after {timeout:.1f}s")
        self.command = tuple(command)
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


CommandRunner: TypeAlias = Callable[..., "_CompletedProcess[str]"]


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _ensure_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute *args* with captured output, discarded stdin and an optional timeout.

    Args:
        args: Command and arguments; the executable is resolved against ``PATH``.
        cwd: Working directory for the child process.
        timeout: Seconds after which the child is killed.

    Returns:
        CompletedProcess[str]: Completed process with decoded output.

    Raises:
        CommandTimeoutError: If the child did not finish within ``timeout``.
        FileNotFoundError: If the executable cannot be resolved.
    """

    normalized = _normalize_args(args)
    try:
        # Bandit: argument lists only, no shell expansion.
        completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        # subprocess.run kills and reaps the child before re-raising.
        raise CommandTimeoutError(
            normalized,
            timeout if timeout is not None else 0.0,
            _ensure_text(exc.stdout),
            _ensure_text(exc.stderr),
        ) from exc

    return completed


__all__ = ["CommandRunner", "CommandTimeoutError", "run_command"]
