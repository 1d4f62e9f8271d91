# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from hooklint.probe import Prober


@dataclass
class FakeRunner:
    """Stand-in for ``run_command`` returning canned output per executable name."""

    outputs: Mapping[str, tuple[int, str, str]] = field(default_factory=dict)
    raises: Mapping[str, BaseException] = field(default_factory=dict)
    calls: list[tuple[list[str], Path | None]] = field(default_factory=list)

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
        **_: object,
    ) -> subprocess.CompletedProcess[str]:
        command = list(args)
        self.calls.append((command, cwd))
        name = Path(command[0]).name
        if name in self.raises:
            raise self.raises[name]
        returncode, stdout, stderr = self.outputs.get(name, (0, "", ""))
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)

    def executables(self) -> list[str]:
        return [Path(command[0]).name for command, _ in self.calls]


def fake_which(*available: str) -> Callable[[str], str | None]:
    """Return a ``shutil.which`` replacement knowing only *available*."""

    known = set(available)

    def _which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in known else None

    return _which


@pytest.fixture
def make_prober() -> Callable[..., Prober]:
    def _factory(*available: str) -> Prober:
        return Prober(which=fake_which(*available))

    return _factory


@pytest.fixture
def write_file() -> Callable[..., Path]:
    def _write(path: Path, content: str = "") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    def _factory(
        outputs: Mapping[str, tuple[int, str, str]] | None = None,
        raises: Mapping[str, BaseException] | None = None,
    ) -> FakeRunner:
        return FakeRunner(outputs=dict(outputs or {}), raises=dict(raises or {}))

    return _factory


@pytest.fixture(autouse=True)
def _no_project_dir_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CLAUDE_PROJECT_DIR", raising=False)
