# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the single-linter execution runner."""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path

from hooklint.languages import LanguageTag
from hooklint.models import Diagnostic, Mode
from hooklint.probe import ProbeKind, ProbeSpec
from hooklint.registry import LinterSpec, linter_chain
from hooklint.runner import filter_to_targets, run_linter
from hooklint.severity import Severity


def _spec(name: str, language: LanguageTag = LanguageTag.PYTHON):
    return next(spec for spec in linter_chain(language) if spec.name == name)


RUFF_OUTPUT = json.dumps(
    [
        {
            "code": "F401",
            "message": "`os` imported but unused",
            "filename": "/proj/a.py",
            "location": {"row": 1, "column": 8},
        }
    ]
)


def test_command_includes_args_suppression_and_targets(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner({"ruff": (1, RUFF_OUTPUT, "")})
    target = tmp_path / "pkg" / "a.py"

    result = run_linter(_spec("ruff"), [target], Mode(lenient=True), tmp_path, prober=make_prober("ruff"), runner=runner)

    command, cwd = runner.calls[0]
    assert cwd == tmp_path
    assert command[:4] == ["/usr/bin/ruff", "check", "--output-format=json", "--no-fix"]
    assert "--ignore" in command
    assert command[-1] == "pkg/a.py"
    assert result.linter == "ruff"
    assert [d.code for d in result.diagnostics] == ["F401"]
    assert not result.abnormal
    assert result.returncode == 1


def test_strict_mode_passes_no_suppression_flags(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()

    run_linter(_spec("ruff"), [tmp_path / "a.py"], Mode(), tmp_path, prober=make_prober("ruff"), runner=runner)

    assert "--ignore" not in runner.calls[0][0]


def test_unresolvable_linter_is_unavailable(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()

    result = run_linter(_spec("ruff"), [tmp_path / "a.py"], Mode(), tmp_path, prober=make_prober(), runner=runner)

    assert result.unavailable
    assert runner.calls == []


def test_nonzero_exit_without_diagnostics_is_abnormal(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner({"ruff": (2, "", "error: unexpected argument '--bogus'")})

    result = run_linter(_spec("ruff"), [tmp_path / "a.py"], Mode(), tmp_path, prober=make_prober("ruff"), runner=runner)

    assert result.abnormal
    assert result.diagnostics == []
    assert result.note is not None and "--bogus" in result.note


def test_launch_failure_is_abnormal(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner(raises={"ruff": FileNotFoundError("ruff vanished")})

    result = run_linter(_spec("ruff"), [tmp_path / "a.py"], Mode(), tmp_path, prober=make_prober("ruff"), runner=runner)

    assert result.abnormal
    assert result.diagnostics == []


def test_missing_plugin_marks_unavailable(tmp_path: Path, make_prober, make_runner) -> None:
    (tmp_path / "pom.xml").write_text("<project/>", encoding="utf-8")
    runner = make_runner({"mvn": (1, "[ERROR] No plugin found for prefix 'pmd' in the current project", "")})

    result = run_linter(
        _spec("mvn-pmd", LanguageTag.JAVA),
        [tmp_path / "src" / "App.java"],
        Mode(),
        tmp_path,
        prober=make_prober("mvn"),
        runner=runner,
    )

    assert result.unavailable
    assert "src/App.java" not in runner.calls[0][0]


def test_clippy_diagnostics_are_filtered_to_targets(tmp_path: Path, make_prober, make_runner) -> None:
    (tmp_path / "Cargo.toml").write_text("[package]\nname = 'demo'\n", encoding="utf-8")
    records = [
        {
            "reason": "compiler-message",
            "message": {
                "level": "error",
                "message": message,
                "code": {"code": code},
                "spans": [{"file_name": file, "line_start": 2, "column_start": 1, "is_primary": True}],
            },
        }
        for file, code, message in (
            ("src/main.rs", "unused_variables", "unused variable: `x`"),
            ("src/lib.rs", "clippy::needless_return", "unneeded `return` statement"),
        )
    ]
    stdout = "\n".join(json.dumps(record) for record in records)
    runner = make_runner({"cargo": (101, stdout, "")})

    result = run_linter(
        _spec("clippy", LanguageTag.RUST),
        [tmp_path / "src" / "main.rs"],
        Mode(),
        tmp_path,
        prober=make_prober("cargo"),
        runner=runner,
    )

    assert [d.file for d in result.diagnostics] == ["src/main.rs"]
    assert not result.abnormal
    assert runner.calls[0][0][-3:] == ["--", "-D", "warnings"]


def test_filter_to_targets_matching_rules(tmp_path: Path) -> None:
    target = tmp_path / "src" / "main.rs"
    diags = [
        Diagnostic(file=str(target), line=1, severity=Severity.ERROR, message="abs", tool="clippy"),
        Diagnostic(file="src/main.rs", line=2, severity=Severity.ERROR, message="rel", tool="clippy"),
        Diagnostic(file="main.rs", line=3, severity=Severity.ERROR, message="suffix", tool="clippy"),
        Diagnostic(file="src/other.rs", line=4, severity=Severity.ERROR, message="other", tool="clippy"),
        Diagnostic(file=None, line=None, severity=Severity.ERROR, message="summary", tool="clippy"),
    ]

    kept = filter_to_targets(diags, [target], tmp_path)

    assert [d.message for d in kept] == ["abs", "rel", "suffix"]


def test_real_timeout_is_abnormal_and_bounded(tmp_path: Path) -> None:
    spec = LinterSpec(
        name="sleeper",
        language=LanguageTag.PYTHON,
        priority=1,
        probe=ProbeSpec(kind=ProbeKind.PATH, executable=sys.executable),
        args=("-c", "import time; time.sleep(30)"),
        append_files=False,
        parser="ruff-json",
    )

    started = time.monotonic()
    result = run_linter(spec, [tmp_path / "a.py"], Mode(), tmp_path, timeout=0.5)
    elapsed = time.monotonic() - started

    assert elapsed < 10
    assert result.abnormal
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].severity is Severity.WARNING
    assert "timed out" in result.diagnostics[0].message
