# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end tests for the orchestrator with fake probes and runners."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from hooklint.config import HookConfig
from hooklint.languages import LanguageTag
from hooklint.models import EventKind, FileEvent, Mode
from hooklint.orchestrator import Orchestrator, group_paths

STRICT = Mode()
LENIENT = Mode(lenient=True)
DEBUG = Mode(debug=True)


def _event(kind: EventKind, cwd: Path, *paths: Path, session: str = "s1") -> FileEvent:
    return FileEvent(kind=kind, paths=tuple(paths), session_id=session, cwd=cwd)


def _orchestrator(tmp_path: Path, prober, runner, **config: object) -> Orchestrator:
    settings = {"state_dir": tmp_path / "state", **config}
    return Orchestrator(config=HookConfig(**settings), prober=prober, runner=runner)


def _ruff_output(*findings: tuple[Path, int, str, str]) -> str:
    return json.dumps(
        [
            {"code": code, "message": message, "filename": str(path), "location": {"row": row, "column": 1}}
            for path, row, code, message in findings
        ]
    )


def test_collect_then_turn_end_reports_error(tmp_path: Path, make_prober, make_runner, write_file) -> None:
    write_file(tmp_path / "pyproject.toml", "[project]\nname = 'demo'\n")
    a_py = write_file(tmp_path / "a.py", "import os\n")
    b_py = write_file(tmp_path / "b.py", "x = 1\n")
    runner = make_runner({"ruff": (1, _ruff_output((a_py, 3, "F821", "Undefined name `y`")), "")})
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner)

    first = orchestrator.handle(_event(EventKind.COLLECT, tmp_path, a_py), STRICT)
    second = orchestrator.handle(_event(EventKind.COLLECT, tmp_path, b_py), STRICT)
    assert first.system_message is None and second.system_message is None
    assert runner.calls == []

    response = orchestrator.handle(_event(EventKind.TURN_END, tmp_path), STRICT)

    assert response.continue_ is True
    assert response.system_message is not None
    assert "a.py:3" in response.system_message
    command, cwd = runner.calls[0]
    assert cwd == tmp_path
    assert command[-2:] == ["a.py", "b.py"]


def test_unknown_extension_is_never_linted(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("ruff", "eslint", "go"), runner)
    odd = tmp_path / "x.unknownext"

    orchestrator.handle(_event(EventKind.COLLECT, tmp_path, odd), STRICT)
    quiet = orchestrator.handle(_event(EventKind.TURN_END, tmp_path), STRICT)

    orchestrator.handle(_event(EventKind.COLLECT, tmp_path, odd), DEBUG)
    chatty = orchestrator.handle(_event(EventKind.TURN_END, tmp_path), DEBUG)

    assert runner.calls == []
    assert quiet.system_message is None
    assert chatty.system_message is not None
    assert "nothing to lint" in chatty.system_message


def test_lenient_mode_hides_unused_import_but_still_blocks(
    tmp_path: Path, make_prober, make_runner, write_file
) -> None:
    source = write_file(tmp_path / "mod.py", "import os\nprint(y)\n")
    output = _ruff_output(
        (source, 1, "F401", "`os` imported but unused"),
        (source, 2, "F821", "Undefined name `y`"),
    )
    runner = make_runner({"ruff": (1, output, "")})
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner)

    strict = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, source), STRICT)
    lenient = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, source), LENIENT)

    assert strict.system_message is not None
    assert "F401" in strict.system_message and "F821" in strict.system_message
    assert lenient.system_message is not None
    assert "F821" in lenient.system_message
    assert "F401" not in lenient.system_message
    assert "--ignore" in runner.calls[1][0]


def test_racing_collects_are_both_linted_once(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("golangci-lint"), runner)
    c_go, d_go = tmp_path / "c.go", tmp_path / "d.go"
    barrier = threading.Barrier(2)

    def _collect(path: Path) -> None:
        barrier.wait()
        orchestrator.handle(_event(EventKind.COLLECT, tmp_path, path), STRICT)

    threads = [threading.Thread(target=_collect, args=(path,)) for path in (c_go, d_go)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    orchestrator.handle(_event(EventKind.TURN_END, tmp_path), STRICT)

    assert len(runner.calls) == 1
    command = runner.calls[0][0]
    assert command.count("c.go") == 1
    assert command.count("d.go") == 1


def test_immediate_mode_leaves_collection_untouched(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner)
    pending = tmp_path / "pending.py"
    orchestrator.handle(_event(EventKind.COLLECT, tmp_path, pending), STRICT)

    orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, tmp_path / "now.py"), STRICT)

    store = orchestrator.store_for(_event(EventKind.COLLECT, tmp_path))
    assert store.drain_all() == {str(pending)}


def test_falls_through_when_plugin_missing(tmp_path: Path, make_prober, make_runner, write_file) -> None:
    write_file(tmp_path / "pom.xml", "<project/>")
    app = write_file(tmp_path / "src" / "main" / "java" / "App.java", "class App {}\n")
    outputs = {"mvn": (1, "[ERROR] No plugin found for prefix 'pmd' in the current project", "")}
    runner = make_runner(outputs)
    orchestrator = _orchestrator(tmp_path, make_prober("mvn"), runner)

    response = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, app), DEBUG)

    goals = [command[3] for command, _ in runner.calls]
    assert goals == ["pmd:check", "spotbugs:check"]
    assert response.system_message is not None
    assert "mvn-spotbugs exited with status 1" in response.system_message


def test_no_linter_is_silent_unless_debug(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober(), runner)
    source = tmp_path / "main.go"

    quiet = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, source), STRICT)
    chatty = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, source), DEBUG)

    assert quiet.system_message is None
    assert chatty.system_message is not None
    assert "no linter available for go" in chatty.system_message


def test_groups_split_by_language_and_root(tmp_path: Path, write_file) -> None:
    write_file(tmp_path / "svc" / "pyproject.toml")
    write_file(tmp_path / "web" / "package.json", "{}")
    paths = [
        tmp_path / "web" / "src" / "b.ts",
        tmp_path / "svc" / "pkg" / "a.py",
        tmp_path / "tools" / "c.py",
        tmp_path / "notes.txt",
        tmp_path / "web" / "src" / "a.ts",
    ]

    groups = group_paths(paths, tmp_path)

    assert [(group.language, group.root) for group in groups] == [
        (LanguageTag.JAVASCRIPT, tmp_path / "web"),
        (LanguageTag.PYTHON, tmp_path),
        (LanguageTag.PYTHON, tmp_path / "svc"),
    ]
    assert groups[0].files == (tmp_path / "web" / "src" / "a.ts", tmp_path / "web" / "src" / "b.ts")


def test_aggregation_is_order_independent(tmp_path: Path, make_prober, make_runner, write_file) -> None:
    one = write_file(tmp_path / "one" / "pyproject.toml").parent
    two = write_file(tmp_path / "two" / "pyproject.toml").parent
    first, second = one / "a.py", two / "b.py"
    output = _ruff_output((first, 1, "F821", "Undefined name `p`"), (second, 2, "F821", "Undefined name `q`"))
    runner = make_runner({"ruff": (1, output, "")})
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner, jobs=2)

    forward = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, first, second), STRICT)
    backward = orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, second, first), STRICT)

    assert forward.system_message == backward.system_message
    assert len(runner.calls) == 4


def test_corrupt_state_is_treated_as_empty(tmp_path: Path, make_prober, make_runner) -> None:
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner)
    store = orchestrator.store_for(_event(EventKind.TURN_END, tmp_path))
    store.directory.mkdir(parents=True, exist_ok=True)
    store.path.write_bytes(b"\xff\xfe\xfd")

    collected = orchestrator.handle(_event(EventKind.COLLECT, tmp_path, tmp_path / "a.py"), DEBUG)
    drained = orchestrator.handle(_event(EventKind.TURN_END, tmp_path), DEBUG)

    assert collected.continue_ and drained.continue_
    assert collected.system_message is not None
    assert "could not record" in collected.system_message
    assert drained.system_message is not None
    assert "nothing to lint" in drained.system_message
    assert runner.calls == []


def test_debug_collect_reports_status(tmp_path: Path, make_prober, make_runner) -> None:
    orchestrator = _orchestrator(tmp_path, make_prober(), make_runner())

    response = orchestrator.handle(_event(EventKind.COLLECT, tmp_path, tmp_path / "a.rs"), DEBUG)

    assert response.system_message == "[hooklint] collected 1 file(s), 1 new"


def test_go_files_are_linted_per_package(tmp_path: Path, make_prober, make_runner, write_file) -> None:
    write_file(tmp_path / "go.mod", "module example.com/demo\n")
    a_go = write_file(tmp_path / "a" / "a.go", "package a\n")
    b_go = write_file(tmp_path / "b" / "b.go", "package b\n")
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("golangci-lint"), runner)

    orchestrator.handle(_event(EventKind.IMMEDIATE, tmp_path, b_go, a_go), STRICT)

    assert [(command[-2:], cwd) for command, cwd in runner.calls] == [
        (["run", "a/a.go"], tmp_path),
        (["run", "b/b.go"], tmp_path),
    ]


def test_go_groups_split_by_directory(tmp_path: Path, write_file) -> None:
    write_file(tmp_path / "go.mod", "module example.com/demo\n")
    paths = [tmp_path / "b" / "b.go", tmp_path / "a" / "x.go", tmp_path / "a" / "y.go", tmp_path / "z.py"]

    groups = group_paths(paths, tmp_path)

    assert [(group.language, group.root, group.files) for group in groups] == [
        (LanguageTag.GO, tmp_path, (tmp_path / "a" / "x.go", tmp_path / "a" / "y.go")),
        (LanguageTag.GO, tmp_path, (tmp_path / "b" / "b.go",)),
        (LanguageTag.PYTHON, tmp_path, (tmp_path / "z.py",)),
    ]


def test_collect_from_subdirectory_shares_checkout_store(
    tmp_path: Path, make_prober, make_runner, write_file
) -> None:
    (tmp_path / ".git").mkdir()
    write_file(tmp_path / "pyproject.toml", "[project]\nname = 'demo'\n")
    source = write_file(tmp_path / "sub" / "mod.py", "x = 1\n")
    runner = make_runner()
    orchestrator = _orchestrator(tmp_path, make_prober("ruff"), runner)

    orchestrator.handle(_event(EventKind.COLLECT, tmp_path / "sub", source), STRICT)
    orchestrator.handle(_event(EventKind.TURN_END, tmp_path), STRICT)

    assert len(runner.calls) == 1
    command, cwd = runner.calls[0]
    assert cwd == tmp_path
    assert command[-1] == "sub/mod.py"
