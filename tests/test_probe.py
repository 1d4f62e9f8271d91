# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for linter availability probing."""

from __future__ import annotations

import json
from pathlib import Path

from hooklint.probe import ProbeKind, ProbeSpec, has_package_script


def test_node_bin_requires_local_install(tmp_path: Path, make_prober, write_file) -> None:
    probe = ProbeSpec(kind=ProbeKind.NODE_BIN, executable="oxlint")
    prober = make_prober("oxlint")

    assert prober.resolve(probe, tmp_path) is None

    local = write_file(tmp_path / "node_modules" / ".bin" / "oxlint")
    assert prober.resolve(probe, tmp_path) == (str(local),)


def test_python_bin_prefers_project_virtualenv(tmp_path: Path, make_prober, write_file) -> None:
    probe = ProbeSpec(kind=ProbeKind.PYTHON_BIN, executable="ruff")
    prober = make_prober("ruff")

    assert prober.resolve(probe, tmp_path) == ("/usr/bin/ruff",)

    venv_ruff = write_file(tmp_path / ".venv" / "bin" / "ruff")
    assert prober.resolve(probe, tmp_path) == (str(venv_ruff),)


def test_package_script_needs_script_and_npm(tmp_path: Path, make_prober, write_file) -> None:
    probe = ProbeSpec(kind=ProbeKind.PACKAGE_SCRIPT, executable="npm", script="lint")
    write_file(tmp_path / "package.json", json.dumps({"scripts": {"lint": "eslint ."}}))

    assert not make_prober().available(probe, tmp_path)
    assert make_prober("npm").resolve(probe, tmp_path) == ("/usr/bin/npm",)


def test_build_tool_prefers_wrapper(tmp_path: Path, make_prober, write_file) -> None:
    probe = ProbeSpec(
        kind=ProbeKind.BUILD_TOOL,
        executable="gradle",
        wrapper="gradlew",
        requires_any=("build.gradle", "build.gradle.kts"),
    )
    prober = make_prober("gradle")

    assert prober.resolve(probe, tmp_path) is None

    write_file(tmp_path / "build.gradle.kts")
    assert prober.resolve(probe, tmp_path) == ("/usr/bin/gradle",)

    wrapper = write_file(tmp_path / "gradlew")
    assert prober.resolve(probe, tmp_path) == (str(wrapper),)


def test_has_package_script_handles_bad_manifests(tmp_path: Path, write_file) -> None:
    assert not has_package_script(tmp_path, "lint")

    write_file(tmp_path / "package.json", "{not json")
    assert not has_package_script(tmp_path, "lint")

    write_file(tmp_path / "package.json", json.dumps({"scripts": {"test": "jest"}}))
    assert not has_package_script(tmp_path, "lint")
