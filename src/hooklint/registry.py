# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static per-language linter chains and first-available selection."""

from __future__ import annotations

from collections.abc import Collection, Iterator, Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .languages import LanguageTag
from .probe import Prober, ProbeKind, ProbeSpec


class LinterSpec(BaseModel):
    """Static description of one linter entry in a language chain."""

    model_config = ConfigDict(frozen=True)

    name: str
    language: LanguageTag
    priority: int
    probe: ProbeSpec
    args: tuple[str, ...] = Field(default_factory=tuple)
    append_files: bool = True
    filter_to_targets: bool = False
    lenient_args: tuple[str, ...] = Field(default_factory=tuple)
    parser: str
    missing_markers: tuple[str, ...] = Field(default_factory=tuple)


def _node(name: str, priority: int, **kwargs: object) -> LinterSpec:
    return LinterSpec(
        name=name,
        language=LanguageTag.JAVASCRIPT,
        priority=priority,
        probe=ProbeSpec(kind=ProbeKind.NODE_BIN, executable=name),
        **kwargs,
    )


def _python(name: str, priority: int, **kwargs: object) -> LinterSpec:
    return LinterSpec(
        name=name,
        language=LanguageTag.PYTHON,
        priority=priority,
        probe=ProbeSpec(kind=ProbeKind.PYTHON_BIN, executable=name),
        **kwargs,
    )


_JAVASCRIPT_CHAIN: Final[tuple[LinterSpec, ...]] = (
    _node(
        "oxlint",
        10,
        args=("--format=unix",),
        lenient_args=(
            "--allow",
            "no-unused-vars",
            "--allow",
            "@typescript-eslint/no-unused-vars",
        ),
        parser="oxlint-unix",
    ),
    _node(
        "biome",
        20,
        args=("lint", "--reporter=github"),
        lenient_args=(
            "--skip=correctness/noUnusedVariables",
            "--skip=correctness/noUnusedImports",
            "--skip=correctness/noUnusedFunctionParameters",
        ),
        parser="biome-github",
    ),
    _node(
        "eslint",
        30,
        args=("--format", "json"),
        lenient_args=(
            "--rule",
            "no-unused-vars: off",
            "--rule",
            "@typescript-eslint/no-unused-vars: off",
        ),
        parser="eslint-json",
    ),
    LinterSpec(
        name="npm-run-lint",
        language=LanguageTag.JAVASCRIPT,
        priority=40,
        probe=ProbeSpec(kind=ProbeKind.PACKAGE_SCRIPT, executable="npm", script="lint"),
        args=("run", "lint", "--silent", "--"),
        parser="generic-text",
        missing_markers=("Missing script",),
    ),
)

_PYTHON_CHAIN: Final[tuple[LinterSpec, ...]] = (
    _python(
        "ruff",
        10,
        args=("check", "--output-format=json", "--no-fix"),
        lenient_args=("--ignore", "F401,F841,ARG001,ARG002,ARG003,ARG004,ARG005"),
        parser="ruff-json",
    ),
    _python(
        "mypy",
        20,
        args=(
            "--show-column-numbers",
            "--show-error-codes",
            "--no-error-summary",
            "--no-color-output",
            "--no-pretty",
        ),
        parser="mypy-text",
    ),
    _python(
        "pylint",
        30,
        args=("--output-format=json", "--score=n"),
        lenient_args=("--disable=unused-import,unused-variable,unused-argument",),
        parser="pylint-json",
    ),
    _python(
        "flake8",
        40,
        lenient_args=("--extend-ignore=F401,F841",),
        parser="flake8-text",
    ),
)

_MAVEN_PROBE = {"executable": "mvn", "wrapper": "mvnw", "requires_any": ("pom.xml",)}
_GRADLE_PROBE = {"executable": "gradle", "wrapper": "gradlew", "requires_any": ("build.gradle", "build.gradle.kts")}

_JAVA_CHAIN: Final[tuple[LinterSpec, ...]] = (
    LinterSpec(
        name="mvn-pmd",
        language=LanguageTag.JAVA,
        priority=10,
        probe=ProbeSpec(kind=ProbeKind.BUILD_TOOL, **_MAVEN_PROBE),
        args=("-q", "-B", "pmd:check", "-Dpmd.printFailingErrors=true"),
        append_files=False,
        parser="maven-text",
        missing_markers=("No plugin found for prefix 'pmd'", "Unknown lifecycle phase"),
    ),
    LinterSpec(
        name="mvn-spotbugs",
        language=LanguageTag.JAVA,
        priority=20,
        probe=ProbeSpec(kind=ProbeKind.BUILD_TOOL, **_MAVEN_PROBE),
        args=("-q", "-B", "spotbugs:check"),
        append_files=False,
        parser="maven-text",
        missing_markers=("No plugin found for prefix 'spotbugs'", "Unknown lifecycle phase"),
    ),
    LinterSpec(
        name="gradle-pmd",
        language=LanguageTag.JAVA,
        priority=30,
        probe=ProbeSpec(kind=ProbeKind.BUILD_TOOL, **_GRADLE_PROBE),
        args=("-q", "pmdMain"),
        append_files=False,
        parser="gradle-text",
        missing_markers=("Task 'pmdMain' not found",),
    ),
    LinterSpec(
        name="gradle-spotbugs",
        language=LanguageTag.JAVA,
        priority=40,
        probe=ProbeSpec(kind=ProbeKind.BUILD_TOOL, **_GRADLE_PROBE),
        args=("-q", "spotbugsMain"),
        append_files=False,
        parser="gradle-text",
        missing_markers=("Task 'spotbugsMain' not found",),
    ),
)

_GO_CHAIN: Final[tuple[LinterSpec, ...]] = (
    LinterSpec(
        name="golangci-lint",
        language=LanguageTag.GO,
        priority=10,
        probe=ProbeSpec(kind=ProbeKind.PATH, executable="golangci-lint"),
        args=("run",),
        lenient_args=("--disable=unused",),
        parser="golangci-text",
    ),
    LinterSpec(
        name="staticcheck",
        language=LanguageTag.GO,
        priority=20,
        probe=ProbeSpec(kind=ProbeKind.PATH, executable="staticcheck"),
        args=("-f", "json"),
        lenient_args=("-checks", "inherit,-U1000"),
        parser="staticcheck-json",
    ),
    LinterSpec(
        name="go-vet",
        language=LanguageTag.GO,
        priority=30,
        probe=ProbeSpec(kind=ProbeKind.PATH, executable="go"),
        args=("vet",),
        parser="go-vet-text",
    ),
)

_RUST_CHAIN: Final[tuple[LinterSpec, ...]] = (
    LinterSpec(
        name="clippy",
        language=LanguageTag.RUST,
        priority=10,
        probe=ProbeSpec(kind=ProbeKind.BUILD_TOOL, executable="cargo", requires_any=("Cargo.toml",)),
        args=("clippy", "--message-format=json", "--quiet", "--", "-D", "warnings"),
        append_files=False,
        filter_to_targets=True,
        lenient_args=("-A", "unused_variables", "-A", "unused_imports", "-A", "dead_code"),
        parser="clippy-json",
    ),
)

REGISTRY: Final[Mapping[LanguageTag, tuple[LinterSpec, ...]]] = {
    LanguageTag.JAVASCRIPT: _JAVASCRIPT_CHAIN,
    LanguageTag.PYTHON: _PYTHON_CHAIN,
    LanguageTag.JAVA: _JAVA_CHAIN,
    LanguageTag.GO: _GO_CHAIN,
    LanguageTag.RUST: _RUST_CHAIN,
}


def linter_chain(
    language: LanguageTag,
    registry: Mapping[LanguageTag, tuple[LinterSpec, ...]] | None = None,
) -> tuple[LinterSpec, ...]:
    """Return the chain for *language* sorted by priority (empty for unknown)."""

    chains = registry if registry is not None else REGISTRY
    return tuple(sorted(chains.get(language, ()), key=lambda spec: spec.priority))


def iter_available(
    language: LanguageTag,
    root: Path,
    prober: Prober,
    *,
    disabled: Collection[str] = (),
    registry: Mapping[LanguageTag, tuple[LinterSpec, ...]] | None = None,
) -> Iterator[LinterSpec]:
    """Yield usable linters for *language* in preference order."""

    for spec in linter_chain(language, registry):
        if spec.name in disabled:
            continue
        if prober.available(spec.probe, root):
            yield spec


def select_linter(
    language: LanguageTag,
    root: Path,
    prober: Prober | None = None,
    *,
    disabled: Collection[str] = (),
    registry: Mapping[LanguageTag, tuple[LinterSpec, ...]] | None = None,
) -> LinterSpec | None:
    """Return the first available linter for *language*, or ``None``."""

    active = prober or Prober()
    return next(iter_available(language, root, active, disabled=disabled, registry=registry), None)


__all__ = ["REGISTRY", "LinterSpec", "iter_available", "linter_chain", "select_linter"]
