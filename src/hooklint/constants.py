# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across hooklint modules."""

from __future__ import annotations

from typing import Final

HOOK_TAG: Final[str] = "[hooklint]"

LANGUAGE_EXTENSIONS: Final[dict[str, frozenset[str]]] = {
    "javascript": frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts", ".cts"}),
    "rust": frozenset({".rs"}),
    "python": frozenset({".py", ".pyi"}),
    "java": frozenset({".java"}),
    "go": frozenset({".go"}),
}

# Ordered by preference; the first marker found while walking up wins.
LANGUAGE_MARKERS: Final[dict[str, tuple[str, ...]]] = {
    "javascript": ("package.json",),
    "rust": ("Cargo.toml",),
    "python": ("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt"),
    "java": ("pom.xml", "build.gradle", "build.gradle.kts"),
    "go": ("go.mod",),
}

PYTHON_VENV_BIN_DIRS: Final[tuple[str, ...]] = (".venv/bin", "venv/bin", ".env/bin", "env/bin")
NODE_BIN_DIR: Final[str] = "node_modules/.bin"

STATE_DIR_NAME: Final[str] = ".claude/hooklint"
STATE_FILE_PREFIX: Final[str] = "touched"
DEFAULT_SESSION_ID: Final[str] = "default"
WORKSPACE_MARKERS: Final[tuple[str, ...]] = (".git", ".hg", ".svn", ".jj")
PROJECT_DIR_ENV: Final[str] = "CLAUDE_PROJECT_DIR"

TURN_END_EVENTS: Final[frozenset[str]] = frozenset({"Stop", "SubagentStop"})

__all__ = [
    "DEFAULT_SESSION_ID",
    "HOOK_TAG",
    "LANGUAGE_EXTENSIONS",
    "LANGUAGE_MARKERS",
    "NODE_BIN_DIR",
    "PROJECT_DIR_ENV",
    "PYTHON_VENV_BIN_DIRS",
    "STATE_DIR_NAME",
    "STATE_FILE_PREFIX",
    "TURN_END_EVENTS",
    "WORKSPACE_MARKERS",
]
