# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Availability probes deciding whether a linter can run in a project."""

from __future__ import annotations

import json
import logging
import shutil
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .constants import NODE_BIN_DIR, PYTHON_VENV_BIN_DIRS

LOGGER = logging.getLogger(__name__)

Which = Callable[[str], str | None]


class ProbeKind(str, Enum):
    """Strategies used to locate a linter executable."""

    NODE_BIN = "node_bin"
    PYTHON_BIN = "python_bin"
    PATH = "path"
    PACKAGE_SCRIPT = "package_script"
    BUILD_TOOL = "build_tool"


class ProbeSpec(BaseModel):
    """Describe how to check that a linter is usable in a project."""

    model_config = ConfigDict(frozen=True)

    kind: ProbeKind
    executable: str
    script: str | None = None
    wrapper: str | None = None
    requires_any: tuple[str, ...] = Field(default_factory=tuple)


class Prober:
    """Resolve probe descriptions into concrete command prefixes.

    ``which`` is injectable so tests can describe the machine's ``PATH``
    without touching the real environment.
    """

    def __init__(self, which: Which | None = None) -> None:
        self._which: Which = which or shutil.which

    def available(self, probe: ProbeSpec, root: Path) -> bool:
        """Return ``True`` when *probe* resolves inside *root*."""

        return self.resolve(probe, root) is not None

    def resolve(self, probe: ProbeSpec, root: Path) -> tuple[str, ...] | None:
        """Return the command prefix for *probe*, or ``None`` when unavailable."""

        if probe.kind is ProbeKind.NODE_BIN:
            return _existing(root / NODE_BIN_DIR / probe.executable)
        if probe.kind is ProbeKind.PYTHON_BIN:
            for venv_dir in PYTHON_VENV_BIN_DIRS:
                found = _existing(root / venv_dir / probe.executable)
                if found:
                    return found
            return self._on_path(probe.executable)
        if probe.kind is ProbeKind.PATH:
            return self._on_path(probe.executable)
        if probe.kind is ProbeKind.PACKAGE_SCRIPT:
            if probe.script is None or not has_package_script(root, probe.script):
                return None
            return self._on_path(probe.executable)
        if probe.requires_any and not any((root / name).exists() for name in probe.requires_any):
            return None
        if probe.wrapper:
            found = _existing(root / probe.wrapper)
            if found:
                return found
        return self._on_path(probe.executable)

    def _on_path(self, executable: str) -> tuple[str, ...] | None:
        resolved = self._which(executable)
        return (resolved,) if resolved else None


def _existing(candidate: Path) -> tuple[str, ...] | None:
    return (str(candidate),) if candidate.is_file() else None


def has_package_script(root: Path, script: str) -> bool:
    """Return ``True`` when ``package.json`` under *root* defines *script*."""

    manifest = root / "package.json"
    try:
        payload = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return False
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.debug("unable to read %s: %s", manifest, exc)
        return False
    scripts = payload.get("scripts") if isinstance(payload, dict) else None
    return isinstance(scripts, dict) and bool(scripts.get(script))


__all__ = ["ProbeKind", "ProbeSpec", "Prober", "Which", "has_package_script"]
