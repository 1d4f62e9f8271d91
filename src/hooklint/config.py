# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered hook configuration: defaults, TOML files and environment."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError

PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "hooklint"
PROJECT_CONFIG_NAME: Final[str] = ".hooklint.toml"
ENV_PREFIX: Final[str] = "HOOKLINT_"


class HookConfig(BaseModel):
    """Settings shared by every hook invocation in a project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout_s: float = Field(default=30.0, gt=0)
    jobs: int = Field(default=4, ge=1)
    lock_timeout_s: float = Field(default=2.0, ge=0)
    state_dir: Path | None = None
    lenient: bool = False
    debug: bool = False
    max_reported: int = Field(default=50, ge=1)
    disabled_linters: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("disabled_linters", mode="before")
    @classmethod
    def _split_names(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return HookConfig().model_dump()


class TomlConfigSource:
    """Load a flat ``[hooklint]``-style table from a TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self.path = path
        self.name = name or str(path)

    def _read(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                return tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"unable to read {self.path}: {exc}") from exc

    def load(self) -> Mapping[str, Any]:
        return dict(self._read())


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.hooklint]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        tool_section = self._read().get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {self.path} must be a table")
        return dict(section)


class EnvConfigSource:
    """Collect ``HOOKLINT_<FIELD>`` overrides from the environment."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ

    def load(self) -> Mapping[str, Any]:
        overrides: dict[str, Any] = {}
        for field in HookConfig.model_fields:
            value = self._env.get(f"{ENV_PREFIX}{field.upper()}")
            if value is not None and value != "":
                overrides[field] = value
        return overrides


def default_sources(project_root: Path, env: Mapping[str, str] | None = None) -> list[Any]:
    """Return configuration sources for *project_root* in precedence order."""

    return [
        DefaultConfigSource(),
        PyProjectConfigSource(project_root / "pyproject.toml"),
        TomlConfigSource(project_root / PROJECT_CONFIG_NAME),
        EnvConfigSource(env),
    ]


def load_config(
    project_root: Path,
    env: Mapping[str, str] | None = None,
    *,
    sources: Sequence[Any] | None = None,
) -> HookConfig:
    """Merge every configuration source for *project_root*.

    Later sources override earlier ones field by field. A relative
    ``state_dir`` is resolved against *project_root*.

    Args:
        project_root: Directory holding ``pyproject.toml`` / ``.hooklint.toml``.
        env: Environment mapping, defaulting to :data:`os.environ`.
        sources: Explicit source list replacing :func:`default_sources`.

    Returns:
        HookConfig: Validated configuration.

    Raises:
        ConfigError: If a source is unreadable or a value fails validation.
    """

    merged: dict[str, Any] = {}
    for source in sources if sources is not None else default_sources(project_root, env):
        merged.update(source.load())
    try:
        config = HookConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid hooklint configuration: {exc}") from exc
    if config.state_dir is not None and not config.state_dir.is_absolute():
        config = config.model_copy(update={"state_dir": project_root / config.state_dir})
    return config


__all__ = [
    "ENV_PREFIX",
    "DefaultConfigSource",
    "EnvConfigSource",
    "HookConfig",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "default_sources",
    "load_config",
]
