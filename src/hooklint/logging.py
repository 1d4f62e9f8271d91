# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic logging routed to stderr so stdout stays reserved for the hook response."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV: Final[str] = "HOOKLINT_LOG_LEVEL"
_PACKAGE_LOGGER: Final[str] = "hooklint"


def resolve_level(debug: bool, env: Mapping[str, str] | None = None) -> int:
    """Return the log level implied by ``--debug`` and ``HOOKLINT_LOG_LEVEL``."""

    if debug:
        return logging.DEBUG
    raw = (env if env is not None else os.environ).get(LOG_LEVEL_ENV, "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw) if raw else None
    return level if isinstance(level, int) else logging.WARNING


def build_console() -> Console:
    """Return a Rich console writing to stderr."""

    return Console(stderr=True, soft_wrap=True, highlight=False)


def configure_logging(debug: bool = False, env: Mapping[str, str] | None = None) -> logging.Logger:
    """Attach a single :class:`RichHandler` to the package logger.

    Calling this repeatedly replaces the previous handler instead of stacking
    a new one, which keeps repeated CLI invocations in one process quiet.
    """

    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=build_console(),
        show_path=False,
        show_time=False,
        markup=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(resolve_level(debug, env))
    logger.propagate = False
    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
