# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public parser exports and the format-id lookup table."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

from ..models import Diagnostic
from .base import JsonParser, ParseContext, Parser, TextParser
from .go import parse_go_vet, parse_golangci_text, parse_staticcheck
from .java import parse_gradle, parse_maven
from .javascript import parse_biome, parse_eslint, parse_generic, parse_oxlint
from .python import parse_flake8, parse_mypy, parse_pylint, parse_ruff
from .rust import parse_cargo_clippy

LOGGER = logging.getLogger(__name__)

PARSERS: Final[Mapping[str, Parser]] = {
    "ruff-json": JsonParser(parse_ruff),
    "mypy-text": TextParser(parse_mypy, streams="stdout"),
    "pylint-json": JsonParser(parse_pylint),
    "flake8-text": TextParser(parse_flake8, streams="stdout"),
    "oxlint-unix": TextParser(parse_oxlint, streams="stdout"),
    "biome-github": TextParser(parse_biome),
    "eslint-json": JsonParser(parse_eslint),
    "generic-text": TextParser(parse_generic),
    "golangci-text": TextParser(parse_golangci_text, streams="stdout"),
    "staticcheck-json": JsonParser(parse_staticcheck),
    "go-vet-text": TextParser(parse_go_vet),
    "clippy-json": JsonParser(parse_cargo_clippy),
    "maven-text": TextParser(parse_maven),
    "gradle-text": TextParser(parse_gradle),
}


def normalize(format_id: str, stdout: str, stderr: str, context: ParseContext) -> list[Diagnostic]:
    """Convert captured linter output into diagnostics.

    The call never raises: an unknown format or a parser failure on
    malformed output yields an empty list and a debug log entry.

    Args:
        format_id: Parser identifier taken from the linter registry.
        stdout: Captured standard output.
        stderr: Captured standard error.
        context: Tool name and project root of the run.

    Returns:
        list[Diagnostic]: Parsed diagnostics, possibly empty.
    """

    parser = PARSERS.get(format_id)
    if parser is None:
        LOGGER.debug("no parser registered for format %r", format_id)
        return []
    try:
        return list(parser.parse(stdout, stderr, context=context))
    except Exception as exc:  # noqa: BLE001 - third-party output is untrusted
        LOGGER.debug("%s output could not be parsed as %s: %s", context.tool, format_id, exc)
        return []


__all__ = [
    "PARSERS",
    "JsonParser",
    "ParseContext",
    "Parser",
    "TextParser",
    "normalize",
    "parse_biome",
    "parse_cargo_clippy",
    "parse_eslint",
    "parse_flake8",
    "parse_generic",
    "parse_go_vet",
    "parse_golangci_text",
    "parse_gradle",
    "parse_maven",
    "parse_mypy",
    "parse_oxlint",
    "parse_pylint",
    "parse_ruff",
    "parse_staticcheck",
]
