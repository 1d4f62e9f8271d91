# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for Maven and Gradle driven Java analysis tasks."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from ..models import Diagnostic
from ..severity import Severity
from .base import ParseContext, build_diagnostic

PMD_FAILURE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"PMD Failure: (?P<target>\S+?):(?P<line>\d+) Rule:(?P<code>\w+) Priority:\d+ (?P<message>.+)$"
)
SPOTBUGS_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?:High|Medium|Low|Scariest|Scary|Troubling|Of Concern):\s+(?P<message>.+?)\s+"
    r"At\s+(?P<file>[\w$.-]+\.java):\[lines? (?P<line>\d+)(?:-\d+)?\]\s+(?P<code>[A-Z][A-Z0-9_]+)"
)
MAVEN_COMPILER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"\[(?P<severity>ERROR|WARNING)\]\s+(?P<file>\S+\.java):\[(?P<line>\d+),(?P<col>\d+)\]\s+(?P<message>.+)$"
)
JAVAC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>\S+\.java):(?P<line>\d+):\s*(?P<severity>error|warning):\s*(?P<message>.+)$"
)
GRADLE_PMD_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:\[ant:pmd\]\s*)?(?P<file>\S+\.java):(?P<line>\d+):\s*(?:(?P<code>[A-Z][A-Za-z]+):\s+)?(?P<message>.+)$"
)


def parse_maven(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse PMD, SpotBugs and compiler findings from Maven console output.

    Maven's ``pmd:check`` reports the failing class rather than a path; the
    class name is kept as the file so the agent can still locate it.
    """

    results: list[Diagnostic] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        if match := PMD_FAILURE_PATTERN.search(line):
            file, severity, column = match.group("target"), Severity.ERROR, None
        elif match := SPOTBUGS_PATTERN.search(line):
            file, severity, column = match.group("file"), Severity.ERROR, None
        elif match := MAVEN_COMPILER_PATTERN.search(line):
            file = match.group("file")
            severity = Severity.ERROR if match.group("severity") == "ERROR" else Severity.WARNING
            column = int(match.group("col"))
        else:
            continue
        groups = match.groupdict()
        results.append(
            build_diagnostic(
                file=file,
                line=int(match.group("line")),
                column=column,
                severity=severity,
                message=match.group("message"),
                code=groups.get("code"),
                tool=context.tool,
            )
        )
    return results


def parse_gradle(lines: Sequence[str], context: ParseContext) -> Sequence[Diagnostic]:
    """Parse PMD console lines and javac errors from Gradle output."""

    results: list[Diagnostic] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        if match := JAVAC_PATTERN.match(line):
            severity = Severity.ERROR if match.group("severity") == "error" else Severity.WARNING
            code = None
        elif match := GRADLE_PMD_PATTERN.match(line):
            severity = Severity.ERROR
            code = match.group("code")
        else:
            continue
        results.append(
            build_diagnostic(
                file=match.group("file"),
                line=int(match.group("line")),
                column=None,
                severity=severity,
                message=match.group("message"),
                code=code,
                tool=context.tool,
            )
        )
    return results


__all__ = ["parse_gradle", "parse_maven"]
