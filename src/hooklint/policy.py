# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lenient-mode suppression of diagnostics produced by half-finished edits."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Final

from .languages import LanguageTag
from .models import Diagnostic, Mode
from .registry import LinterSpec

# Rule identifiers for unused variables, imports, parameters and dead code.
# Keys are compared lower-cased against every variant produced by _rule_keys.
LENIENT_RULES: Final[dict[LanguageTag, frozenset[str]]] = {
    LanguageTag.PYTHON: frozenset(
        {
            "f401",
            "f841",
            "arg001",
            "arg002",
            "arg003",
            "arg004",
            "arg005",
            "w0611",
            "w0612",
            "w0613",
            "unused-import",
            "unused-variable",
            "unused-argument",
            "unused-ignore",
            "unreachable",
        }
    ),
    LanguageTag.JAVASCRIPT: frozenset(
        {
            "no-unused-vars",
            "no-unreachable",
            "nounusedvariables",
            "nounusedimports",
            "nounusedfunctionparameters",
            "nounreachable",
            "ts6133",
            "ts6192",
            "ts6196",
        }
    ),
    LanguageTag.GO: frozenset({"unused", "deadcode", "varcheck", "structcheck", "u1000"}),
    LanguageTag.RUST: frozenset(
        {
            "unused_variables",
            "unused_imports",
            "unused_mut",
            "dead_code",
            "unreachable_code",
        }
    ),
    LanguageTag.JAVA: frozenset(
        {
            "unusedlocalvariable",
            "unusedprivatefield",
            "unusedprivatemethod",
            "unusedformalparameter",
            "unusedimports",
            "unnecessaryimport",
            "dls_dead_local_store",
            "urf_unread_field",
            "uuf_unused_field",
        }
    ),
}

_PARENTHESISED: Final[re.Pattern[str]] = re.compile(r"\(([^()]+)\)")


def suppression_args(spec: LinterSpec, mode: Mode) -> tuple[str, ...]:
    """Return the tool flags disabling incomplete-edit rules for *spec*."""

    return spec.lenient_args if mode.lenient else ()


def _rule_keys(code: str) -> set[str]:
    """Return the lower-cased spellings a rule identifier may match under.

    ``eslint(no-unused-vars)``, ``lint/correctness/noUnusedVariables`` and
    ``clippy::unused_imports`` style codes all reduce to their bare rule name.
    """

    lowered = code.strip().lower()
    keys = {lowered, lowered.rsplit("/", 1)[-1], lowered.rsplit("::", 1)[-1]}
    keys.update(match.group(1).rsplit("/", 1)[-1] for match in _PARENTHESISED.finditer(lowered))
    return keys


def is_suppressed(diagnostic: Diagnostic, language: LanguageTag) -> bool:
    """Return ``True`` when *diagnostic* belongs to a lenient-mode rule family."""

    if not diagnostic.code:
        return False
    denylist = LENIENT_RULES.get(language, frozenset())
    return not denylist.isdisjoint(_rule_keys(diagnostic.code))


def apply_mode(diagnostics: Iterable[Diagnostic], mode: Mode, language: LanguageTag) -> list[Diagnostic]:
    """Filter *diagnostics* according to *mode*.

    Strict mode returns the diagnostics unchanged. Lenient mode drops the
    incomplete-edit rule families for *language* and nothing else, so it can
    only shrink the list. The same denylist applies to every linter of a
    language.

    Args:
        diagnostics: Normalized diagnostics of one linter run.
        mode: Invocation mode.
        language: Language the diagnostics were produced for.

    Returns:
        list[Diagnostic]: The retained diagnostics in their original order.
    """

    if not mode.lenient:
        return list(diagnostics)
    return [diag for diag in diagnostics if not is_suppressed(diag, language)]


def suppressed_count(before: Sequence[Diagnostic], after: Sequence[Diagnostic]) -> int:
    """Return how many diagnostics lenient filtering removed."""

    return len(before) - len(after)


__all__ = ["LENIENT_RULES", "apply_mode", "is_suppressed", "suppressed_count", "suppression_args"]
