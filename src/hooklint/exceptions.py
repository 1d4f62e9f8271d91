# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by hooklint components."""

from __future__ import annotations


class HookLintError(Exception):
    """Base class for errors raised by hooklint."""


class ConfigError(HookLintError):
    """Raised when configuration input is invalid."""


class PayloadError(HookLintError):
    """Raised when the hook payload on stdin cannot be decoded."""


class StateStoreError(HookLintError):
    """Raised when the collection state file is locked or unreadable."""


__all__ = ["ConfigError", "HookLintError", "PayloadError", "StateStoreError"]
