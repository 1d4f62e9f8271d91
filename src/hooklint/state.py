# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cross-process store of files touched during the current editing turn."""

from __future__ import annotations

import fcntl
import hashlib
import logging
import os
import re
import tempfile
import time
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Final

from .constants import DEFAULT_SESSION_ID, PROJECT_DIR_ENV, STATE_DIR_NAME, STATE_FILE_PREFIX, WORKSPACE_MARKERS
from .exceptions import StateStoreError

LOGGER = logging.getLogger(__name__)

_LOCK_POLL_INTERVAL: Final[float] = 0.02
_UNSAFE_SESSION_CHARS: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9_.-]")


def workspace_root(cwd: Path, env: Mapping[str, str] | None = None) -> Path:
    """Return the directory that owns the collection for hooks started in *cwd*.

    ``CLAUDE_PROJECT_DIR`` wins when set. Otherwise the nearest ancestor of
    *cwd* (inclusive) holding a version-control directory is used, so hooks
    fired from different subdirectories of one checkout share a store. A
    *cwd* outside any checkout is its own root.
    """

    configured = (env if env is not None else os.environ).get(PROJECT_DIR_ENV, "").strip()
    if configured:
        project_dir = Path(configured)
        return project_dir if project_dir.is_absolute() else cwd / project_dir
    for candidate in (cwd, *cwd.parents):
        if any((candidate / marker).exists() for marker in WORKSPACE_MARKERS):
            return candidate
    return cwd


def state_file_name(project_root: Path, session_id: str) -> str:
    """Return the log file name for *session_id* within *project_root*."""

    digest = hashlib.sha256(str(project_root).encode("utf-8")).hexdigest()[:16]
    session = _UNSAFE_SESSION_CHARS.sub("_", session_id or DEFAULT_SESSION_ID)[:64]
    return f"{STATE_FILE_PREFIX}-{session}-{digest}.log"


class CollectionStore:
    """Persist a deduplicated set of absolute paths between hook processes.

    The set lives in a newline-delimited log file. Every read-modify-write
    holds an exclusive ``flock`` on a sidecar ``.lock`` file, and rewrites go
    through a temporary file and :func:`os.replace`, so concurrent collectors
    never lose entries and readers never observe a partial file.
    """

    def __init__(
        self,
        project_root: Path,
        session_id: str = DEFAULT_SESSION_ID,
        *,
        state_dir: Path | None = None,
        lock_timeout: float = 2.0,
    ) -> None:
        self.project_root = project_root
        self.session_id = session_id
        self.directory = state_dir if state_dir is not None else project_root / STATE_DIR_NAME
        self.path = self.directory / state_file_name(project_root, session_id)
        self.lock_path = self.path.with_name(f"{self.path.name}.lock")
        self.lock_timeout = lock_timeout

    def record_touched(self, path: Path | str) -> None:
        """Add *path* to the store; recording the same path twice is a no-op."""

        self.record_many((path,))

    def record_many(self, paths: Iterable[Path | str]) -> int:
        """Add every path in *paths* under a single lock.

        Args:
            paths: Absolute paths reported by edit events.

        Returns:
            int: Number of paths that were not already present.

        Raises:
            StateStoreError: If the lock cannot be acquired or the log is unreadable.
        """

        incoming = [str(path) for path in paths]
        if not incoming:
            return 0
        with self._locked():
            entries = self._read_entries()
            known = set(entries)
            added = 0
            for entry in incoming:
                if entry not in known:
                    entries.append(entry)
                    known.add(entry)
                    added += 1
            if added:
                self._write_entries(entries)
        LOGGER.debug("recorded %d new path(s) in %s", added, self.path)
        return added

    def drain_all(self) -> set[str]:
        """Return every recorded path and clear the store in one locked step.

        Raises:
            StateStoreError: If the lock cannot be acquired or the log is unreadable.
        """

        with self._locked():
            entries = self._read_entries()
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                raise StateStoreError(f"unable to clear {self.path}: {exc}") from exc
        LOGGER.debug("drained %d path(s) from %s", len(entries), self.path)
        return set(entries)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            handle = self.lock_path.open("a+")
        except OSError as exc:
            raise StateStoreError(f"unable to open lock file {self.lock_path}: {exc}") from exc
        try:
            deadline = time.monotonic() + self.lock_timeout
            while True:
                try:
                    fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError as exc:
                    if time.monotonic() >= deadline:
                        raise StateStoreError(
                            f"timed out after {self.lock_timeout:.1f}s waiting for {self.lock_path}"
                        ) from exc
                    time.sleep(_LOCK_POLL_INTERVAL)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        finally:
            handle.close()

    def _read_entries(self) -> list[str]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StateStoreError(f"unable to read {self.path}: {exc}") from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StateStoreError(f"{self.path} is not valid UTF-8") from exc
        entries: list[str] = []
        seen: set[str] = set()
        for line in text.splitlines():
            entry = line.strip()
            if entry and entry not in seen:
                seen.add(entry)
                entries.append(entry)
        return entries

    def _write_entries(self, entries: list[str]) -> None:
        payload = "".join(f"{entry}\n" for entry in entries)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StateStoreError(f"unable to write {self.path}: {exc}") from exc


__all__ = ["CollectionStore", "state_file_name", "workspace_root"]
