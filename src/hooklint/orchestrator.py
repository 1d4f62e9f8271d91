# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose classification, collection, linting and encoding per hook event."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config import HookConfig
from .exceptions import StateStoreError
from .languages import LanguageTag, classify, find_project_root
from .models import EventKind, FileEvent, HookResponse, LintResult, Mode
from .policy import apply_mode, suppressed_count
from .probe import Prober
from .process_utils import CommandRunner, run_command
from .protocol import encode
from .registry import REGISTRY, LinterSpec, iter_available
from .runner import run_linter
from .state import CollectionStore, workspace_root

LOGGER = logging.getLogger(__name__)

StoreFactory = Callable[[FileEvent], CollectionStore]

# Linters of these languages accept named files from a single package directory only.
PER_DIRECTORY_LANGUAGES: Final[frozenset[LanguageTag]] = frozenset({LanguageTag.GO})


@dataclass(frozen=True, slots=True)
class LintGroup:
    """Files of one language sharing a project root."""

    language: LanguageTag
    root: Path
    files: tuple[Path, ...]


def group_paths(paths: Iterable[Path], fallback: Path | None = None) -> list[LintGroup]:
    """Partition *paths* by ``(language, project root)``, dropping unknown files.

    Languages in :data:`PER_DIRECTORY_LANGUAGES` are further split by parent
    directory, one group per package, while keeping the project root as the
    working directory. Groups and the files inside them are sorted so the
    outcome does not depend on the order paths were collected in.
    """

    buckets: dict[tuple[LanguageTag, Path, Path], set[Path]] = defaultdict(set)
    for path in paths:
        language = classify(path)
        if language is LanguageTag.UNKNOWN:
            LOGGER.debug("skipping %s: no linter chain for its extension", path)
            continue
        root = find_project_root(path, language, fallback)
        directory = path.parent if language in PER_DIRECTORY_LANGUAGES else root
        buckets[(language, root, directory)].add(path)
    ordered = sorted(buckets.items(), key=lambda item: (item[0][0].value, str(item[0][1]), str(item[0][2])))
    return [
        LintGroup(language=language, root=root, files=tuple(sorted(files)))
        for (language, root, _), files in ordered
    ]


@dataclass(slots=True)
class Orchestrator:
    """Drive one hook invocation from :class:`FileEvent` to :class:`HookResponse`.

    Probing, command execution and the state store are injectable so the
    whole pipeline can be exercised without real linters installed.
    """

    config: HookConfig = field(default_factory=HookConfig)
    prober: Prober = field(default_factory=Prober)
    runner: CommandRunner = run_command
    registry: Mapping[LanguageTag, tuple[LinterSpec, ...]] = field(default_factory=lambda: REGISTRY)
    store_factory: StoreFactory | None = None

    def store_for(self, event: FileEvent) -> CollectionStore:
        """Return the collection store keyed by the event's workspace and session."""

        if self.store_factory is not None:
            return self.store_factory(event)
        return CollectionStore(
            workspace_root(event.cwd),
            event.session_id,
            state_dir=self.config.state_dir,
            lock_timeout=self.config.lock_timeout_s,
        )

    def handle(self, event: FileEvent, mode: Mode) -> HookResponse:
        """Dispatch *event* to the collect, turn-end or immediate workflow."""

        if event.kind is EventKind.COLLECT:
            return self.collect(event, mode)
        if event.kind is EventKind.TURN_END:
            return self.lint_collected(event, mode)
        return self.lint_now(event, mode)

    def collect(self, event: FileEvent, mode: Mode) -> HookResponse:
        """Record the event's paths for the next turn end; never blocks."""

        for path in event.paths:
            LOGGER.debug("collecting %s (%s)", path, classify(path).value)
        if not event.paths:
            return encode((), mode, statuses=("no file paths in hook input",))
        try:
            added = self.store_for(event).record_many(event.paths)
        except StateStoreError as exc:
            LOGGER.warning("unable to record touched files: %s", exc)
            return encode((), mode, statuses=(f"could not record touched files: {exc}",))
        return encode((), mode, statuses=(f"collected {len(event.paths)} file(s), {added} new",))

    def lint_collected(self, event: FileEvent, mode: Mode) -> HookResponse:
        """Drain the collected paths and lint them."""

        try:
            drained = self.store_for(event).drain_all()
        except StateStoreError as exc:
            LOGGER.warning("treating collection state as empty: %s", exc)
            drained = set()
        paths = {Path(entry) for entry in drained} | set(event.paths)
        if not paths:
            return encode((), mode, statuses=("nothing to lint",))
        return self._lint(paths, event, mode)

    def lint_now(self, event: FileEvent, mode: Mode) -> HookResponse:
        """Lint the event's own paths without touching the collection store."""

        if not event.paths:
            return encode((), mode, statuses=("nothing to lint",))
        return self._lint(event.paths, event, mode)

    def _lint(self, paths: Iterable[Path], event: FileEvent, mode: Mode) -> HookResponse:
        groups = group_paths(paths, event.cwd)
        if not groups:
            return encode((), mode, statuses=("nothing to lint",))
        results = self.run_groups(groups, mode)
        return encode(results, mode, max_reported=self.config.max_reported)

    def run_groups(self, groups: list[LintGroup], mode: Mode) -> list[LintResult]:
        """Lint every group, concurrently when more than one worker is configured."""

        workers = min(self.config.jobs, len(groups))
        if workers <= 1:
            return [self.lint_group(group, mode) for group in groups]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="hooklint") as pool:
            return list(pool.map(lambda group: self.lint_group(group, mode), groups))

    def lint_group(self, group: LintGroup, mode: Mode) -> LintResult:
        """Run the first usable linter of the group's chain.

        A linter whose run reports itself unavailable (for example a missing
        build plugin) is skipped in favour of the next candidate.
        """

        candidates = iter_available(
            group.language,
            group.root,
            self.prober,
            disabled=self.config.disabled_linters,
            registry=self.registry,
        )
        for spec in candidates:
            result = run_linter(
                spec,
                group.files,
                mode,
                group.root,
                prober=self.prober,
                runner=self.runner,
                timeout=self.config.timeout_s,
            )
            if result.unavailable:
                LOGGER.debug("%s unavailable for %s: %s", spec.name, group.root, result.note)
                continue
            kept = apply_mode(result.diagnostics, mode, group.language)
            dropped = suppressed_count(result.diagnostics, kept)
            if dropped:
                LOGGER.debug("lenient mode suppressed %d %s diagnostic(s)", dropped, spec.name)
            return result.model_copy(update={"diagnostics": kept})
        LOGGER.debug("no linter available for %s in %s", group.language.value, group.root)
        return LintResult(linter=None, language=group.language, root=group.root, files=group.files)


__all__ = ["PER_DIRECTORY_LANGUAGES", "LintGroup", "Orchestrator", "group_paths"]
