# topmark:header:start
#
#   project      : SnapMark
#   file         : session.py
#   file_relpath : src/snapmark/snapshot/session.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""One snapshot run: a store per test file, finalization and the run summary.

`SnapshotSession` is the seam between a host test runner and the snapshot
core. The runner registers every test file it executes, routes assertions to
`assert_match`, reports skipped tests, and calls `finalize` once at the end of
the run. The session then finalizes every registered file (including files
whose tests no longer make any snapshot assertion, so their snapshot file is
removed in update mode), removes orphaned snapshot files next to them, and
folds everything into a `RunSummary`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.config.model import Config
from snapmark.snapshot.paths import owner_test_path, snapshot_dirs_near, snapshot_path_for
from snapmark.snapshot.store import SnapshotStore
from snapmark.snapshot.summary import RunSummary
from snapmark.snapshot.writer import SnapshotFileWriter

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from snapmark.snapshot.serializer import Serializer
    from snapmark.snapshot.status import FileResult, MatchResult

logger: SnapmarkLogger = get_logger(__name__)


class SnapshotSession:
    """Snapshot state for one test run.

    Args:
        config (Config | None): Effective configuration; defaults to `Config()`.
        serializer (Serializer | None): Serializer shared by all stores.
        writer (SnapshotFileWriter | None): Lifecycle writer; defaults to a
            filesystem writer.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        serializer: Serializer | None = None,
        writer: SnapshotFileWriter | None = None,
    ) -> None:
        self.config: Config = config or Config()
        self.serializer = serializer
        self.writer: SnapshotFileWriter = writer or SnapshotFileWriter()
        self.summary = RunSummary()
        self.results: list[FileResult] = []
        self._stores: dict[Path, SnapshotStore] = {}
        self._registered: list[Path] = []
        self._finalized: set[Path] = set()

    # --- registration ------------------------------------------------------

    def register_test_file(self, test_path: Path) -> None:
        """Mark ``test_path`` as executed in this run so it is finalized at the end."""
        resolved: Path = test_path.resolve()
        if resolved not in self._registered:
            self._registered.append(resolved)

    @property
    def test_files(self) -> list[Path]:
        """Registered test files, in registration order."""
        return list(self._registered)

    def store_for(self, test_path: Path) -> SnapshotStore:
        """Return (loading on first use) the store of ``test_path``."""
        resolved: Path = test_path.resolve()
        store: SnapshotStore | None = self._stores.get(resolved)
        if store is None:
            self.register_test_file(resolved)
            store = SnapshotStore.from_path(
                snapshot_path_for(resolved, self.config),
                test_path=resolved,
                update=self.config.update,
                report_obsolete=self.config.report_obsolete,
                serializer=self.serializer,
            )
            self._stores[resolved] = store
        return store

    # --- per test ----------------------------------------------------------

    def assert_match(self, test_path: Path, test_name: str, value: Any) -> MatchResult:
        """Serialize ``value`` and match it for ``test_name`` in ``test_path``.

        Raises:
            SerializationError: If ``value`` cannot be serialized.
        """
        return self.store_for(test_path).assert_value(test_name, value)

    def mark_tests_skipped(self, test_path: Path, test_names: Iterable[str]) -> None:
        """Protect the snapshots of skipped, deselected or unrun tests of ``test_path``."""
        self.store_for(test_path).mark_tests_skipped(test_names)

    # --- end of run --------------------------------------------------------

    def finalize_file(self, test_path: Path) -> FileResult:
        """Finalize one test file, apply its result and fold it into the summary."""
        resolved: Path = test_path.resolve()
        store: SnapshotStore = self.store_for(resolved)
        result: FileResult = store.finalize(test_file_exists=resolved.exists())
        return self._commit(resolved, result)

    def _commit(self, key: Path, result: FileResult) -> FileResult:
        self.writer.apply(result)
        self.summary.merge(result)
        self.results.append(result)
        self._finalized.add(key)
        self._stores.pop(key, None)
        logger.debug("Committed %s: %s", result.snapshot_path, result.outcome.value)
        return result

    def remove_orphans(self) -> list[FileResult]:
        """Remove snapshot files next to registered tests whose test file is gone."""
        removed: list[FileResult] = []
        for directory in snapshot_dirs_near(self._registered, self.config):
            for snapshot_path in sorted(directory.iterdir()):
                owner: Path | None = owner_test_path(snapshot_path, self.config)
                if owner is None or not snapshot_path.is_file():
                    continue
                owner = owner.resolve()
                if owner.exists() or owner in self._finalized:
                    continue
                logger.info("Removing orphaned snapshot file %s", snapshot_path)
                store = SnapshotStore.from_path(snapshot_path, test_path=owner, update=self.config.update)
                removed.append(self._commit(owner, store.finalize(test_file_exists=False)))
        return removed

    def finalize(self, *, remove_orphans: bool | None = None) -> RunSummary:
        """Finalize every registered test file and return the run summary.

        Args:
            remove_orphans (bool | None): Override `Config.remove_orphans`
                (the pytest plugin disables it on xdist workers).

        Returns:
            RunSummary: Snapshot counters of the run; test counters are left
            for the host runner to fill in.
        """
        for test_path in self._registered:
            if test_path not in self._finalized:
                self.finalize_file(test_path)
        do_remove: bool = self.config.remove_orphans if remove_orphans is None else remove_orphans
        if do_remove:
            self.remove_orphans()
        return self.summary
