# topmark:header:start
#
#   project      : SnapMark
#   file         : store.py
#   file_relpath : src/snapmark/snapshot/store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per test file snapshot registry.

A `SnapshotStore` is built once per test file run from the persisted snapshot
file, answers `match` queries for every assertion made by that file's tests,
and computes additions, updates and obsolete entries in `finalize`. It never
touches the filesystem after loading; applying the result is the job of
`snapmark.snapshot.writer`.

Entry states across one run::

    UNSEEN -> NEW | MATCHED | UPDATED | OBSOLETE

Outside update mode obsolete entries are detected but always kept on disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.snapshot.codec import parse_snapshot_file
from snapmark.snapshot.errors import SerializationError, SnapshotFileError
from snapmark.snapshot.keys import KeyGenerator, SnapshotKey, split_test_name
from snapmark.snapshot.serializer import Serializer, default_serializer
from snapmark.snapshot.status import FileResult, MatchResult, MatchStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

logger: SnapmarkLogger = get_logger(__name__)


class SnapshotStore:
    """Snapshot registry for one test file.

    Args:
        snapshot_path (Path): Location of the persisted snapshot file.
        test_path (Path | None): The test file the snapshots belong to.
        update (bool): Update mode: overwrite mismatches and drop obsolete entries.
        report_obsolete (bool): Report obsolete entries outside update mode.
        serializer (Serializer | None): Serializer used by `assert_value`;
            defaults to the shared instance.
    """

    def __init__(
        self,
        snapshot_path: Path,
        *,
        test_path: Path | None = None,
        update: bool = False,
        report_obsolete: bool = False,
        serializer: Serializer | None = None,
    ) -> None:
        self.snapshot_path = snapshot_path
        self.test_path = test_path
        self.update = update
        self.report_obsolete = report_obsolete
        self.serializer: Serializer = serializer or default_serializer()

        self.keys = KeyGenerator()
        self.persisted: dict[str, str] = {}
        self.checked: set[str] = set()
        self.unchecked_additions: dict[str, str] = {}
        self.updated_keys: set[str] = set()
        self.skipped_tests: set[str] = set()
        self.matched: int = 0
        self.unmatched: int = 0
        self.existed: bool = False
        self.load_error: SnapshotFileError | None = None

    def __repr__(self) -> str:
        return (
            f"SnapshotStore({str(self.snapshot_path)!r}, update={self.update}, "
            f"persisted={len(self.persisted)}, checked={len(self.checked)})"
        )

    # --- loading -----------------------------------------------------------

    @classmethod
    def from_path(
        cls,
        snapshot_path: Path,
        *,
        test_path: Path | None = None,
        update: bool = False,
        report_obsolete: bool = False,
        serializer: Serializer | None = None,
    ) -> SnapshotStore:
        """Create a store and load ``snapshot_path`` if it exists."""
        store = cls(
            snapshot_path,
            test_path=test_path,
            update=update,
            report_obsolete=report_obsolete,
            serializer=serializer,
        )
        text: str | None = None
        if snapshot_path.is_file():
            try:
                text = snapshot_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                store.existed = True
                store._record_load_error(
                    SnapshotFileError(f"cannot read file: {exc}", path=snapshot_path)
                )
                return store
        store.load(text)
        return store

    def load(self, text: str | None) -> None:
        """Load persisted entries from snapshot file text.

        Args:
            text (str | None): File content, or ``None`` when the file does not exist.
        """
        self.keys.reset()
        self.persisted = {}
        self.load_error = None
        if text is None:
            self.existed = False
            logger.trace("No snapshot file at %s", self.snapshot_path)
            return
        self.existed = True
        try:
            self.persisted = parse_snapshot_file(text, path=self.snapshot_path)
        except SnapshotFileError as exc:
            self._record_load_error(exc)
            return
        logger.debug("Loaded %d snapshot(s) from %s", len(self.persisted), self.snapshot_path)

    def _record_load_error(self, exc: SnapshotFileError) -> None:
        self.load_error = exc
        if self.update:
            logger.warning("Discarding unreadable snapshot file (update mode): %s", exc)
        else:
            logger.error("Could not read snapshot file: %s", exc)

    @property
    def unreadable(self) -> bool:
        """Whether the persisted file could not be read and is not being replaced."""
        return self.load_error is not None and not self.update

    # --- matching ----------------------------------------------------------

    def match(self, key: SnapshotKey | str, actual: str) -> MatchResult:
        """Match a serialized value against the recording for ``key``.

        Args:
            key (SnapshotKey | str): The key of this assertion.
            actual (str): Serialized value produced in this run.

        Returns:
            MatchResult: NEW when nothing was recorded yet, PASS when the value
            matches (or was updated in update mode), FAIL otherwise.
        """
        rendered: str = key.render() if isinstance(key, SnapshotKey) else key
        self.checked.add(rendered)

        if self.unreadable:
            self.unmatched += 1
            return MatchResult(
                status=MatchStatus.FAIL,
                key=rendered,
                actual=actual,
                message=f"could not read snapshot file {self.load_error}",
            )

        if rendered in self.unchecked_additions:
            expected: str | None = self.unchecked_additions[rendered]
        else:
            expected = self.persisted.get(rendered)

        if expected is None:
            self.unchecked_additions[rendered] = actual
            logger.trace("%s: new snapshot %r", self.snapshot_path, rendered)
            return MatchResult(status=MatchStatus.NEW, key=rendered, actual=actual)

        if actual == expected:
            self.matched += 1
            return MatchResult(status=MatchStatus.PASS, key=rendered, actual=actual)

        if self.update:
            if rendered in self.unchecked_additions:
                self.unchecked_additions[rendered] = actual
            else:
                self.persisted[rendered] = actual
                self.updated_keys.add(rendered)
            logger.trace("%s: updated snapshot %r", self.snapshot_path, rendered)
            return MatchResult(status=MatchStatus.PASS, key=rendered, actual=actual)

        self.unmatched += 1
        logger.trace("%s: snapshot %r does not match", self.snapshot_path, rendered)
        return MatchResult(status=MatchStatus.FAIL, key=rendered, actual=actual, expected=expected)

    def assert_value(self, test_name: str, value: Any) -> MatchResult:
        """Serialize ``value`` and match it under the next key for ``test_name``.

        The key is consumed before serializing so a failing serialization does
        not shift the counters of later assertions in the same test.

        Raises:
            SerializationError: If ``value`` cannot be serialized. The key's
                recording is kept and the assertion counts as unmatched.
        """
        key: SnapshotKey = self.keys.next_key(test_name)
        try:
            actual: str = self.serializer.serialize(value)
        except SerializationError:
            self.checked.add(key.render())
            self.unmatched += 1
            raise
        return self.match(key, actual)

    def mark_test_skipped(self, test_name: str) -> None:
        """Protect the recordings of a skipped or deselected test from obsolete pruning."""
        self.skipped_tests.add(test_name)

    def mark_tests_skipped(self, test_names: Iterable[str]) -> None:
        """Bulk variant of `mark_test_skipped`."""
        for name in test_names:
            self.mark_test_skipped(name)

    # --- finalize ----------------------------------------------------------

    def obsolete_keys(self) -> list[str]:
        """Return persisted keys not exercised (and not protected) in this run."""
        return [
            key
            for key in self.persisted
            if key not in self.checked and split_test_name(key) not in self.skipped_tests
        ]

    def finalize(self, *, test_file_exists: bool = True) -> FileResult:
        """Compute the per file result and the mapping to persist.

        Args:
            test_file_exists (bool): ``False`` when the test file is gone; the
                snapshot file is then deleted whatever the mode.

        Returns:
            FileResult: Statistics plus the resulting mapping and ``dirty`` flag.
        """
        result = FileResult(
            snapshot_path=self.snapshot_path,
            test_path=self.test_path,
            added=len(self.unchecked_additions),
            updated=len(self.updated_keys),
            matched=self.matched,
            unmatched=self.unmatched,
            checked=len(self.checked),
            existed=self.existed,
        )

        if not test_file_exists:
            # Content is irrelevant once the owning test file is gone.
            result.orphan = True
            result.entries = {}
            result.dirty = self.existed
            logger.debug("Test file for %s is gone; snapshot file will be removed", self.snapshot_path)
            return result

        if self.unreadable:
            # Never rewrite a file we could not read.
            result.unreadable = True
            result.error = str(self.load_error)
            return result

        obsolete: list[str] = self.obsolete_keys()
        removed: set[str] = set()
        if self.update:
            removed = set(obsolete)
            result.removed_obsolete = len(removed)
        elif self.report_obsolete:
            result.obsolete = len(obsolete)

        entries: dict[str, str] = {k: v for k, v in self.persisted.items() if k not in removed}
        entries.update(self.unchecked_additions)
        result.entries = entries
        result.dirty = bool(
            self.unchecked_additions
            or self.updated_keys
            or removed
            or (self.load_error is not None and self.existed)
        )
        logger.debug(
            "Finalized %s: added=%d updated=%d matched=%d unmatched=%d obsolete=%d removed=%d",
            self.snapshot_path,
            result.added,
            result.updated,
            result.matched,
            result.unmatched,
            len(obsolete),
            result.removed_obsolete,
        )
        return result
