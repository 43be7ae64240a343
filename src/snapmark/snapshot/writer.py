# topmark:header:start
#
#   project      : SnapMark
#   file         : writer.py
#   file_relpath : src/snapmark/snapshot/writer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""File lifecycle: commit a finalized `FileResult` to a sink.

This module is the only place where SnapMark writes or deletes snapshot files.
It turns the mapping computed by `SnapshotStore.finalize` into one of three
effects:

* the mapping is empty and a file existed: delete the file, then the snapshot
  directory when no other file is left in it;
* the mapping is non-empty and ``dirty``: replace the whole file;
* otherwise: nothing, and no filesystem access at all.

Sinks
-----
- FileSystemSink: atomic whole-file replacement on disk.
- NullSink: no-op (dry-run); reports what would happen.
"""

from __future__ import annotations

import os
import tempfile
from typing import TYPE_CHECKING, Protocol

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.snapshot.codec import render_snapshot_file
from snapmark.snapshot.errors import SnapshotWriteError
from snapmark.snapshot.status import FileOutcome, FileResult

if TYPE_CHECKING:
    from pathlib import Path

logger: SnapmarkLogger = get_logger(__name__)


class SnapshotSink(Protocol):
    """Protocol for the sinks used by `SnapshotFileWriter`.

    ``dry_run`` tells the writer whether the sink skips all I/O.
    """

    dry_run: bool

    def write_text(self, path: Path, text: str) -> None:
        """Replace ``path`` with ``text``."""
        ...

    def remove(self, path: Path) -> None:
        """Delete ``path`` and its directory when that directory is now empty."""
        ...


class NullSink:
    """Dry-run sink: does not touch the filesystem."""

    dry_run: bool = True

    def write_text(self, path: Path, text: str) -> None:
        """No-op write for dry-run mode."""
        logger.debug("NullSink: would write %d bytes to %s", len(text.encode("utf-8")), path)

    def remove(self, path: Path) -> None:
        """No-op removal for dry-run mode."""
        logger.debug("NullSink: would remove %s", path)


class FileSystemSink:
    """Filesystem sink with atomic whole-file replacement."""

    dry_run: bool = False

    def write_text(self, path: Path, text: str) -> None:
        """Atomically replace ``path`` with ``text``.

        The content goes to a temporary file in the target directory, is flushed
        and fsynced, then renamed over ``path`` with `os.replace`, so readers only
        ever see the old or the new file.

        Raises:
            OSError: If the directory cannot be created or the file cannot be written.
        """
        directory: Path = path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("FileSystemSink: wrote %d bytes to file %s", len(text.encode("utf-8")), path)

    def remove(self, path: Path) -> None:
        """Delete ``path``, then its directory if it holds no other entries.

        Raises:
            OSError: If the file exists but cannot be deleted.
        """
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("FileSystemSink: %s already gone", path)
        else:
            logger.debug("FileSystemSink: removed %s", path)
        try:
            path.parent.rmdir()
        except OSError:
            # Not empty (or removed concurrently): keep it.
            return
        logger.debug("FileSystemSink: removed empty directory %s", path.parent)


def select_sink(*, apply_changes: bool) -> SnapshotSink:
    """Return `FileSystemSink` when applying changes, `NullSink` otherwise."""
    if not apply_changes:
        logger.debug("Selected NULL sink (apply_changes is False)")
        return NullSink()
    logger.debug("Selected file system sink (apply_changes is True)")
    return FileSystemSink()


class SnapshotFileWriter:
    """Applies finalized results to a sink.

    Args:
        sink (SnapshotSink | None): Target sink; defaults to `FileSystemSink`.
    """

    def __init__(self, sink: SnapshotSink | None = None) -> None:
        self.sink: SnapshotSink = sink or FileSystemSink()

    def apply(self, result: FileResult, path: Path | None = None) -> FileResult:
        """Commit ``result`` to ``path`` (defaults to ``result.snapshot_path``).

        Write failures, including text that cannot be encoded, never propagate:
        they are logged and recorded on ``result.error`` with outcome FAILED so
        other files are unaffected.

        Args:
            result (FileResult): Output of `SnapshotStore.finalize`.
            path (Path | None): Override for the target file.

        Returns:
            FileResult: The same result, with ``outcome`` and ``file_removed`` set.
        """
        target: Path = path or result.snapshot_path
        try:
            if result.should_remove:
                self.sink.remove(target)
                result.file_removed = True
                result.outcome = FileOutcome.PREVIEWED if self.sink.dry_run else FileOutcome.REMOVED
            elif result.should_write:
                self.sink.write_text(target, render_snapshot_file(result.entries))
                result.outcome = FileOutcome.PREVIEWED if self.sink.dry_run else FileOutcome.WRITTEN
            else:
                result.outcome = FileOutcome.UNCHANGED
        except (OSError, UnicodeError) as exc:
            err = SnapshotWriteError(f"cannot update snapshot file {target}: {exc}", path=target)
            logger.error("%s", err)
            result.error = str(err)
            result.file_removed = False
            result.outcome = FileOutcome.FAILED
        return result


def apply_result(result: FileResult, *, apply_changes: bool = True) -> FileResult:
    """Convenience wrapper: select a sink and apply ``result``."""
    return SnapshotFileWriter(select_sink(apply_changes=apply_changes)).apply(result)
