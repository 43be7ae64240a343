# topmark:header:start
#
#   project      : SnapMark
#   file         : inventory.py
#   file_relpath : src/snapmark/snapshot/inventory.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Inspection of snapshot files on disk, independent of any test run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.snapshot.codec import parse_snapshot_file
from snapmark.snapshot.errors import SnapshotFileError
from snapmark.snapshot.paths import iter_snapshot_files, owner_test_path
from snapmark.snapshot.status import SnapshotFileStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from snapmark.config.model import Config

logger: SnapmarkLogger = get_logger(__name__)


@dataclass
class SnapshotFileInfo:
    """What is known about one snapshot file.

    Attributes:
        path (Path): The snapshot file.
        test_path (Path | None): The owning test file.
        status (SnapshotFileStatus): OK, ORPHAN or MALFORMED.
        keys (list[str]): Snapshot keys, empty when the file is malformed.
        error (str | None): Parse error for malformed files.
    """

    path: Path
    test_path: Path | None
    status: SnapshotFileStatus
    keys: list[str] = field(default_factory=lambda: [])
    error: str | None = None

    @property
    def is_orphan(self) -> bool:
        """Whether the owning test file is gone."""
        return self.test_path is None or not self.test_path.exists()


def inspect_snapshot_file(path: Path, config: Config) -> SnapshotFileInfo:
    """Parse ``path`` and classify it; never raises for malformed content."""
    owner: Path | None = owner_test_path(path, config)
    try:
        entries: dict[str, str] = parse_snapshot_file(path.read_text(encoding="utf-8"), path=path)
    except (OSError, UnicodeDecodeError) as exc:
        err = SnapshotFileError(f"cannot read file: {exc}", path=path)
        logger.debug("%s", err)
        return SnapshotFileInfo(path, owner, SnapshotFileStatus.MALFORMED, error=str(err))
    except SnapshotFileError as exc:
        logger.debug("%s", exc)
        return SnapshotFileInfo(path, owner, SnapshotFileStatus.MALFORMED, error=str(exc))

    info = SnapshotFileInfo(path, owner, SnapshotFileStatus.OK, keys=list(entries))
    if info.is_orphan:
        info.status = SnapshotFileStatus.ORPHAN
    return info


def inspect_snapshot_files(roots: Iterable[Path], config: Config) -> list[SnapshotFileInfo]:
    """Inspect every snapshot file below ``roots``."""
    return [inspect_snapshot_file(p, config) for p in iter_snapshot_files(roots, config)]
