# topmark:header:start
#
#   project      : SnapMark
#   file         : status.py
#   file_relpath : src/snapmark/snapshot/status.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Status enums and result records produced by the snapshot core.

Conventions:
  * Enums inherit from `EnumIntrospectionMixin` and `ColoredStrEnum` so the CLI
    can align and colorize labels; values are human-readable strings.
  * `MatchResult` is produced once per assertion, `FileResult` once per test
    file at finalize time. The lifecycle writer completes a `FileResult` by
    setting its `outcome` (and `file_removed`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from yachalk import chalk

from snapmark.core.enum_mixins import EnumIntrospectionMixin
from snapmark.rendering.colored_enum import ColoredStrEnum

if TYPE_CHECKING:
    from pathlib import Path


class MatchStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Outcome of a single snapshot assertion."""

    NEW = ("written", chalk.yellow_bright)
    PASS = ("passed", chalk.green)
    FAIL = ("failed", chalk.red_bright)


class FileOutcome(EnumIntrospectionMixin, ColoredStrEnum):
    """What the lifecycle writer did with a snapshot file."""

    PENDING = ("pending", chalk.gray)
    UNCHANGED = ("unchanged", chalk.green)
    WRITTEN = ("written", chalk.yellow_bright)
    REMOVED = ("removed", chalk.yellow_bright)
    PREVIEWED = ("would change", chalk.red_bright)
    FAILED = ("write failed", chalk.red_bright)


@dataclass(frozen=True)
class MatchResult:
    """Result of matching one serialized value against its recording.

    Attributes:
        status (MatchStatus): NEW, PASS or FAIL.
        key (str): Rendered snapshot key.
        actual (str): Serialized value produced in this run.
        expected (str | None): Recorded value; set on FAIL when available.
        message (str | None): Extra explanation (e.g. an unreadable snapshot file).
    """

    status: MatchStatus
    key: str
    actual: str
    expected: str | None = None
    message: str | None = None

    @property
    def passed(self) -> bool:
        """Whether the assertion succeeded (NEW counts as success)."""
        return self.status != MatchStatus.FAIL


@dataclass
class FileResult:
    """Per test file statistics and the final snapshot mapping.

    Attributes:
        snapshot_path (Path): The snapshot file this result describes.
        test_path (Path | None): The test file, if known.
        added (int): Snapshots written for the first time.
        updated (int): Existing snapshots overwritten in update mode.
        matched (int): Snapshots that matched their recording.
        unmatched (int): Snapshots that did not match (failures).
        checked (int): Keys exercised in this run.
        obsolete (int): Obsolete entries detected but left on disk (reported
            only when obsolete reporting is enabled).
        removed_obsolete (int): Obsolete entries dropped in update mode.
        file_removed (bool): Whether the whole snapshot file was deleted.
        entries (dict[str, str]): Resulting mapping to persist.
        dirty (bool): Whether `entries` differs from what is on disk.
        existed (bool): Whether a snapshot file existed at load time.
        orphan (bool): Whether the test file no longer exists.
        unreadable (bool): Whether the existing snapshot file could not be parsed.
        error (str | None): File-level failure message (unreadable or unwritable file).
        outcome (FileOutcome): Filled in by the lifecycle writer.
    """

    snapshot_path: Path
    test_path: Path | None = None
    added: int = 0
    updated: int = 0
    matched: int = 0
    unmatched: int = 0
    checked: int = 0
    obsolete: int = 0
    removed_obsolete: int = 0
    file_removed: bool = False
    entries: dict[str, str] = field(default_factory=lambda: {})
    dirty: bool = False
    existed: bool = False
    orphan: bool = False
    unreadable: bool = False
    error: str | None = None
    outcome: FileOutcome = FileOutcome.PENDING

    @property
    def should_remove(self) -> bool:
        """Whether the lifecycle writer must delete the snapshot file.

        Unreadable files are only deleted when their test file is gone.
        """
        return self.existed and not self.entries and (self.orphan or not self.unreadable)

    @property
    def should_write(self) -> bool:
        """Whether the lifecycle writer must (re)write the snapshot file."""
        return bool(self.entries) and self.dirty


class SnapshotFileStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Health of a snapshot file on disk, as reported by the CLI."""

    OK = ("ok", chalk.green)
    ORPHAN = ("orphan", chalk.yellow_bright)
    MALFORMED = ("malformed", chalk.red_bright)
    REMOVED = ("removed", chalk.yellow_bright)
    FAILED = ("failed", chalk.red_bright)
