# topmark:header:start
#
#   project      : SnapMark
#   file         : summary.py
#   file_relpath : src/snapmark/snapshot/summary.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run aggregation: fold per file results into run-wide totals and text.

`RunSummary` is a plain additive record. It can be folded one `FileResult` at
a time (`merge`), built from a sequence (`from_results`), combined with another
partial summary (``a + b``, used to merge parallel workers) and carried across
process boundaries with `to_dict` / `from_dict`.

`render_summary_lines` produces the human-facing text::

    Snapshot Summary
     › 4 snapshots written in 2 test files.
    4 tests passed (4 total in 2 test suites, 4 snapshots, run time 0.8s)

The ``Snapshot Summary`` block only appears when something happened to the
snapshots of the run (written, updated, removed, failed, or reported).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import TYPE_CHECKING, Any

from yachalk import chalk

from snapmark.rendering.text import maybe_colorize, pluralize

if TYPE_CHECKING:
    from collections.abc import Iterable

    from snapmark.rendering.colored_enum import Colorizer
    from snapmark.snapshot.status import FileResult

UPDATE_FLAG: str = "--snapshot-update"


@dataclass
class RunSummary:
    """Run-wide snapshot and test counters.

    Snapshot counters are folded from `FileResult` values; test counters
    (``tests_*``, ``test_suites``, ``duration``) are filled in by the host
    test runner.
    """

    files_added: int = 0
    added: int = 0
    files_updated: int = 0
    updated: int = 0
    files_removed_obsolete: int = 0
    removed_obsolete: int = 0
    files_obsolete: int = 0
    obsolete: int = 0
    files_removed: int = 0
    matched: int = 0
    unmatched: int = 0
    files_unmatched: int = 0
    files_unreadable: int = 0
    files_failed: int = 0
    total: int = 0
    tests_passed: int = 0
    tests_failed: int = 0
    tests_skipped: int = 0
    test_suites: int = 0
    duration: float | None = None

    # --- folding -----------------------------------------------------------

    def merge(self, result: FileResult) -> RunSummary:
        """Fold one file result into this summary (in place) and return ``self``."""
        if result.added:
            self.files_added += 1
            self.added += result.added
        if result.updated:
            self.files_updated += 1
            self.updated += result.updated
        if result.removed_obsolete:
            self.files_removed_obsolete += 1
            self.removed_obsolete += result.removed_obsolete
        if result.obsolete:
            self.files_obsolete += 1
            self.obsolete += result.obsolete
        if result.file_removed:
            self.files_removed += 1
        if result.unmatched:
            self.files_unmatched += 1
        if result.unreadable:
            self.files_unreadable += 1
        if result.error and not result.unreadable:
            self.files_failed += 1
        self.matched += result.matched
        self.unmatched += result.unmatched
        if not result.file_removed:
            self.total += len(result.entries)
        return self

    @classmethod
    def from_results(cls, results: Iterable[FileResult]) -> RunSummary:
        """Build a summary from a sequence of file results."""
        summary = cls()
        for result in results:
            summary.merge(result)
        return summary

    def __add__(self, other: object) -> RunSummary:
        if not isinstance(other, RunSummary):
            return NotImplemented
        data: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "duration":
                continue
            data[f.name] = getattr(self, f.name) + getattr(other, f.name)
        durations: list[float] = [d for d in (self.duration, other.duration) if d is not None]
        data["duration"] = max(durations) if durations else None
        return RunSummary(**data)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping of all counters."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunSummary:
        """Rebuild a summary from `to_dict` output; unknown keys are ignored."""
        names: set[str] = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    # --- derived -----------------------------------------------------------

    @property
    def tests_total(self) -> int:
        """Number of tests that ran (passed, failed or skipped)."""
        return self.tests_passed + self.tests_failed + self.tests_skipped

    @property
    def has_snapshot_activity(self) -> bool:
        """Whether the ``Snapshot Summary`` block has anything to show."""
        return bool(
            self.added
            or self.updated
            or self.removed_obsolete
            or self.obsolete
            or self.files_removed
            or self.unmatched
            or self.files_unreadable
            or self.files_failed
        )

    @property
    def success(self) -> bool:
        """Whether no snapshot failed and every file could be read and written."""
        return not (self.unmatched or self.files_unreadable or self.files_failed)


def render_snapshot_lines(summary: RunSummary, *, color: bool = False) -> list[str]:
    """Render the ``Snapshot Summary`` block (empty when nothing happened)."""
    if not summary.has_snapshot_activity:
        return []

    def styled(styler: Colorizer, text: str) -> str:
        return maybe_colorize(styler, text, enabled=color)

    lines: list[str] = [styled(chalk.bold, "Snapshot Summary")]
    if summary.added:
        lines.append(
            " › "
            + styled(chalk.bold.green, pluralize(summary.added, "snapshot") + " written")
            + f" in {pluralize(summary.files_added, 'test file')}."
        )
    if summary.updated:
        lines.append(
            " › "
            + styled(chalk.bold.green, pluralize(summary.updated, "snapshot") + " updated")
            + f" in {pluralize(summary.files_updated, 'test file')}."
        )
    if summary.unmatched:
        lines.append(
            " › "
            + styled(chalk.bold.red, pluralize(summary.unmatched, "snapshot test") + " failed")
            + f" in {pluralize(summary.files_unmatched, 'test file')}. "
            + styled(
                chalk.dim,
                f"Inspect your code changes or re-run with {UPDATE_FLAG} to update them.",
            )
        )
    if summary.removed_obsolete:
        lines.append(
            " › "
            + styled(
                chalk.bold.red,
                pluralize(summary.removed_obsolete, "obsolete snapshot") + " removed",
            )
            + "."
        )
    if summary.obsolete:
        lines.append(
            " › "
            + styled(chalk.bold.yellow, pluralize(summary.obsolete, "obsolete snapshot") + " found")
            + f" in {pluralize(summary.files_obsolete, 'test file')}, "
            + styled(chalk.dim, f"re-run with {UPDATE_FLAG} to remove them.")
        )
    if summary.files_removed:
        lines.append(
            " › "
            + styled(chalk.bold.red, pluralize(summary.files_removed, "snapshot file") + " removed")
            + "."
        )
    if summary.files_unreadable:
        lines.append(
            " › "
            + styled(
                chalk.bold.red,
                pluralize(summary.files_unreadable, "snapshot file") + " could not be read",
            )
            + "."
        )
    if summary.files_failed:
        lines.append(
            " › "
            + styled(
                chalk.bold.red,
                pluralize(summary.files_failed, "snapshot file") + " could not be written",
            )
            + "."
        )
    return lines


def render_totals_line(summary: RunSummary, *, color: bool = False) -> str:
    """Render the reporter line with test and snapshot totals.

    Example: ``1 test failed, 3 tests passed (4 total in 2 test suites, 4 snapshots, run time 1.2s)``
    """
    parts: list[str] = []
    if summary.tests_failed:
        parts.append(
            maybe_colorize(
                chalk.bold.red, pluralize(summary.tests_failed, "test") + " failed", enabled=color
            )
        )
    parts.append(
        maybe_colorize(
            chalk.bold.green, pluralize(summary.tests_passed, "test") + " passed", enabled=color
        )
    )
    if summary.tests_skipped:
        parts.append(pluralize(summary.tests_skipped, "test") + " skipped")
    details: str = (
        f"{summary.tests_total} total in {pluralize(summary.test_suites, 'test suite')}, "
        f"{pluralize(summary.total, 'snapshot')}"
    )
    if summary.duration is not None:
        details += f", run time {summary.duration:.1f}s"
    return f"{', '.join(parts)} ({details})"


def render_summary_lines(summary: RunSummary, *, color: bool = False) -> list[str]:
    """Render the full summary: the snapshot block followed by the totals line."""
    return [*render_snapshot_lines(summary, color=color), render_totals_line(summary, color=color)]
