# topmark:header:start
#
#   project      : SnapMark
#   file         : check.py
#   file_relpath : src/snapmark/cli/commands/check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark `check` command.

Validates every snapshot file below the given paths and finds orphaned
snapshot files (whose test file no longer exists). Without ``--apply`` this is
a dry run; with ``--apply`` orphans are deleted through the lifecycle writer
and the run summary is printed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from snapmark.cli.cmd_common import build_config, get_effective_verbosity, resolve_input_paths
from snapmark.cli.errors import SnapmarkConfigError, SnapmarkIOError
from snapmark.cli.options import common_config_options, common_paths_argument
from snapmark.cli_shared.exit_codes import ExitCode
from snapmark.config.logging import get_logger
from snapmark.rendering.text import maybe_colorize, pluralize
from snapmark.snapshot.inventory import inspect_snapshot_files
from snapmark.snapshot.status import FileOutcome, SnapshotFileStatus
from snapmark.snapshot.store import SnapshotStore
from snapmark.snapshot.summary import RunSummary, render_snapshot_lines
from snapmark.snapshot.writer import apply_result

if TYPE_CHECKING:
    from pathlib import Path

    from snapmark.cli_shared.console_api import ConsoleLike
    from snapmark.config.model import Config
    from snapmark.snapshot.inventory import SnapshotFileInfo
    from snapmark.snapshot.status import FileResult

logger = get_logger(__name__)


def _remove_orphans(infos: list[SnapshotFileInfo]) -> tuple[RunSummary, list[FileResult]]:
    summary = RunSummary()
    results: list[FileResult] = []
    for info in infos:
        store: SnapshotStore = SnapshotStore.from_path(info.path, test_path=info.test_path)
        result: FileResult = apply_result(store.finalize(test_file_exists=False))
        info.status = (
            SnapshotFileStatus.REMOVED
            if result.outcome is FileOutcome.REMOVED
            else SnapshotFileStatus.FAILED
        )
        summary.merge(result)
        results.append(result)
    return summary, results


@click.command(
    name="check",
    help="Validate snapshot files and find (or, with --apply, remove) orphaned ones.",
)
@common_paths_argument
@common_config_options
@click.option(
    "--apply", "apply_changes", is_flag=True, help="Remove orphaned snapshot files (off by default)."
)
def check_command(
    *,
    paths: tuple[str, ...],
    config_paths: tuple[str, ...],
    no_config: bool,
    apply_changes: bool,
) -> None:
    """Check snapshot files below PATHS (default: current directory).

    Args:
        paths (tuple[str, ...]): Files or directories to search.
        config_paths (tuple[str, ...]): Extra config files to merge.
        no_config (bool): Skip config discovery.
        apply_changes (bool): Delete orphaned snapshot files.

    Raises:
        SnapmarkConfigError: If a snapshot file (with an existing test file) is malformed.
        SnapmarkIOError: If an orphaned snapshot file could not be removed.

    Exit Status:
        SUCCESS (0): All snapshot files are valid (orphans removed with ``--apply``).
        WOULD_CHANGE (2): Dry run found orphaned snapshot files.
        FILE_NOT_FOUND (66): A given path does not exist.
        IO_ERROR (74): An orphaned snapshot file could not be removed.
        CONFIG_ERROR (78): A snapshot file is malformed.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = get_effective_verbosity(ctx)

    roots: list[Path] = resolve_input_paths(paths)
    config: Config = build_config(anchor=roots[0], config_paths=config_paths, no_config=no_config)
    infos: list[SnapshotFileInfo] = inspect_snapshot_files(roots, config)
    logger.debug("Checking %d snapshot file(s)", len(infos))

    orphans: list[SnapshotFileInfo] = [i for i in infos if i.is_orphan]
    malformed: list[SnapshotFileInfo] = [
        i for i in infos if i.status is SnapshotFileStatus.MALFORMED and not i.is_orphan
    ]

    summary: RunSummary | None = None
    failed: list[FileResult] = []
    if apply_changes and orphans:
        summary, results = _remove_orphans(orphans)
        failed = [r for r in results if r.outcome is FileOutcome.FAILED]

    width: int = SnapshotFileStatus.OK.value_length
    for info in infos:
        if info.status is SnapshotFileStatus.OK and vlevel <= 0:
            continue
        label: str = maybe_colorize(
            info.status.color, info.status.value.ljust(width), enabled=console.enable_color
        )
        detail: str = f"  ({info.error})" if info.error else ""
        console.print(f"{label}  {info.path}{detail}")

    if summary is not None:
        console.print()
        for line in render_snapshot_lines(summary, color=console.enable_color):
            console.print(line)
    elif orphans and vlevel >= 0:
        console.print()
        console.print(
            console.styled(
                f"Run `snapmark check --apply` to remove "
                f"{pluralize(len(orphans), 'orphaned snapshot file')}.",
                fg="yellow",
            )
        )

    if failed:
        raise SnapmarkIOError(
            f"Failed to remove {pluralize(len(failed), 'snapshot file')}. See log for details."
        )
    if malformed:
        raise SnapmarkConfigError(f"{pluralize(len(malformed), 'malformed snapshot file')}.")
    if orphans and not apply_changes:
        ctx.exit(ExitCode.WOULD_CHANGE)

    if vlevel >= 0 and not orphans:
        console.print(
            console.styled(
                f"✅ {pluralize(len(infos), 'snapshot file')} checked, no problems found.",
                fg="green",
                bold=True,
            )
        )
