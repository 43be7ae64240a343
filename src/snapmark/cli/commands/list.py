# topmark:header:start
#
#   project      : SnapMark
#   file         : list.py
#   file_relpath : src/snapmark/cli/commands/list.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark `list` command.

Lists snapshot files below the given paths with their entry counts. Malformed
files are flagged but do not change the exit status; use ``snapmark check``
for validation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from snapmark.cli.cmd_common import build_config, get_effective_verbosity, resolve_input_paths
from snapmark.cli.options import common_config_options, common_paths_argument
from snapmark.config.logging import get_logger
from snapmark.rendering.text import maybe_colorize, pluralize
from snapmark.snapshot.inventory import inspect_snapshot_files
from snapmark.snapshot.status import SnapshotFileStatus

if TYPE_CHECKING:
    from pathlib import Path

    from snapmark.cli_shared.console_api import ConsoleLike
    from snapmark.config.model import Config
    from snapmark.snapshot.inventory import SnapshotFileInfo

logger = get_logger(__name__)


@click.command(
    name="list",
    help="List snapshot files and the number of snapshots they hold.",
)
@common_paths_argument
@common_config_options
def list_command(
    *,
    paths: tuple[str, ...],
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """List snapshot files below PATHS (default: current directory).

    Args:
        paths (tuple[str, ...]): Files or directories to search.
        config_paths (tuple[str, ...]): Extra config files to merge.
        no_config (bool): Skip config discovery.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = get_effective_verbosity(ctx)

    roots: list[Path] = resolve_input_paths(paths)
    config: Config = build_config(anchor=roots[0], config_paths=config_paths, no_config=no_config)
    infos: list[SnapshotFileInfo] = inspect_snapshot_files(roots, config)

    if not infos:
        if vlevel >= 0:
            console.print("No snapshot files found.")
        return

    width: int = SnapshotFileStatus.OK.value_length
    total: int = 0
    for info in infos:
        label: str = maybe_colorize(
            info.status.color, info.status.value.ljust(width), enabled=console.enable_color
        )
        if info.status is SnapshotFileStatus.MALFORMED:
            console.print(f"{label}  {info.path}  ({info.error})")
            continue
        total += len(info.keys)
        console.print(f"{label}  {info.path}  {pluralize(len(info.keys), 'snapshot')}")
        if vlevel > 0:
            for key in info.keys:
                console.print(f"    {key}")

    if vlevel >= 0:
        console.print()
        console.print(
            f"{pluralize(total, 'snapshot')} in {pluralize(len(infos), 'snapshot file')}."
        )
