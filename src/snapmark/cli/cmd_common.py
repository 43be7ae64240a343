# topmark:header:start
#
#   project      : SnapMark
#   file         : cmd_common.py
#   file_relpath : src/snapmark/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plumbing shared by the snapshot commands.

These helpers avoid policy (exit code rules, messages) and only encapsulate
config resolution, input path checks and verbosity lookup.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from snapmark.cli.errors import SnapmarkFileNotFoundError
from snapmark.config.logging import get_logger
from snapmark.config.model import MutableConfig

if TYPE_CHECKING:
    import click

    from snapmark.config.model import Config

logger = get_logger(__name__)


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the program-output verbosity stored on the group context (0 if unset)."""
    return int(ctx.obj.get("verbosity_level", 0))


def resolve_input_paths(paths: tuple[str, ...]) -> list[Path]:
    """Return ``paths`` as `Path` objects, defaulting to the current directory.

    Raises:
        SnapmarkFileNotFoundError: If a given path does not exist.
    """
    resolved: list[Path] = [Path(p) for p in paths] or [Path.cwd()]
    missing: list[str] = [str(p) for p in resolved if not p.exists()]
    if missing:
        raise SnapmarkFileNotFoundError(f"No such file or directory: {', '.join(missing)}")
    return resolved


def build_config(
    *,
    anchor: Path,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> Config:
    """Discover and merge configuration for a command invocation."""
    draft: MutableConfig = MutableConfig.load_merged(
        anchor=anchor,
        extra_config_files=[Path(p) for p in config_paths],
        no_config=no_config,
    )
    config: Config = draft.freeze()
    logger.debug("Effective config: %s", config)
    return config
