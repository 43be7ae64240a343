# topmark:header:start
#
#   project      : SnapMark
#   file         : main.py
#   file_relpath : src/snapmark/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark command line entry point.

Group-level options (verbosity, color) are initialized once and placed into
``ctx.obj`` together with the program-output console; subcommands read them
from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from snapmark.cli.commands.check import check_command
from snapmark.cli.commands.list import list_command
from snapmark.cli.commands.version import version_command
from snapmark.cli.console import ClickConsole
from snapmark.cli.options import common_color_options, common_verbose_options, resolve_verbosity
from snapmark.cli_shared.color import ColorMode, resolve_color_mode
from snapmark.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from snapmark.cli_shared.console_api import ConsoleLike

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (verbosity, logging and color) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.obj = ctx.obj or {}

    ctx.obj["verbosity_level"] = resolve_verbosity(verbose, quiet)

    # Internal logging is configured from the environment only.
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env
    setup_logging(level=level_env)

    effective_mode: ColorMode | None = ColorMode.NEVER if no_color else color_mode
    enable_color: bool = resolve_color_mode(color_mode_override=effective_mode)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    ctx.obj["console"] = ClickConsole(enable_color=enable_color)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="SnapMark: inspect and maintain snapshot files.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the SnapMark CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        color_mode=color_mode,
        no_color=no_color,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'snapmark check [PATHS...]' to validate snapshot files.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(list_command)

cli.add_command(check_command)

if __name__ == "__main__":
    cli()
