# topmark:header:start
#
#   project      : SnapMark
#   file         : version.py
#   file_relpath : src/snapmark/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark `version` command.

Prints the current SnapMark version as installed in the active Python environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from snapmark.cli.cmd_common import get_effective_verbosity
from snapmark.constants import SNAPMARK_VERSION

if TYPE_CHECKING:
    from snapmark.cli_shared.console_api import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of SnapMark.",
)
def version_command() -> None:
    """Show the current version of SnapMark."""
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    if get_effective_verbosity(ctx) > 0:
        console.print(console.styled("SnapMark version", bold=True) + f" {SNAPMARK_VERSION}")
    else:
        console.print(SNAPMARK_VERSION)
