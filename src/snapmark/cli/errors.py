# topmark:header:start
#
#   project      : SnapMark
#   file         : errors.py
#   file_relpath : src/snapmark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the SnapMark CLI.

Raise these in CLI commands to signal errors with standardized messages and
exit codes. They are shown through the project console when one is present
in the Click context, and through Click's default styling otherwise.
"""

from __future__ import annotations

from typing import IO, Any

import click

from snapmark.cli_shared.exit_codes import ExitCode


class SnapmarkError(click.ClickException):
    """Base class for all SnapMark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:
        """Return the plain error message text (colorized in `show`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        obj: Any = getattr(ctx, "obj", None)
        console: Any = obj.get("console") if isinstance(obj, dict) else None
        if console is not None:
            console.error(console.styled(self.format_message(), fg="bright_red"))
            return
        super().show(file)


class SnapmarkUsageError(SnapmarkError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class SnapmarkConfigError(SnapmarkError):
    """Error for malformed snapshot or configuration files."""

    exit_code = ExitCode.CONFIG_ERROR


class SnapmarkFileNotFoundError(SnapmarkError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class SnapmarkIOError(SnapmarkError):
    """Error for I/O errors reading or writing snapshot files."""

    exit_code = ExitCode.IO_ERROR
