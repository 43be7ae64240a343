# topmark:header:start
#
#   project      : SnapMark
#   file         : diff.py
#   file_relpath : src/snapmark/utils/diff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Unified diff between a recorded snapshot and the value produced by a test.

`snapshot_diff` builds the plain diff used in assertion messages;
`render_patch` colorizes a diff for terminal display.
"""

from __future__ import annotations

import difflib
from typing import Sequence

from yachalk import chalk

from snapmark.config.logging import get_logger

logger = get_logger(__name__)


def snapshot_diff(expected: str, actual: str, *, key: str = "snapshot") -> str:
    """Return a unified diff from ``expected`` (recorded) to ``actual`` (received).

    Args:
        expected: Recorded serialized value.
        actual: Serialized value produced in this run.
        key: Snapshot key, used in the diff file headers.

    Returns:
        The diff text, one line per diff line, without a trailing newline.
    """
    lines: list[str] = list(
        difflib.unified_diff(
            expected.splitlines(),
            actual.splitlines(),
            fromfile=f"{key} (recorded)",
            tofile=f"{key} (received)",
            lineterm="",
        )
    )
    logger.trace("Diff for %s has %d lines", key, len(lines))
    return "\n".join(lines)


def render_patch(patch: Sequence[str] | str, show_line_numbers: bool = False) -> str:
    """Render a colorized preview of a unified diff.

    Args:
        patch: A unified diff as **either** a list/sequence of lines **or** a single
            multiline string.
        show_line_numbers: Whether to prefix output with line numbers.

    Returns:
        The formatted, colorized diff preview.
    """
    if isinstance(patch, str):
        lines: list[str] = patch.splitlines(keepends=False)
    else:
        lines = list(patch)

    def process_line(line: str) -> str:
        content: str = line.replace("\r", "\\r")
        match line[:1]:
            case "-":
                return chalk.bold.red(content)
            case "+":
                return chalk.bold.green(content)
            case "@":
                return chalk.cyan(content)
            case _:
                return chalk.dim(content)

    if show_line_numbers is True:
        return "".join(f"{i:04d}|{process_line(line)}\n" for i, line in enumerate(lines, 1))
    return "".join(f"{process_line(line)}\n" for line in lines)
