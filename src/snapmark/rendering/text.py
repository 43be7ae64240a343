# topmark:header:start
#
#   project      : SnapMark
#   file         : text.py
#   file_relpath : src/snapmark/rendering/text.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Small text helpers shared by the summary renderer and the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snapmark.rendering.colored_enum import Colorizer


def maybe_colorize(styler: Colorizer, text: str, *, enabled: bool) -> str:
    """Conditionally apply a styling function.

    Args:
        styler: Callable that applies styling to a string (for example, a `chalk.*` function).
        text: Input text to render.
        enabled: When False, return `text` unchanged.

    Returns:
        Styled text when enabled; otherwise the original `text`.
    """
    return styler(text) if enabled else text


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return ``"{count} {noun}"`` with the noun agreeing with ``count``.

    Examples:
        >>> pluralize(1, "snapshot")
        '1 snapshot'
        >>> pluralize(3, "test suite")
        '3 test suites'
    """
    noun: str = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"
