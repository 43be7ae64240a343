# topmark:header:start
#
#   project      : SnapMark
#   file         : test_diff_render.py
#   file_relpath : tests/utils/test_diff_render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diff utils: the snapshot diff used in assertion messages and its colorized preview."""

from __future__ import annotations

from yachalk import chalk

from snapmark.utils.diff import render_patch, snapshot_diff
from tests.conftest import parametrize


def test_snapshot_diff_headers_name_the_key() -> None:
    """The file headers carry the key and mark recorded vs received sides."""
    diff: str = snapshot_diff('"a"', '"b"', key="test_x 1")
    lines: list[str] = diff.splitlines()

    assert lines[0] == "--- test_x 1 (recorded)"
    assert lines[1] == "+++ test_x 1 (received)"
    assert '-"a"' in lines
    assert '+"b"' in lines
    assert not diff.endswith("\n")


def test_snapshot_diff_of_equal_values_is_empty() -> None:
    """No change means no diff at all (not even headers)."""
    assert snapshot_diff("same\ntext", "same\ntext") == ""


def test_snapshot_diff_keeps_context_lines() -> None:
    """Unchanged lines around a change appear as context."""
    expected: str = "[\n  1,\n  2,\n]"
    actual: str = "[\n  1,\n  3,\n]"
    lines: list[str] = snapshot_diff(expected, actual).splitlines()

    assert "   1," in lines
    assert "-  2," in lines
    assert "+  3," in lines


def test_render_patch_accepts_str_and_list() -> None:
    """`render_patch` should accept both a diff string and an iterable of lines."""
    diff_text = "--- a\n+++ b\n-foo\n+bar\n"
    s1 = render_patch(diff_text)
    s2 = render_patch(diff_text.splitlines(False))

    assert isinstance(s1, str) and isinstance(s2, str) and s1 and s2
    assert s1 == s2


def test_render_patch_empty_input_is_safe() -> None:
    """Empty diff input should not raise and should return a string."""
    assert render_patch("") == ""


@parametrize(
    "line,styler_name",
    [
        ("-old", "removed"),
        ("+new", "added"),
        ("@@ -1 +1 @@", "hunk"),
        (" same", "context"),
    ],
)
def test_render_patch_styles_each_line_kind(line: str, styler_name: str) -> None:
    """Each diff line kind gets its own style."""
    stylers = {
        "removed": chalk.bold.red,
        "added": chalk.bold.green,
        "hunk": chalk.cyan,
        "context": chalk.dim,
    }
    assert render_patch(line) == stylers[styler_name](line) + "\n"


def test_render_patch_line_numbers() -> None:
    """Line numbers are zero-padded and separated by a bar."""
    rendered: str = render_patch(["+a", "-b"], show_line_numbers=True)

    assert rendered.splitlines()[0].startswith("0001|")
    assert rendered.splitlines()[1].startswith("0002|")
