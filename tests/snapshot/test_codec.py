# topmark:header:start
#
#   project      : SnapMark
#   file         : test_codec.py
#   file_relpath : tests/snapshot/test_codec.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Snapshot file codec: rendering, parsing and malformed input."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given, settings

from snapmark.snapshot.codec import natural_sort_key, parse_snapshot_file, render_snapshot_file
from snapmark.snapshot.errors import SnapshotFileError
from tests.conftest import parametrize
from tests.strategies_snapmark import snapshot_entries


def test_render_layout() -> None:
    """Entries follow the header and the empty mapping, one assignment each."""
    text: str = render_snapshot_file({"test_a 1": "x"})
    assert text == (
        "# snapmark snapshot v1\n"
        "\n"
        "snapshots = {}\n"
        "\n"
        'snapshots["test_a 1"] = """\n'
        "x\n"
        '"""\n'
    )


def test_render_empty_mapping_has_header_only() -> None:
    """An empty mapping renders just the header and the initialization."""
    assert render_snapshot_file({}) == "# snapmark snapshot v1\n\nsnapshots = {}\n"


def test_entries_are_sorted_naturally() -> None:
    """Counters sort numerically, so ``t 2`` comes before ``t 10``."""
    text: str = render_snapshot_file({"t 10": "b", "t 2": "a", "s 1": "c"})
    assert text.index('"s 1"') < text.index('"t 2"') < text.index('"t 10"')
    assert sorted(["t 10", "t 2"], key=natural_sort_key) == ["t 2", "t 10"]


def test_equal_numbers_spelled_differently_sort_stably() -> None:
    """Keys like ``t 01`` and ``t 1`` always render in the same order."""
    assert render_snapshot_file({"t 01": "a", "t 1": "b"}) == render_snapshot_file(
        {"t 1": "b", "t 01": "a"}
    )
    assert sorted(["t 1", "t 01"], key=natural_sort_key) == ["t 01", "t 1"]


def test_surrogates_are_escaped_in_the_file_text() -> None:
    """Lone surrogates are written as escapes so the file can be encoded as UTF-8."""
    text: str = render_snapshot_file({"name \ud800 1": "value \udfff"})
    text.encode("utf-8")
    assert "\\ud800" in text
    assert "\\udfff" in text


def test_tricky_values_survive_a_write_read_cycle() -> None:
    """Quotes, backslashes, control characters and lone surrogates come back unchanged."""
    entries: dict[str, str] = {
        'quotes "" 1': 'a """ b "',
        "backslash 1": "C:\\temp\\new\\",
        "blank 1": "",
        "padded 1": "\n\nmiddle\n\n",
        "control 1": "bell\x07 cr\r nul\x00",
        "unicode 1": "héllo ✓",
        "surrogate 1": "lone \ud800 and \udfff",
        "key \udc80 1": "value",
    }
    assert parse_snapshot_file(render_snapshot_file(entries)) == entries


@pytest.mark.hypothesis_slow
@settings(max_examples=200, deadline=None)
@given(entries=snapshot_entries)
def test_parse_inverts_render(entries: dict[str, str]) -> None:
    assert parse_snapshot_file(render_snapshot_file(entries)) == entries


def test_empty_text_parses_to_no_entries() -> None:
    """An empty file is a valid file with no entries."""
    assert parse_snapshot_file("") == {}


def test_duplicate_keys_keep_the_last_value() -> None:
    text: str = 'snapshots = {}\nsnapshots["k 1"] = """\na\n"""\nsnapshots["k 1"] = """\nb\n"""\n'
    assert parse_snapshot_file(text) == {"k 1": "b"}


@parametrize(
    "text, message",
    [
        ("snapshots = {\n", "syntax error"),
        ("import os\n", "unexpected statement"),
        ("other = {}\n", "unexpected assignment target"),
        ('snapshots = {"a": "b"}\n', "must be initialized to an empty mapping"),
        ('snapshots["a 1"] = 1\n', "must be string literals"),
        ('snapshots["a 1"] = __import__("os").getcwd()\n', "must be string literals"),
        ("# snapmark snapshot v2\nsnapshots = {}\n", "unsupported snapshot format version 2"),
        ("# snapmark snapshot vX\nsnapshots = {}\n", "invalid snapshot format header"),
    ],
)
def test_malformed_files_are_rejected(text: str, message: str) -> None:
    """Anything but the two accepted statement shapes is an error."""
    with pytest.raises(SnapshotFileError, match=message):
        parse_snapshot_file(text)


def test_errors_carry_path_and_line() -> None:
    """Parse errors point at the offending file and line."""
    path = Path("__snapshots__/test_x.py.snap")
    with pytest.raises(SnapshotFileError) as exc_info:
        parse_snapshot_file('snapshots = {}\nx = 1\n', path=path)
    err: SnapshotFileError = exc_info.value
    assert err.path == path
    assert err.lineno == 2
    assert str(err).startswith(f"{path}:2: ")
