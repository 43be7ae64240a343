# topmark:header:start
#
#   project      : SnapMark
#   file         : test_paths.py
#   file_relpath : tests/snapshot/test_paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Test file <-> snapshot file mapping and snapshot file discovery."""

from __future__ import annotations

from pathlib import Path

from snapmark.snapshot.paths import (
    is_snapshot_file,
    iter_snapshot_files,
    owner_test_path,
    snapshot_dirs_near,
    snapshot_path_for,
)
from tests.conftest import make_config, write_snapshot_file, write_test_file


def test_snapshot_path_is_next_to_the_test_file() -> None:
    """Default layout: ``__snapshots__/<test file>.snap`` beside the test."""
    config = make_config()
    assert snapshot_path_for(Path("pkg/tests/test_x.py"), config) == Path(
        "pkg/tests/__snapshots__/test_x.py.snap"
    )


def test_custom_directory_and_suffix() -> None:
    config = make_config(snapshot_dir="_snaps", snapshot_suffix=".ambr")
    snap: Path = snapshot_path_for(Path("t/test_x.py"), config)
    assert snap == Path("t/_snaps/test_x.py.ambr")
    assert owner_test_path(snap, config) == Path("t/test_x.py")


def test_owner_is_recovered_from_the_snapshot_path() -> None:
    """The owning test file is derived back from a snapshot path."""
    config = make_config()
    assert owner_test_path(Path("a/__snapshots__/test_y.py.snap"), config) == Path("a/test_y.py")


def test_paths_outside_the_layout_have_no_owner() -> None:
    config = make_config()
    assert owner_test_path(Path("a/other/test_y.py.snap"), config) is None
    assert owner_test_path(Path("a/__snapshots__/test_y.py.txt"), config) is None
    assert owner_test_path(Path("a/__snapshots__/.snap"), config) is None


def test_iter_snapshot_files_walks_and_skips_tool_directories(tmp_path: Path) -> None:
    """Walking a tree finds snapshot files and skips VCS and cache directories."""
    config = make_config()
    first: Path = write_snapshot_file(write_test_file(tmp_path / "a"), {"t 1": "x"})
    second: Path = write_snapshot_file(write_test_file(tmp_path / "b" / "deep"), {"t 1": "y"})
    write_snapshot_file(write_test_file(tmp_path / ".venv" / "lib"), {"t 1": "z"})
    (first.parent / "notes.txt").write_text("not a snapshot", encoding="utf-8")

    found: list[Path] = list(iter_snapshot_files([tmp_path], config))
    assert found == sorted([first, second])


def test_iter_snapshot_files_accepts_files_and_deduplicates(tmp_path: Path) -> None:
    config = make_config()
    snap: Path = write_snapshot_file(write_test_file(tmp_path), {"t 1": "x"})
    found: list[Path] = list(iter_snapshot_files([snap, snap.parent, tmp_path], config))
    assert found == [snap]
    assert is_snapshot_file(snap, config)
    assert not is_snapshot_file(tmp_path / "test_sample.py", config)


def test_iter_snapshot_files_ignores_missing_roots(tmp_path: Path) -> None:
    assert list(iter_snapshot_files([tmp_path / "missing"], make_config())) == []


def test_snapshot_dirs_near_lists_existing_directories_once(tmp_path: Path) -> None:
    config = make_config()
    test_a: Path = write_test_file(tmp_path, "test_a.py")
    test_b: Path = write_test_file(tmp_path, "test_b.py")
    test_c: Path = write_test_file(tmp_path / "sub", "test_c.py")
    write_snapshot_file(test_a, {"t 1": "x"})
    assert snapshot_dirs_near([test_a, test_b, test_c], config) == [tmp_path / "__snapshots__"]
