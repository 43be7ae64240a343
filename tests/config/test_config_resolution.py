# topmark:header:start
#
#   project      : SnapMark
#   file         : test_config_resolution.py
#   file_relpath : tests/config/test_config_resolution.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""End-to-end tests for SnapMark configuration discovery, precedence and overrides."""

from __future__ import annotations

import textwrap
from pathlib import Path

from snapmark.config import Config, MutableConfig, load_config
from snapmark.config.keys import Toml


def _write(path: Path, content: str) -> None:
    """Helper: write dedented content to a file, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")


def test_defaults() -> None:
    """Freezing the defaults yields the documented runtime values."""
    config: Config = MutableConfig.from_defaults().freeze()
    assert config.snapshot_dir == "__snapshots__"
    assert config.snapshot_suffix == ".snap"
    assert (config.update, config.report_obsolete, config.remove_orphans) == (False, False, True)
    assert config.diagnostics == ()


def test_pyproject_tool_section_is_discovered_upward(tmp_path: Path) -> None:
    """`[tool.snapmark]` in a parent `pyproject.toml` applies to nested anchors."""
    proj: Path = tmp_path / "proj"
    _write(
        proj / "pyproject.toml",
        """
        [tool.snapmark]
        root = true
        snapshot_dir = "_snaps"
        report_obsolete = true
        """,
    )
    nested: Path = proj / "tests" / "unit"
    nested.mkdir(parents=True)

    config: Config = load_config(anchor=nested)
    assert config.snapshot_dir == "_snaps"
    assert config.report_obsolete is True
    assert config.config_files == ((proj / "pyproject.toml").resolve(),)


def test_pyproject_without_tool_section_is_ignored(tmp_path: Path) -> None:
    """A `pyproject.toml` without `[tool.snapmark]` does not count as a config file."""
    _write(tmp_path / "snapmark.toml", "root = true\n")
    _write(tmp_path / "pkg" / "pyproject.toml", '[project]\nname = "pkg"\n')
    assert MutableConfig.discover_local_config_files(tmp_path / "pkg") == [
        (tmp_path / "snapmark.toml").resolve()
    ]


def test_same_dir_precedence_snapmark_over_pyproject(tmp_path: Path) -> None:
    """In the same directory, `pyproject.toml` is merged first, then `snapmark.toml` overrides it."""
    _write(
        tmp_path / "pyproject.toml",
        """
        [tool.snapmark]
        root = true
        snapshot_suffix = ".pyproject"
        update = true
        """,
    )
    _write(tmp_path / "snapmark.toml", 'snapshot_suffix = ".local"\n')

    config: Config = load_config(anchor=tmp_path)
    assert config.snapshot_suffix == ".local"
    assert config.update is True


def test_nearest_config_wins_and_root_stops_discovery(tmp_path: Path) -> None:
    """Configs nearer to the anchor override parents; `root = true` ends the walk."""
    _write(tmp_path / "snapmark.toml", 'snapshot_dir = "outer"\n')
    _write(tmp_path / "proj" / "snapmark.toml", 'root = true\nsnapshot_dir = "middle"\n')
    _write(tmp_path / "proj" / "sub" / "snapmark.toml", "update = true\n")

    files: list[Path] = MutableConfig.discover_local_config_files(tmp_path / "proj" / "sub")
    root: Path = tmp_path.resolve()
    assert files == [root / "proj" / "snapmark.toml", root / "proj" / "sub" / "snapmark.toml"]

    config: Config = load_config(anchor=tmp_path / "proj" / "sub")
    assert config.snapshot_dir == "middle"
    assert config.update is True


def test_no_config_skips_discovery_but_keeps_extra_files(tmp_path: Path) -> None:
    """`no_config` ignores project files; explicit files are still merged."""
    _write(tmp_path / "snapmark.toml", 'root = true\nsnapshot_dir = "discovered"\n')
    extra: Path = tmp_path / "extra" / "custom.toml"
    _write(extra, "remove_orphans = false\n")

    config: Config = load_config(anchor=tmp_path, no_config=True, extra_config_files=[extra])
    assert config.snapshot_dir == "__snapshots__"
    assert config.remove_orphans is False
    assert config.config_files == (extra,)


def test_overrides_only_apply_when_set(tmp_path: Path) -> None:
    """`None` overrides (unset flags) never mask config file values."""
    _write(tmp_path / "snapmark.toml", "root = true\nupdate = true\n")

    config: Config = load_config(
        anchor=tmp_path,
        overrides={Toml.KEY_UPDATE: None, Toml.KEY_REPORT_OBSOLETE: True},
    )
    assert config.update is True
    assert config.report_obsolete is True


def test_unknown_keys_and_invalid_values_become_diagnostics(tmp_path: Path) -> None:
    """Unknown keys are reported; invalid values fall back to defaults."""
    _write(
        tmp_path / "snapmark.toml",
        """
        root = true
        snapshot_dir = "../escape"
        snapshot_suffix = "snap"
        colour = "red"
        """,
    )
    config: Config = load_config(anchor=tmp_path)
    assert config.snapshot_dir == "__snapshots__"
    assert config.snapshot_suffix == ".snap"
    assert len(config.diagnostics) == 3
    assert any("colour" in d for d in config.diagnostics)


def test_thaw_and_freeze_round_trip() -> None:
    """Thawing and re-freezing keeps every value."""
    config: Config = load_config(no_config=True, overrides={Toml.KEY_UPDATE: True})
    again: Config = config.thaw().freeze()
    assert again == config


def test_merge_with_prefers_values_set_on_the_other_draft() -> None:
    """Fields left as `None` on the newer layer inherit from the older one."""
    base = MutableConfig(snapshot_dir="base", update=False)
    layer = MutableConfig(update=True)
    merged: MutableConfig = base.merge_with(layer)
    assert merged.snapshot_dir == "base"
    assert merged.update is True
