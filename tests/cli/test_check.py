# topmark:header:start
#
#   project      : SnapMark
#   file         : test_check.py
#   file_relpath : tests/cli/test_check.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test: `check` command exit codes, dry run and `--apply`."""

from __future__ import annotations

from pathlib import Path

from snapmark.cli_shared.exit_codes import ExitCode
from tests.cli.conftest import assert_SUCCESS, assert_WOULD_CHANGE, run_cli_in
from tests.conftest import mark_cli, write_snapshot_file, write_test_file


def _project_with_orphan(root: Path) -> tuple[Path, Path]:
    """Create one healthy snapshot file and one whose test file was deleted."""
    tests: Path = root / "tests"
    healthy: Path = write_snapshot_file(write_test_file(tests, "test_a.py"), {"t 1": "x"})
    gone: Path = write_test_file(tests, "test_gone.py")
    orphan: Path = write_snapshot_file(gone, {"t 1": "y"})
    gone.unlink()
    return healthy, orphan


@mark_cli
def test_check_clean_project(isolation: Path) -> None:
    """Healthy snapshot files exit 0 with a confirmation line."""
    write_snapshot_file(write_test_file(isolation, "test_a.py"), {"t 1": "x"})

    result = run_cli_in(isolation, ["--no-color", "check"])

    assert_SUCCESS(result)
    assert "1 snapshot file checked, no problems found." in result.output


@mark_cli
def test_check_verbose_lists_healthy_files(isolation: Path) -> None:
    """With `-v`, healthy files are listed too."""
    snap: Path = write_snapshot_file(write_test_file(isolation, "test_a.py"), {"t 1": "x"})

    result = run_cli_in(isolation, ["--no-color", "-v", "check"])

    assert_SUCCESS(result)
    lines: list[str] = result.output.splitlines()
    assert any(line.startswith("ok") and line.endswith(snap.name) for line in lines)


@mark_cli
def test_check_dry_run_reports_orphans(isolation: Path) -> None:
    """Orphans make a dry run exit with WOULD_CHANGE and leave the file in place."""
    _, orphan = _project_with_orphan(isolation)

    result = run_cli_in(isolation, ["--no-color", "check"])

    assert_WOULD_CHANGE(result)
    assert "orphan" in result.output
    assert "Run `snapmark check --apply` to remove 1 orphaned snapshot file." in result.output
    assert orphan.exists()


@mark_cli
def test_check_apply_removes_orphans(isolation: Path) -> None:
    """`--apply` deletes orphans, keeps healthy files and prints the summary."""
    healthy, orphan = _project_with_orphan(isolation)

    result = run_cli_in(isolation, ["--no-color", "check", "--apply"])

    assert_SUCCESS(result)
    assert not orphan.exists()
    assert healthy.exists()
    assert "Snapshot Summary" in result.output
    assert " › 1 snapshot file removed." in result.output


@mark_cli
def test_check_apply_removes_the_emptied_directory(isolation: Path) -> None:
    """Removing the last file of a snapshot directory removes the directory."""
    gone: Path = write_test_file(isolation, "test_gone.py")
    orphan: Path = write_snapshot_file(gone, {"t 1": "y"})
    gone.unlink()

    result = run_cli_in(isolation, ["--no-color", "check", "--apply"])

    assert_SUCCESS(result)
    assert not orphan.parent.exists()


@mark_cli
def test_check_malformed_file_is_a_config_error(isolation: Path) -> None:
    """A malformed snapshot file (with a live test file) exits with CONFIG_ERROR."""
    snap: Path = write_snapshot_file(write_test_file(isolation, "test_a.py"), {})
    snap.write_text("snapshots = {\n", encoding="utf-8")

    result = run_cli_in(isolation, ["--no-color", "check"])

    assert result.exit_code == ExitCode.CONFIG_ERROR, result.output
    assert "malformed" in result.output
    assert "1 malformed snapshot file." in result.output


@mark_cli
def test_check_honors_configured_layout(isolation: Path) -> None:
    """`snapshot_dir` and `snapshot_suffix` from `snapmark.toml` drive discovery."""
    (isolation / "snapmark.toml").write_text(
        'root = true\nsnapshot_dir = "_snaps"\nsnapshot_suffix = ".ambr"\n', encoding="utf-8"
    )
    gone: Path = write_test_file(isolation, "test_gone.py")
    orphan: Path = write_snapshot_file(gone, {"t 1": "y"}, snapshot_dir="_snaps", suffix=".ambr")
    gone.unlink()

    result = run_cli_in(isolation, ["--no-color", "check", "--apply"])

    assert_SUCCESS(result)
    assert not orphan.exists()


@mark_cli
def test_check_no_config_uses_defaults(isolation: Path) -> None:
    """`--no-config` ignores `snapmark.toml`, so a custom layout is not discovered."""
    (isolation / "snapmark.toml").write_text(
        'root = true\nsnapshot_dir = "_snaps"\n', encoding="utf-8"
    )
    gone: Path = write_test_file(isolation, "test_gone.py")
    write_snapshot_file(gone, {"t 1": "y"}, snapshot_dir="_snaps")
    gone.unlink()

    result = run_cli_in(isolation, ["--no-color", "check", "--no-config"])

    assert_SUCCESS(result)
    assert "0 snapshot files checked" in result.output
