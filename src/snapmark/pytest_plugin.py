# topmark:header:start
#
#   project      : SnapMark
#   file         : pytest_plugin.py
#   file_relpath : src/snapmark/pytest_plugin.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""pytest plugin: the ``snapshot`` fixture and end-of-run snapshot lifecycle.

The plugin is a thin adapter between pytest and `SnapshotSession`:

* options ``--snapshot-update`` and ``--snapshot-report-obsolete`` override
  the ``[tool.snapmark]`` configuration found from the rootdir;
* the ``snapshot`` fixture binds assertions to the current test file and test
  name (the node id without its file part, e.g. ``TestCls::test_x[param]``);
* tests whose body did not run to completion (skipped, deselected, failed,
  setup errors, runs stopped early) keep their recordings;
* at session finish every executed test file is finalized and written, and the
  summary is printed in the terminal summary section.

Under pytest-xdist each worker finalizes the files it ran and ships its
`RunSummary` to the controller through ``workeroutput``. Distribution must keep
a test file on one worker (``--dist loadfile``).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from snapmark.config.keys import Toml
from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.config.model import Config, load_config
from snapmark.snapshot.errors import SnapshotMismatchError
from snapmark.snapshot.session import SnapshotSession
from snapmark.snapshot.status import MatchResult, MatchStatus
from snapmark.snapshot.summary import RunSummary, render_summary_lines
from snapmark.utils.diff import render_patch, snapshot_diff

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: SnapmarkLogger = get_logger(__name__)

PLUGIN_NAME: str = "snapmark-session"
WORKER_OUTPUT_KEY: str = "snapmark_summary"


def split_nodeid(nodeid: str) -> tuple[str, str]:
    """Split a node id into its file part and test name.

    ``"a.py::T::t"`` becomes ``("a.py", "T::t")``.
    """
    file_part, sep, name = nodeid.partition("::")
    return file_part, (name if sep else nodeid)


class SnapshotAssertion:
    """Snapshot assertions bound to one test.

    Args:
        session (SnapshotSession): The run's snapshot session.
        test_path (Path): File of the current test.
        test_name (str): Full name of the current test.
        color (bool): Colorize the diff in mismatch messages.
    """

    def __init__(
        self, session: SnapshotSession, test_path: Path, test_name: str, *, color: bool = False
    ) -> None:
        self.session = session
        self.test_path = test_path
        self.test_name = test_name
        self.color = color

    def __repr__(self) -> str:
        return f"SnapshotAssertion({self.test_name!r})"

    def assert_match(self, value: Any) -> MatchResult:
        """Assert that ``value`` matches the next snapshot of this test.

        The first assertion with a given counter records the value; later runs
        compare against the recording.

        Raises:
            SnapshotMismatchError: If the value differs from the recording (outside
                update mode) or the snapshot file could not be read.
            SerializationError: If ``value`` cannot be serialized.
        """
        result: MatchResult = self.session.assert_match(self.test_path, self.test_name, value)
        if result.status is MatchStatus.FAIL:
            raise SnapshotMismatchError(
                mismatch_message(result, color=self.color),
                key=result.key,
                expected=result.expected,
                actual=result.actual,
            )
        return result

    __call__ = assert_match


def mismatch_message(result: MatchResult, *, color: bool = False) -> str:
    """Return the assertion message for a failed match, with a diff when there is a recording."""
    if result.expected is None:
        return f"snapshot {result.key!r}: {result.message or 'no recording to compare with'}"
    diff: str = snapshot_diff(result.expected, result.actual, key=result.key)
    if color:
        diff = render_patch(diff).rstrip("\n")
    return (
        f"snapshot {result.key!r} does not match the recording "
        f"(re-run with --snapshot-update to update it)\n{diff}"
    )


class SnapmarkPlugin:
    """Per pytest run state, registered on the plugin manager by `pytest_configure`.

    Args:
        config (pytest.Config): The pytest config.
        snap_config (Config): Effective SnapMark configuration.
    """

    def __init__(self, config: pytest.Config, snap_config: Config) -> None:
        self.config = config
        self.session = SnapshotSession(snap_config)
        self.is_worker: bool = hasattr(config, "workerinput")
        self.started: float = time.monotonic()
        # nodeid -> (test file, test name), for collected and deselected items
        self.items: dict[str, tuple[Path, str]] = {}
        # nodeids whose call phase passed
        self.completed: set[str] = set()
        self.outcomes: dict[str, str] = {}
        self.suites: set[str] = set()
        self.summary = RunSummary()

    @property
    def is_controller(self) -> bool:
        """Whether this process is the pytest-xdist controller (it runs no tests itself)."""
        return self.config.pluginmanager.hasplugin("dsession")

    def remember_items(self, items: Iterable[pytest.Item]) -> None:
        for item in items:
            _, name = split_nodeid(item.nodeid)
            self.items[item.nodeid] = (item.path, name)

    def assertion_for(self, item: pytest.Item) -> SnapshotAssertion:
        _, test_name = split_nodeid(item.nodeid)
        self.session.register_test_file(item.path)
        reporter: Any = self.config.pluginmanager.get_plugin("terminalreporter")
        color: bool = bool(getattr(reporter, "hasmarkup", False))
        return SnapshotAssertion(self.session, item.path, test_name, color=color)

    # --- hooks -------------------------------------------------------------

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self.started = time.monotonic()

    def pytest_collection_modifyitems(self, items: list[pytest.Item]) -> None:
        self.remember_items(items)

    def pytest_deselected(self, items: list[pytest.Item]) -> None:
        self.remember_items(items)

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        nodeid: str = report.nodeid
        if report.when == "setup" and not self.is_controller:
            entry: tuple[Path, str] | None = self.items.get(nodeid)
            if entry is not None:
                self.session.register_test_file(entry[0])
        if report.when == "call" and report.passed:
            self.completed.add(nodeid)

        self.suites.add(split_nodeid(nodeid)[0])
        previous: str | None = self.outcomes.get(nodeid)
        if report.failed:
            self.outcomes[nodeid] = "failed"
        elif report.skipped and previous != "failed":
            self.outcomes[nodeid] = "skipped"
        elif report.when == "call" and report.passed and previous is None:
            self.outcomes[nodeid] = "passed"

    def protect_unrun_tests(self) -> None:
        """Protect the recordings of collected tests that did not pass their call phase."""
        registered: set[Path] = set(self.session.test_files)
        unrun: dict[Path, list[str]] = {}
        for nodeid, (path, name) in self.items.items():
            if nodeid not in self.completed and path.resolve() in registered:
                unrun.setdefault(path, []).append(name)
        for path, names in unrun.items():
            self.session.mark_tests_skipped(path, names)

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        if self.is_controller:
            return
        self.protect_unrun_tests()
        # A worker only sees part of the run: leave orphans alone there.
        summary: RunSummary = self.session.finalize(
            remove_orphans=self.session.config.remove_orphans and not self.is_worker
        )
        self.summary = self.summary + summary

        if self.is_worker:
            workeroutput: dict[str, Any] = self.config.workeroutput  # type: ignore[attr-defined]
            workeroutput[WORKER_OUTPUT_KEY] = summary.to_dict()

        if summary.files_failed and session.exitstatus == pytest.ExitCode.OK:
            session.exitstatus = pytest.ExitCode.TESTS_FAILED

    @pytest.hookimpl(optionalhook=True)
    def pytest_testnodedown(self, node: Any, error: Any) -> None:
        """Merge a pytest-xdist worker's snapshot summary into the controller's."""
        data: dict[str, Any] | None = getattr(node, "workeroutput", {}).get(WORKER_OUTPUT_KEY)
        if data is not None:
            self.summary = self.summary + RunSummary.from_dict(data)

    def final_summary(self) -> RunSummary:
        """Snapshot counters of the run completed with the test counters."""
        summary: RunSummary = RunSummary.from_dict(self.summary.to_dict())
        outcomes: list[str] = list(self.outcomes.values())
        summary.tests_passed = outcomes.count("passed")
        summary.tests_failed = outcomes.count("failed")
        summary.tests_skipped = outcomes.count("skipped")
        summary.test_suites = len(self.suites)
        summary.duration = time.monotonic() - self.started
        return summary

    def pytest_terminal_summary(self, terminalreporter: Any) -> None:
        if self.is_worker:
            return
        summary: RunSummary = self.final_summary()
        if not (summary.has_snapshot_activity or summary.matched or summary.total):
            return
        color: bool = bool(getattr(terminalreporter, "hasmarkup", False))
        terminalreporter.write_sep("-", "snapmark")
        for line in render_summary_lines(summary, color=color):
            terminalreporter.write_line(line)


# --- module level hooks --------------------------------------------------------


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("snapmark", "snapshot testing")
    group.addoption(
        "--snapshot-update",
        action="store_const",
        const=True,
        default=None,
        dest="snapmark_update",
        help="Record mismatching snapshots and remove obsolete ones.",
    )
    group.addoption(
        "--snapshot-report-obsolete",
        action="store_const",
        const=True,
        default=None,
        dest="snapmark_report_obsolete",
        help="Report obsolete snapshots outside update mode.",
    )


def pytest_configure(config: pytest.Config) -> None:
    overrides: dict[str, Any] = {
        Toml.KEY_UPDATE: config.getoption("snapmark_update"),
        Toml.KEY_REPORT_OBSOLETE: config.getoption("snapmark_report_obsolete"),
    }
    snap_config: Config = load_config(anchor=config.rootpath, overrides=overrides)
    plugin = SnapmarkPlugin(config, snap_config)
    config.pluginmanager.register(plugin, PLUGIN_NAME)
    logger.debug("snapmark configured: %s (worker=%s)", snap_config, plugin.is_worker)


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin: object | None = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin, PLUGIN_NAME)


def pytest_report_header(config: pytest.Config) -> str | None:
    plugin: SnapmarkPlugin | None = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None and plugin.session.config.update:
        return "snapmark: update mode (mismatching snapshots are rewritten)"
    return None


@pytest.fixture
def snapshot(request: pytest.FixtureRequest) -> SnapshotAssertion:
    """Snapshot assertions for the current test: ``snapshot.assert_match(value)``."""
    plugin: SnapmarkPlugin = request.config.pluginmanager.get_plugin(PLUGIN_NAME)
    return plugin.assertion_for(request.node)
