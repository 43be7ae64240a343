# topmark:header:start
#
#   project      : SnapMark
#   file         : paths.py
#   file_relpath : src/snapmark/snapshot/paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Mapping between test files and snapshot files.

A test file ``pkg/tests/test_x.py`` owns exactly one snapshot file,
``pkg/tests/__snapshots__/test_x.py.snap`` (directory name and suffix come from
`Config`). Because the mapping is 1:1, the owning test file of any snapshot
file can be recovered, which is how orphaned snapshot files are detected.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from snapmark.config.logging import SnapmarkLogger, get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from snapmark.config.model import Config

logger: SnapmarkLogger = get_logger(__name__)

# Directories never searched for snapshot files.
SKIP_DIRS: frozenset[str] = frozenset(
    {".git", ".hg", ".svn", ".tox", ".nox", ".venv", "venv", "node_modules", "__pycache__"}
)


def snapshot_path_for(test_path: Path, config: Config) -> Path:
    """Return the snapshot file owned by ``test_path``."""
    return test_path.parent / config.snapshot_dir / f"{test_path.name}{config.snapshot_suffix}"


def owner_test_path(snapshot_path: Path, config: Config) -> Path | None:
    """Return the test file owning ``snapshot_path``.

    Returns:
        Path | None: ``None`` when ``snapshot_path`` does not follow the
        ``<dir>/<snapshot_dir>/<name><suffix>`` layout.
    """
    name: str = snapshot_path.name
    if snapshot_path.parent.name != config.snapshot_dir or not name.endswith(config.snapshot_suffix):
        return None
    stem: str = name[: -len(config.snapshot_suffix)]
    if not stem:
        return None
    return snapshot_path.parent.parent / stem


def is_snapshot_file(path: Path, config: Config) -> bool:
    """Whether ``path`` looks like a snapshot file under ``config``."""
    return path.is_file() and owner_test_path(path, config) is not None


def iter_snapshot_files(roots: Iterable[Path], config: Config) -> Iterator[Path]:
    """Yield snapshot files below ``roots``, sorted, without duplicates.

    A root may itself be a snapshot file, a snapshot directory, or any
    directory containing snapshot directories at any depth.
    """
    seen: set[Path] = set()
    found: list[Path] = []

    def add(candidate: Path) -> None:
        resolved: Path = candidate.resolve()
        if resolved not in seen:
            seen.add(resolved)
            found.append(candidate)

    for root in roots:
        if root.is_file():
            if is_snapshot_file(root, config):
                add(root)
            else:
                logger.debug("Not a snapshot file: %s", root)
            continue
        if not root.is_dir():
            logger.warning("No such file or directory: %s", root)
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
            current = Path(dirpath)
            if current.name != config.snapshot_dir:
                continue
            for filename in sorted(filenames):
                candidate: Path = current / filename
                if is_snapshot_file(candidate, config):
                    add(candidate)

    yield from sorted(found)


def snapshot_dirs_near(test_paths: Iterable[Path], config: Config) -> list[Path]:
    """Return the existing snapshot directories next to ``test_paths``."""
    dirs: set[Path] = set()
    for test_path in test_paths:
        candidate: Path = test_path.parent / config.snapshot_dir
        if candidate.is_dir():
            dirs.add(candidate)
    return sorted(dirs)
