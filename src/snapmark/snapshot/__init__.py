# topmark:header:start
#
#   project      : SnapMark
#   file         : __init__.py
#   file_relpath : src/snapmark/snapshot/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Snapshot core: serializer, file codec, keys, store, lifecycle and summary.

The core is independent of any test runner; `snapmark.pytest_plugin` and the
CLI are thin adapters on top of it.
"""

from __future__ import annotations

from snapmark.snapshot.errors import (
    SerializationError,
    SnapshotError,
    SnapshotFileError,
    SnapshotMismatchError,
    SnapshotWriteError,
)
from snapmark.snapshot.keys import KeyGenerator, SnapshotKey
from snapmark.snapshot.serializer import Serializer, register_serializer, serialize
from snapmark.snapshot.session import SnapshotSession
from snapmark.snapshot.status import FileOutcome, FileResult, MatchResult, MatchStatus
from snapmark.snapshot.store import SnapshotStore
from snapmark.snapshot.summary import RunSummary, render_summary_lines
from snapmark.snapshot.writer import FileSystemSink, NullSink, SnapshotFileWriter

__all__ = [
    "FileOutcome",
    "FileResult",
    "FileSystemSink",
    "KeyGenerator",
    "MatchResult",
    "MatchStatus",
    "NullSink",
    "RunSummary",
    "SerializationError",
    "Serializer",
    "SnapshotError",
    "SnapshotFileError",
    "SnapshotFileWriter",
    "SnapshotKey",
    "SnapshotMismatchError",
    "SnapshotSession",
    "SnapshotStore",
    "SnapshotWriteError",
    "register_serializer",
    "render_summary_lines",
    "serialize",
]
