# topmark:header:start
#
#   project      : SnapMark
#   file         : errors.py
#   file_relpath : src/snapmark/snapshot/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the snapshot core.

These are framework-agnostic: the CLI maps them onto `click.ClickException`
subclasses (see `snapmark.cli.errors`) and the pytest plugin surfaces them as
test failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class SnapshotError(Exception):
    """Base class for all snapshot core errors."""


class SerializationError(SnapshotError):
    """A value could not be rendered by the serializer."""

    def __init__(self, message: str, *, type_name: str | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name


class SnapshotFileError(SnapshotError):
    """A persisted snapshot file could not be read or parsed."""

    def __init__(self, message: str, *, path: Path | None = None, lineno: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.lineno = lineno

    def __str__(self) -> str:
        base: str = super().__str__()
        if self.path is None:
            return base
        where: str = f"{self.path}:{self.lineno}" if self.lineno else str(self.path)
        return f"{where}: {base}"


class SnapshotWriteError(SnapshotError):
    """Writing or deleting a snapshot file failed."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(message)
        self.path = path


class SnapshotMismatchError(AssertionError):
    """A recorded snapshot does not match the value produced by the test.

    Raised by the assertion helper so test runners report it as an ordinary
    assertion failure.

    Attributes:
        key (str): Rendered snapshot key.
        expected (str | None): Recorded serialized value (``None`` when the
            snapshot file could not be read).
        actual (str): Serialized value produced in this run.
    """

    def __init__(self, message: str, *, key: str, expected: str | None, actual: str) -> None:
        super().__init__(message)
        self.key = key
        self.expected = expected
        self.actual = actual
