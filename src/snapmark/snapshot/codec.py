# topmark:header:start
#
#   project      : SnapMark
#   file         : codec.py
#   file_relpath : src/snapmark/snapshot/codec.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Read and write the persisted snapshot file format.

A snapshot file is a small Python module that builds a single mapping::

    # snapmark snapshot v1

    snapshots = {}

    snapshots["test_render 1"] = \"\"\"
    {
      "name": "x",
    }
    \"\"\"

Keys are JSON-style double-quoted string literals. Values are triple-quoted
string literals wrapped in one leading and one trailing newline so that the
recorded text starts on its own line. Inside values, backslashes, runs of
three double quotes and control characters (other than newline and tab) are
escaped. Lone surrogates are escaped in keys and values alike, so the file
always encodes as UTF-8 and `parse_snapshot_file` returns exactly the strings
that were rendered.

Parsing never executes the file: it walks the `ast` and only accepts the two
statement shapes shown above.
"""

from __future__ import annotations

import ast
import json
import re
from typing import TYPE_CHECKING

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.constants import (
    SNAPSHOT_FORMAT_VERSION,
    SNAPSHOT_HEADER_PREFIX,
    SNAPSHOT_MAPPING_NAME,
)
from snapmark.snapshot.errors import SnapshotFileError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger: SnapmarkLogger = get_logger(__name__)

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_SURROGATE_RE = re.compile(r"[\ud800-\udfff]")
_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(key: str) -> tuple[tuple[str | int, ...], str]:
    """Sort key that orders embedded numbers numerically (``"t 2"`` before ``"t 10"``).

    The raw key breaks ties between equal numbers spelled differently (``01`` and ``1``).
    """
    parts: list[str] = _DIGITS_RE.split(key)
    return tuple(int(p) if i % 2 else p for i, p in enumerate(parts)), key


def _escape_surrogates(text: str) -> str:
    # Lone surrogates cannot be encoded as UTF-8.
    return _SURROGATE_RE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def _quote_key(key: str) -> str:
    return _escape_surrogates(json.dumps(key, ensure_ascii=False))


def _escape_value(text: str) -> str:
    out: str = text.replace("\\", "\\\\")
    out = out.replace('"""', '\\"\\"\\"')
    out = _CONTROL_RE.sub(lambda m: f"\\x{ord(m.group()):02x}", out)
    return _escape_surrogates(out)


def render_snapshot_file(entries: Mapping[str, str]) -> str:
    """Render a mapping of snapshot entries as snapshot file text.

    Args:
        entries (Mapping[str, str]): Rendered key to serialized value.

    Returns:
        str: The complete file content, entries sorted by key.
    """
    chunks: list[str] = [
        f"{SNAPSHOT_HEADER_PREFIX}{SNAPSHOT_FORMAT_VERSION}\n",
        f"{SNAPSHOT_MAPPING_NAME} = {{}}\n",
    ]
    for key in sorted(entries, key=natural_sort_key):
        chunks.append(
            f'{SNAPSHOT_MAPPING_NAME}[{_quote_key(key)}] = """\n{_escape_value(entries[key])}\n"""\n'
        )
    return "\n".join(chunks)


def _check_header(text: str, path: Path | None) -> None:
    first_line: str = text.split("\n", 1)[0].strip()
    if not first_line.startswith(SNAPSHOT_HEADER_PREFIX):
        return
    raw: str = first_line[len(SNAPSHOT_HEADER_PREFIX) :]
    if not raw.isdigit():
        raise SnapshotFileError(f"invalid snapshot format header {first_line!r}", path=path, lineno=1)
    if int(raw) != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotFileError(
            f"unsupported snapshot format version {raw} (expected {SNAPSHOT_FORMAT_VERSION})",
            path=path,
            lineno=1,
        )


def _is_mapping_name(node: ast.expr) -> bool:
    return isinstance(node, ast.Name) and node.id == SNAPSHOT_MAPPING_NAME


def _str_constant(node: ast.expr) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _unwrap_value(raw: str) -> str:
    if raw.startswith("\n"):
        raw = raw[1:]
    if raw.endswith("\n"):
        raw = raw[:-1]
    return raw


def parse_snapshot_file(text: str, *, path: Path | None = None) -> dict[str, str]:
    """Parse snapshot file text into a mapping of entries.

    Args:
        text (str): File content.
        path (Path | None): Source path, used in error messages only.

    Returns:
        dict[str, str]: Rendered key to serialized value.

    Raises:
        SnapshotFileError: If the text is not a well-formed snapshot file.
    """
    _check_header(text, path)
    try:
        module: ast.Module = ast.parse(text, filename=str(path or "<snapshot>"))
    except SyntaxError as exc:
        raise SnapshotFileError(f"syntax error: {exc.msg}", path=path, lineno=exc.lineno) from exc

    entries: dict[str, str] = {}
    for stmt in module.body:
        if not isinstance(stmt, ast.Assign) or len(stmt.targets) != 1:
            raise SnapshotFileError("unexpected statement", path=path, lineno=stmt.lineno)
        target: ast.expr = stmt.targets[0]

        if _is_mapping_name(target):
            if not (isinstance(stmt.value, ast.Dict) and not stmt.value.keys):
                raise SnapshotFileError(
                    f"'{SNAPSHOT_MAPPING_NAME}' must be initialized to an empty mapping",
                    path=path,
                    lineno=stmt.lineno,
                )
            continue

        if not (isinstance(target, ast.Subscript) and _is_mapping_name(target.value)):
            raise SnapshotFileError("unexpected assignment target", path=path, lineno=stmt.lineno)

        key: str | None = _str_constant(target.slice)
        value: str | None = _str_constant(stmt.value)
        if key is None or value is None:
            raise SnapshotFileError(
                "snapshot keys and values must be string literals",
                path=path,
                lineno=stmt.lineno,
            )
        if key in entries:
            logger.warning("Duplicate snapshot key %r in %s; keeping the last one", key, path)
        entries[key] = _unwrap_value(value)

    logger.trace("Parsed %d snapshot entries from %s", len(entries), path)
    return entries
