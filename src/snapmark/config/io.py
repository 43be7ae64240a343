# topmark:header:start
#
#   project      : SnapMark
#   file         : io.py
#   file_relpath : src/snapmark/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O and typed value extraction for SnapMark configuration.

Parsing is done with `tomlkit` and returned as plain `dict` structures. The
getters coerce loosely typed TOML values and fall back to a default (logging
why) instead of raising, so a bad value in a config file never aborts a test
run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from snapmark.config.keys import Toml
from snapmark.config.logging import get_logger
from snapmark.constants import DEFAULT_SNAPSHOT_DIR, DEFAULT_SNAPSHOT_SUFFIX

if TYPE_CHECKING:
    from pathlib import Path

    from snapmark.config.logging import SnapmarkLogger

TomlTable = dict[str, Any]

logger: SnapmarkLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return SnapMark's runtime defaults as a fresh dict (no I/O)."""
    return {
        Toml.KEY_SNAPSHOT_DIR: DEFAULT_SNAPSHOT_DIR,
        Toml.KEY_SNAPSHOT_SUFFIX: DEFAULT_SNAPSHOT_SUFFIX,
        Toml.KEY_UPDATE: False,
        Toml.KEY_REPORT_OBSOLETE: False,
        Toml.KEY_REMOVE_ORPHANS: True,
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (e.g., ``snapmark.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Extract a sub-table, returning an empty dict when missing or not a table."""
    value: Any | None = table.get(key)
    if isinstance(value, dict):
        return cast("TomlTable", value)
    return {}


def get_bool_value_or_none(table: TomlTable, key: str) -> bool | None:
    """Extract an optional boolean value from a TOML table.

    If the value is a ``bool``, it is returned as is. If the value is an integer,
    it is coerced via ``bool(value)``. When the key is missing, or present but not
    coercible, ``None`` is returned.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        bool | None: The extracted or coerced boolean value, or ``None``.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    logger.warning("Ignoring non-boolean value %r for '%s'", value, key)
    return None


def get_string_value_or_none(table: TomlTable, key: str) -> str | None:
    """Extract an optional string value from a TOML table.

    Args:
        table (TomlTable): Table to query.
        key (str): Key to extract.

    Returns:
        str | None: The string value, or ``None`` when missing or not a string.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    logger.warning("Ignoring non-string value %r for '%s'", value, key)
    return None
