# topmark:header:start
#
#   project      : SnapMark
#   file         : keys.py
#   file_relpath : src/snapmark/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML key names for SnapMark configuration.

These constants are the external configuration API as it appears in
``snapmark.toml`` and in ``[tool.snapmark]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML keys used by SnapMark configuration.

    SnapMark's schema is flat: every key lives at the top level of
    ``snapmark.toml`` (or directly under ``[tool.snapmark]``).
    """

    # Root / discovery
    KEY_ROOT: Final[str] = "root"

    # Snapshot file location
    KEY_SNAPSHOT_DIR: Final[str] = "snapshot_dir"
    KEY_SNAPSHOT_SUFFIX: Final[str] = "snapshot_suffix"

    # Run mode
    KEY_UPDATE: Final[str] = "update"
    KEY_REPORT_OBSOLETE: Final[str] = "report_obsolete"
    KEY_REMOVE_ORPHANS: Final[str] = "remove_orphans"

    @classmethod
    def all_keys(cls) -> frozenset[str]:
        """Return every recognized key."""
        return frozenset(
            value
            for name, value in vars(cls).items()
            if name.startswith("KEY_") and isinstance(value, str)
        )
