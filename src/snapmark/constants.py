# topmark:header:start
#
#   project      : SnapMark
#   file         : constants.py
#   file_relpath : src/snapmark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    SNAPMARK_VERSION: str = get_version("snapmark")
except PackageNotFoundError:  # running from a source checkout
    SNAPMARK_VERSION = "0.0.0"

# Snapshot file layout
DEFAULT_SNAPSHOT_DIR: str = "__snapshots__"
DEFAULT_SNAPSHOT_SUFFIX: str = ".snap"

# Persisted file format
SNAPSHOT_FORMAT_VERSION: int = 1
SNAPSHOT_HEADER_PREFIX: str = "# snapmark snapshot v"
SNAPSHOT_MAPPING_NAME: str = "snapshots"

# Config discovery
SNAPMARK_TOML_NAME: str = "snapmark.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "snapmark"

# Environment
LOG_LEVEL_ENV_VAR: str = "SNAPMARK_LOG_LEVEL"

# Serializer placeholders
CIRCULAR_PLACEHOLDER: str = "[Circular]"
