# topmark:header:start
#
#   project      : SnapMark
#   file         : __init__.py
#   file_relpath : src/snapmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark package.

SnapMark is a snapshot testing library: it records a serialized rendering of
a value the first time a test asserts on it, stores it next to the test file,
and compares later runs against that baseline. It ships a pytest plugin (the
``snapshot`` fixture) and a small CLI to inspect and clean snapshot files.
"""

from __future__ import annotations

from snapmark.constants import SNAPMARK_VERSION

__version__: str = SNAPMARK_VERSION
