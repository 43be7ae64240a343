# topmark:header:start
#
#   project      : SnapMark
#   file         : __init__.py
#   file_relpath : src/snapmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for SnapMark.

Configuration is read from ``snapmark.toml`` or ``[tool.snapmark]`` in
``pyproject.toml`` with `tomlkit`, layered over built-in defaults and runtime
overrides, and frozen into an immutable `Config`.
"""

from __future__ import annotations

from snapmark.config.model import Config, MutableConfig, load_config

__all__ = [
    "Config",
    "MutableConfig",
    "load_config",
]
