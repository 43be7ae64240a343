# topmark:header:start
#
#   project      : SnapMark
#   file         : __init__.py
#   file_relpath : src/snapmark/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""SnapMark CLI subcommands."""
