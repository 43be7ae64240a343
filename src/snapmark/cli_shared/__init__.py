# topmark:header:start
#
#   project      : SnapMark
#   file         : __init__.py
#   file_relpath : src/snapmark/cli_shared/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-independent helpers shared by CLI frontends (exit codes, color, console API)."""
