# topmark:header:start
#
#   project      : SnapMark
#   file         : __main__.py
#   file_relpath : src/snapmark/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Allow ``python -m snapmark``."""

from __future__ import annotations

from snapmark.cli.main import cli

if __name__ == "__main__":
    cli()
