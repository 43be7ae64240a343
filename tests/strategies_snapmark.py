# topmark:header:start
#
#   project      : SnapMark
#   file         : strategies_snapmark.py
#   file_relpath : tests/strategies_snapmark.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for snapshot keys and serialized values.

Values are drawn to stress the snapshot file codec: quotes, backslashes,
blank lines, control characters and non-ASCII text.
"""

from __future__ import annotations

from hypothesis import strategies as st

BLACKLIST_CATEGORIES: tuple[str, ...] = ("Cs",)

TRICKY_FRAGMENTS: tuple[str, ...] = (
    '"""',
    '"',
    "\\",
    "\n",
    "\r\n",
    "\t",
    "\x00",
    "\\n",
    "'''",
    "# comment",
    "é",
)

text_chars = st.characters(blacklist_categories=BLACKLIST_CATEGORIES)

snapshot_values: st.SearchStrategy[str] = st.lists(
    st.one_of(st.text(text_chars, max_size=12), st.sampled_from(TRICKY_FRAGMENTS)),
    max_size=8,
).map("".join)

test_names: st.SearchStrategy[str] = st.text(text_chars, min_size=1, max_size=30)

snapshot_keys: st.SearchStrategy[str] = st.builds(
    lambda name, counter: f"{name} {counter}",
    test_names,
    st.integers(min_value=1, max_value=50),
)

snapshot_entries: st.SearchStrategy[dict[str, str]] = st.dictionaries(
    snapshot_keys, snapshot_values, max_size=6
)
