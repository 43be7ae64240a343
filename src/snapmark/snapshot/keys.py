# topmark:header:start
#
#   project      : SnapMark
#   file         : keys.py
#   file_relpath : src/snapmark/snapshot/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Snapshot keys and the per-store key generator.

A key identifies "the Nth snapshot assertion made by test T". The counter is
what lets an assertion find its recording again on the next run without the
test having to name it, so the generator must be asked exactly once per
assertion, in execution order.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class SnapshotKey:
    """Immutable identity of one snapshot assertion.

    Attributes:
        test_name (str): Full display name of the test.
        counter (int): 1-based occurrence of this test name within the store.
    """

    test_name: str
    counter: int

    def __post_init__(self) -> None:
        if self.counter < 1:
            raise ValueError(f"snapshot counter must be >= 1 (got {self.counter})")

    def render(self) -> str:
        """Return the key as it appears in the snapshot file."""
        return f"{self.test_name} {self.counter}"

    def __str__(self) -> str:
        return self.render()


class KeyGenerator:
    """Hands out `SnapshotKey` values with a per-test-name counter.

    One generator belongs to one snapshot store; counters are never shared
    between stores.
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def next_key(self, test_name: str) -> SnapshotKey:
        """Return the next key for ``test_name`` and advance its counter."""
        counter: int = self._counters.get(test_name, 0) + 1
        self._counters[test_name] = counter
        return SnapshotKey(test_name, counter)

    def reset(self) -> None:
        """Forget every counter."""
        self._counters.clear()


def split_test_name(rendered_key: str) -> str:
    """Return the test name part of a rendered key (``"name 3"`` -> ``"name"``).

    Keys without a trailing counter are returned unchanged.
    """
    name, sep, counter = rendered_key.rpartition(" ")
    if sep and counter.isdigit():
        return name
    return rendered_key
