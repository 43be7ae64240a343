# topmark:header:start
#
#   project      : SnapMark
#   file         : enum_mixins.py
#   file_relpath : src/snapmark/core/enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Generic Enum utilities for SnapMark (typing-friendly, UI-agnostic).

Provided:
    - ``EnumIntrospectionMixin``:
        Adds ``.value_length`` (cached) to any Enum subclass for formatting.

Keep rendering-specific concepts (color) in ``snapmark.rendering``.
"""

from __future__ import annotations

from functools import cached_property


class EnumIntrospectionMixin:
    """Small, UI-agnostic mixin that adds introspection conveniences to Enums.

    When mixed into an Enum class, provides ``value_length``: the maximum length
    (in characters) of all ``.value`` strings for the enum class. Useful for
    printing aligned labels.
    """

    @cached_property
    def value_length(self) -> int:
        """Maximum length of the enum's ``.value`` strings.

        Returns:
            int: The maximum length among all member ``.value`` strings of the
            enum class that this member belongs to.
        """
        # Pyright doesn't know 'self' is an Enum member; runtime guarantees it.
        return max(len(member.value) for member in type(self))  # type: ignore[attr-defined]
