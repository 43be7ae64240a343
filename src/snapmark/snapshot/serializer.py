# topmark:header:start
#
#   project      : SnapMark
#   file         : serializer.py
#   file_relpath : src/snapmark/snapshot/serializer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Stable pretty-printer for values recorded in snapshots.

The serializer turns an arbitrary Python value into deterministic, diff-friendly
text: containers are broken over several lines with a trailing comma on every
item, unordered containers (mappings, sets, instance attributes) are sorted by
their rendered text, and anything that would leak process-specific state (such
as memory addresses) is replaced with a stable spelling.

The output is *descriptive*, not executable; round-tripping happens one level up,
in the snapshot file codec (`snapmark.snapshot.codec`), which stores this text
as a string literal.

Plugins:
    Custom printers can be registered with `Serializer.register` (or the module
    level `register_serializer` for the shared default instance). A plugin is a
    ``(test, printer)`` pair; the first plugin whose ``test(value)`` is true
    renders the value. The printer receives the value and a ``render`` callback
    that serializes nested values at the current depth.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, NamedTuple

from snapmark.config.logging import SnapmarkLogger, get_logger
from snapmark.constants import CIRCULAR_PLACEHOLDER
from snapmark.snapshot.errors import SerializationError

logger: SnapmarkLogger = get_logger(__name__)

Render = Callable[[Any], str]
Printer = Callable[[Any, Render], str]
Predicate = Callable[[Any], bool]

_ADDRESS_RE = re.compile(r" at 0x[0-9a-fA-F]+")


class SerializerPlugin(NamedTuple):
    """A user-supplied printer and the predicate selecting the values it handles."""

    test: Predicate
    printer: Printer


def _quote(text: str) -> str:
    """Return ``text`` double-quoted with ``\\`` and ``"`` escaped.

    Newlines are kept literal so multi-line strings stay readable in diffs.
    """
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _is_namedtuple(value: object) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


class Serializer:
    """Deterministic pretty-printer.

    Args:
        indent (str): Indentation unit for nested items.
        plugins (list[SerializerPlugin] | None): Initial custom printers.
    """

    def __init__(self, *, indent: str = "  ", plugins: list[SerializerPlugin] | None = None) -> None:
        self.indent = indent
        self._plugins: list[SerializerPlugin] = list(plugins or [])

    def register(self, test: Predicate, printer: Printer) -> None:
        """Register a custom printer; later registrations take precedence."""
        self._plugins.insert(0, SerializerPlugin(test, printer))

    def serialize(self, value: Any) -> str:
        """Render ``value`` as stable text.

        Args:
            value (Any): The value to render.

        Returns:
            str: The rendered text.

        Raises:
            SerializationError: If any part of the value cannot be rendered.
        """
        try:
            return self._render(value, 0, [])
        except SerializationError:
            raise
        except RecursionError as exc:
            raise SerializationError(
                f"value of type {type(value).__name__} is nested too deeply to serialize",
                type_name=type(value).__name__,
            ) from exc
        except Exception as exc:
            logger.debug("Serialization of %s failed: %r", type(value).__name__, exc)
            raise SerializationError(
                f"cannot serialize value of type {type(value).__name__}: {exc}",
                type_name=type(value).__name__,
            ) from exc

    # --- rendering ---------------------------------------------------------

    def _render(self, value: Any, depth: int, ancestors: list[int]) -> str:
        for plugin in self._plugins:
            if plugin.test(value):
                return plugin.printer(value, lambda v: self._render(v, depth, ancestors))

        if value is None or isinstance(value, bool):
            return repr(value)
        if isinstance(value, Enum):
            return f"{type(value).__name__}.{value.name}"
        if isinstance(value, int):
            return int.__repr__(value)
        if isinstance(value, float):
            return float.__repr__(value)
        if isinstance(value, complex):
            return complex.__repr__(value)
        if isinstance(value, str):
            return _quote(value)
        if isinstance(value, (bytes, bytearray)):
            return repr(value)

        if id(value) in ancestors:
            return CIRCULAR_PLACEHOLDER
        ancestors.append(id(value))
        try:
            return self._render_compound(value, depth, ancestors)
        finally:
            ancestors.pop()

    def _render_compound(self, value: Any, depth: int, ancestors: list[int]) -> str:
        name: str = type(value).__name__

        def child(v: Any) -> str:
            return self._render(v, depth + 1, ancestors)

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            items = [
                f"{f.name}={child(getattr(value, f.name))}"
                for f in dataclasses.fields(value)
                if f.repr
            ]
            return self._block(f"{name}(", ")", items, depth)

        if _is_namedtuple(value):
            items = [f"{field}={child(item)}" for field, item in zip(value._fields, value)]
            return self._block(f"{name}(", ")", items, depth)

        if isinstance(value, Mapping):
            pairs = sorted((child(k), child(v)) for k, v in value.items())
            items = [f"{k}: {v}" for k, v in pairs]
            prefix = "" if type(value) is dict else f"{name} "
            return self._block(prefix + "{", "}", items, depth)

        if isinstance(value, (list, tuple)):
            items = [child(item) for item in value]
            opener, closer = ("[", "]") if isinstance(value, list) else ("(", ")")
            prefix = "" if type(value) in (list, tuple) else f"{name} "
            return self._block(prefix + opener, closer, items, depth)

        if isinstance(value, (set, frozenset)):
            items = sorted(child(item) for item in value)
            if not items:
                return f"{name}()"
            if type(value) is set:
                return self._block("{", "}", items, depth)
            return self._block(f"{name}({{", "})", items, depth)

        if isinstance(value, type):
            return f"[Class {value.__qualname__}]"
        if callable(value) and hasattr(value, "__qualname__"):
            return f"[Function {value.__qualname__}]"

        attrs: dict[str, Any] | None = getattr(value, "__dict__", None)
        if isinstance(attrs, dict):
            pairs = sorted((_quote(str(k)), child(v)) for k, v in attrs.items())
            return self._block(f"{name} {{", "}", [f"{k}: {v}" for k, v in pairs], depth)

        text: str = repr(value)
        if _ADDRESS_RE.search(text):
            return f"{name} {{}}"
        return text

    def _block(self, opener: str, closer: str, items: list[str], depth: int) -> str:
        if not items:
            return opener + closer
        pad: str = self.indent * (depth + 1)
        body: str = "".join(f"{pad}{item},\n" for item in items)
        return f"{opener}\n{body}{self.indent * depth}{closer}"


_default_serializer = Serializer()


def serialize(value: Any) -> str:
    """Render ``value`` with the shared default serializer.

    Raises:
        SerializationError: If the value cannot be rendered.
    """
    return _default_serializer.serialize(value)


def register_serializer(test: Predicate, printer: Printer) -> None:
    """Register a custom printer on the shared default serializer."""
    _default_serializer.register(test, printer)


def default_serializer() -> Serializer:
    """Return the shared default serializer instance."""
    return _default_serializer
