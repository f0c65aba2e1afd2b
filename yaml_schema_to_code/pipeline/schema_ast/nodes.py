"""
Node definitions for a loaded schema document.

These nodes are a faithful, untyped image of the YAML text: ordered mappings,
sequences and scalars. No schema semantics are attached at this stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

ScalarValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all document nodes."""

    # 1-based line of the node in the source text (0 when unknown)
    line: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ScalarNode(SchemaNode):
    """A string, number, boolean or null value."""

    value: ScalarValue = None


@dataclass(frozen=True)
class SequenceNode(SchemaNode):
    """An ordered list of nodes."""

    items: tuple[SchemaNode, ...] = ()

    def __iter__(self) -> Iterator[SchemaNode]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class MappingNode(SchemaNode):
    """An ordered, string-keyed mapping.

    Entries are kept as a tuple of pairs so that duplicate keys survive
    loading and can be reported by later phases.
    """

    entries: tuple[tuple[str, SchemaNode], ...] = ()

    def get(self, key: str, default: SchemaNode | None = None) -> SchemaNode | None:
        """Return the first value stored under key."""
        for entry_key, value in self.entries:
            if entry_key == key:
                return value
        return default

    def __contains__(self, key: object) -> bool:
        return any(entry_key == key for entry_key, _ in self.entries)

    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def items(self) -> tuple[tuple[str, SchemaNode], ...]:
        return self.entries

    def scalar(self, key: str) -> ScalarValue:
        """Return the scalar value under key, or None when absent or not a scalar."""
        node = self.get(key)
        if isinstance(node, ScalarNode):
            return node.value
        return None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class SchemaDocument:
    """A loaded schema document."""

    name: str = ""
    root: SchemaNode | None = None
