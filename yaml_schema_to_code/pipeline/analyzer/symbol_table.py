"""
Symbol table of named types.

A fresh table is built for every compiled document and handed from phase to
phase; it is never shared between documents.
"""

from __future__ import annotations

from typing import Iterator

from ..errors import DuplicateNameError
from .type_nodes import NamedType, TypeDescriptor


class SymbolTable:
    """Insertion-ordered registry of declared and synthesized named types.

    Two indexes are kept:
    - declared names (the keys of the declarations section), which are the
      targets of $ref pointers and type tokens
    - generated type names, which must be unique across declared and
      synthesized types since each one becomes an output unit
    """

    def __init__(self) -> None:
        self._declared: dict[str, TypeDescriptor] = {}
        self._types: dict[str, NamedType] = {}

    def declare(self, source_name: str, descriptor: NamedType, line: int | None = None) -> None:
        """
        Register a declaration under its source name and type name.

        Raises:
            DuplicateNameError: If the source name or the type name is taken
        """
        if source_name in self._declared:
            raise DuplicateNameError(f"Type '{source_name}' is declared more than once", declaration=source_name, line=line)
        existing = self._types.get(descriptor.name)
        if existing is not None:
            raise DuplicateNameError(
                f"Declarations '{existing.source_name}' and '{source_name}' both generate type '{descriptor.name}'",
                declaration=source_name,
                line=line,
            )
        self._declared[source_name] = descriptor
        self._types[descriptor.name] = descriptor

    def register_synthesized(self, descriptor: NamedType) -> None:
        """Register a synthesized type; its name must come from unique_name()."""
        if descriptor.name in self._types:
            raise DuplicateNameError(f"Type '{descriptor.name}' already exists", declaration=descriptor.source_name)
        self._types[descriptor.name] = descriptor

    def unique_name(self, base_name: str) -> str:
        """Return base_name, or base_name with the first free numeric suffix."""
        if base_name not in self._types:
            return base_name
        suffix = 2
        while f"{base_name}{suffix}" in self._types:
            suffix += 1
        return f"{base_name}{suffix}"

    def lookup(self, source_name: str) -> TypeDescriptor | None:
        """Look up a declaration by its source name."""
        return self._declared.get(source_name)

    def declared_names(self) -> list[str]:
        return list(self._declared)

    def types(self) -> list[NamedType]:
        """All named types: declarations in order, then synthesized types in discovery order."""
        return list(self._types.values())

    def __contains__(self, source_name: object) -> bool:
        return source_name in self._declared

    def __iter__(self) -> Iterator[str]:
        return iter(self._declared)

    def __len__(self) -> int:
        return len(self._declared)
