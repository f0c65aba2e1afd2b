"""
Reference resolver for $ref resolution.

Resolves `#/<path>/<name>` pointers and type tokens against the symbol table
of the document being compiled.
"""

from __future__ import annotations

from ..errors import UnknownReferenceError, UnsupportedTypeError
from .symbol_table import SymbolTable
from .type_nodes import TypeDescriptor, UnresolvedReference


def pointer_target(ref_path: str) -> str:
    """Return the declaration name a local pointer designates.

    The final path segment is the name: "#/Components/Schemas/Email" -> "Email".
    """
    return ref_path.rstrip("/").split("/")[-1]


def is_local_pointer(ref_path: str) -> bool:
    return ref_path.startswith("#/")


class ReferenceResolver:
    """Resolves pointers and type tokens to declared types."""

    def __init__(self, table: SymbolTable):
        """
        Initialize the resolver.

        Args:
            table: Symbol table of the current document
        """
        self.table = table

    def resolve_pointer(self, ref_path: str, declaration: str, field: str | None = None, line: int | None = None) -> TypeDescriptor:
        """
        Resolve a $ref pointer.

        Raises:
            UnknownReferenceError: If the pointer is external or names no declaration
        """
        if not is_local_pointer(ref_path):
            raise UnknownReferenceError(
                f"Only local references of the form '#/<path>/<name>' are supported, got '{ref_path}'",
                declaration=declaration,
                field=field,
                line=line,
            )
        target = self.table.lookup(pointer_target(ref_path))
        if target is None:
            raise UnknownReferenceError(f"Unknown reference: {ref_path}", declaration=declaration, field=field, line=line)
        return target

    def resolve_token(self, token: str, declaration: str, field: str | None = None, line: int | None = None) -> TypeDescriptor:
        """
        Resolve a type token naming another declaration.

        Raises:
            UnsupportedTypeError: If no declaration has that name
        """
        target = self.table.lookup(token)
        if target is None:
            where = f" for property {field}" if field else ""
            raise UnsupportedTypeError(f"Unsupported type: {token}{where}", declaration=declaration, field=field, line=line)
        return target

    def resolve(self, reference: UnresolvedReference, declaration: str, field: str | None = None, line: int | None = None) -> TypeDescriptor:
        """Resolve a pending reference recorded by an earlier pass."""
        if reference.is_pointer:
            return self.resolve_pointer(reference.name, declaration, field, line)
        return self.resolve_token(reference.name, declaration, field, line)
