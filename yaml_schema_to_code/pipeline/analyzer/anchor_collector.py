"""
Anchor collector.

First pass of the analyzer: registers every named declaration with a
provisional descriptor built from its shallow shape only, so that references
between declarations resolve regardless of declaration order.
"""

from __future__ import annotations

import logging

from ...utils import to_type_name
from ..errors import MalformedDocumentError, UnsupportedTypeError
from ..schema_ast.nodes import MappingNode, ScalarNode, SchemaNode
from .reference_resolver import ReferenceResolver
from .symbol_table import SymbolTable
from .type_nodes import (
    SCALAR_TOKENS,
    AliasType,
    EnumType,
    NamedObjectType,
    NamedType,
    ScalarType,
    UnresolvedReference,
    check_alias_cycles,
)

logger = logging.getLogger(__name__)


def find_declarations(root: SchemaNode | None, schemas_path: list[str]) -> MappingNode:
    """
    Locate the named-declarations section of a document.

    Args:
        root: Document root
        schemas_path: Keys leading to the section, e.g. ["Components", "Schemas"]

    Raises:
        MalformedDocumentError: If the root is not a mapping or the section is absent
    """
    if not isinstance(root, MappingNode):
        raise MalformedDocumentError("Top level of a schema document must be a mapping", line=getattr(root, "line", None))

    node: SchemaNode = root
    for depth, key in enumerate(schemas_path):
        location = ".".join(schemas_path[: depth + 1])
        if not isinstance(node, MappingNode):
            raise MalformedDocumentError(f"'{location}' cannot be looked up in a non-mapping value", line=node.line)
        child = node.get(key)
        if child is None:
            raise MalformedDocumentError(f"Missing '{location}' section")
        node = child

    if not isinstance(node, MappingNode):
        raise MalformedDocumentError(f"'{'.'.join(schemas_path)}' must map type names to declarations", line=node.line)
    return node


class AnchorCollector:
    """Builds the provisional symbol table of a declarations section."""

    def collect(self, declarations: MappingNode) -> SymbolTable:
        """
        Collect every declaration into a new SymbolTable.

        Args:
            declarations: The named-declarations section

        Returns:
            A symbol table holding one provisional descriptor per declaration

        Raises:
            DuplicateNameError: If a name is declared twice
            UnsupportedTypeError: If a declaration has no usable type
            UnknownReferenceError: If an alias points to an unknown declaration
            ReferenceCycleError: If aliases refer to each other in a loop
        """
        table = SymbolTable()
        pending: list[tuple[AliasType, int]] = []

        for name, node in declarations.items():
            descriptor = self._provisional(name, node)
            table.declare(name, descriptor, line=node.line)
            if isinstance(descriptor, AliasType) and isinstance(descriptor.target, UnresolvedReference):
                pending.append((descriptor, node.line))

        logger.debug(f"Collected {len(table)} declarations, {len(pending)} pending aliases")

        # Forward alias chains: every name is known now, so a single retry suffices
        resolver = ReferenceResolver(table)
        for alias, line in pending:
            alias.target = resolver.resolve(alias.target, alias.source_name, line=line)

        check_alias_cycles(table.lookup(name) for name in table)
        return table

    def _provisional(self, name: str, node: SchemaNode) -> NamedType:
        type_name = to_type_name(name)
        if not type_name:
            raise MalformedDocumentError(f"'{name}' is not a usable type name", declaration=name, line=node.line)
        if not isinstance(node, MappingNode):
            raise MalformedDocumentError("Declaration must be a mapping", declaration=name, line=node.line)

        type_token = node.scalar("type")

        if type_token == "string" and "enum" in node:
            return EnumType(name=type_name, source_name=name)

        if type_token == "object":
            return NamedObjectType(name=type_name, source_name=name)

        if isinstance(type_token, str) and type_token in SCALAR_TOKENS:
            return AliasType(name=type_name, source_name=name, target=ScalarType(SCALAR_TOKENS[type_token]))

        if type_token == "array":
            # The element type is resolved with the other bodies
            return AliasType(name=type_name, source_name=name)

        ref_node = node.get("$ref")
        if ref_node is not None:
            if not isinstance(ref_node, ScalarNode) or not isinstance(ref_node.value, str):
                raise MalformedDocumentError("'$ref' must be a string", declaration=name, line=ref_node.line)
            return AliasType(name=type_name, source_name=name, target=UnresolvedReference(ref_node.value, is_pointer=True))

        if isinstance(type_token, str) and type_token:
            return AliasType(name=type_name, source_name=name, target=UnresolvedReference(type_token))

        if type_token is None:
            raise UnsupportedTypeError("Declaration has neither 'type' nor '$ref'", declaration=name, line=node.line)
        raise UnsupportedTypeError(f"Unsupported type: {type_token!r}", declaration=name, line=node.line)
