"""
Type resolver.

Second pass of the analyzer: fills the bodies of the provisional descriptors
(object fields, enumeration values, array element types) and materializes
anonymous nested objects as synthesized named types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...utils import to_enum_constant, to_field_name, to_type_name
from ..errors import (
    DuplicateEnumerationValueError,
    DuplicateNameError,
    EmptyEnumerationError,
    MalformedDocumentError,
    UnsupportedTypeError,
)
from ..schema_ast.nodes import MappingNode, ScalarNode, SchemaNode, SequenceNode
from .reference_resolver import ReferenceResolver
from .symbol_table import SymbolTable
from .type_nodes import (
    SCALAR_TOKENS,
    AliasType,
    AnyType,
    ArrayType,
    EnumType,
    Field,
    NamedObjectType,
    ScalarType,
    TypeDescriptor,
    TypeGraph,
    check_alias_cycles,
)

logger = logging.getLogger(__name__)


@dataclass
class PendingConstraints:
    """A field's raw `validate` declarations, compiled after resolution."""

    field: Field
    node: SchemaNode
    declaration: str
    field_path: str


class TypeResolver:
    """Resolves declaration bodies into a TypeGraph."""

    def __init__(self, table: SymbolTable):
        """
        Initialize the resolver.

        Args:
            table: Symbol table filled by the anchor collector
        """
        self.table = table
        self.references = ReferenceResolver(table)
        self.pending_constraints: list[PendingConstraints] = []

    def resolve(self, declarations: MappingNode, document: str = "") -> TypeGraph:
        """
        Resolve every declaration of the section.

        Args:
            declarations: The named-declarations section the table was built from
            document: Document name recorded on the graph

        Returns:
            TypeGraph with all named types in generation order

        Raises:
            SchemaCompileError: On the first structural error found
        """
        for name, node in declarations.items():
            descriptor = self.table.lookup(name)
            if isinstance(descriptor, NamedObjectType):
                self._resolve_object(descriptor, node, name, "")
            elif isinstance(descriptor, EnumType):
                descriptor.values = self._resolve_enum(node, name)
            elif isinstance(descriptor, AliasType) and descriptor.target is None:
                descriptor.target = self._resolve_array(node, name, "", descriptor.name)

        graph = TypeGraph(document=document, types=self.table.types())

        # Array element types are known only now
        check_alias_cycles(graph.types)
        graph.verify()

        logger.debug(f"Resolved {len(graph)} named types")
        return graph

    def _resolve_object(self, target: NamedObjectType, node: SchemaNode, declaration: str, path: str) -> None:
        properties = node.get("properties") if isinstance(node, MappingNode) else None
        if properties is None or (isinstance(properties, ScalarNode) and properties.value is None):
            return
        if not isinstance(properties, MappingNode):
            raise MalformedDocumentError("'properties' must be a mapping", declaration=declaration, field=path or None, line=properties.line)

        seen: dict[str, str] = {}
        for prop_name, prop_node in properties.items():
            field_path = f"{path}.{prop_name}" if path else prop_name
            field_name = to_field_name(prop_name)
            if not field_name:
                raise MalformedDocumentError(f"'{prop_name}' is not a usable field name", declaration=declaration, field=field_path, line=prop_node.line)
            if field_name in seen:
                raise DuplicateNameError(
                    f"Properties '{seen[field_name]}' and '{prop_name}' both generate field '{field_name}'",
                    declaration=declaration,
                    field=field_path,
                    line=prop_node.line,
                )
            seen[field_name] = prop_name

            if not isinstance(prop_node, MappingNode):
                raise MalformedDocumentError("Property must be a mapping", declaration=declaration, field=field_path, line=prop_node.line)

            required = self._required(prop_node, declaration, field_path)
            field = Field(
                name=field_name,
                source_name=prop_name,
                type=self._resolve_type(prop_node, declaration, field_path, prop_name),
                required=required,
                optional=not required,
            )
            target.fields.append(field)

            validate = prop_node.get("validate")
            if validate is not None:
                self.pending_constraints.append(PendingConstraints(field, validate, declaration, field_path))

    def _resolve_type(self, node: MappingNode, declaration: str, field_path: str, base_name: str) -> TypeDescriptor:
        """Resolve the type of a property (or array element) declaration."""
        ref_node = node.get("$ref")
        if ref_node is not None:
            if not isinstance(ref_node, ScalarNode) or not isinstance(ref_node.value, str):
                raise MalformedDocumentError("'$ref' must be a string", declaration=declaration, field=field_path, line=ref_node.line)
            return self.references.resolve_pointer(ref_node.value, declaration, field_path, ref_node.line)

        type_token = node.scalar("type")

        if type_token == "object":
            return self._synthesize_object(node, declaration, field_path, base_name)

        if type_token == "array" or (type_token is None and "items" in node):
            return self._resolve_array(node, declaration, field_path, to_type_name(base_name))

        if isinstance(type_token, str) and type_token in SCALAR_TOKENS:
            return ScalarType(SCALAR_TOKENS[type_token])

        if isinstance(type_token, str) and type_token:
            return self.references.resolve_token(type_token, declaration, field_path, node.line)

        if type_token is None and "type" not in node:
            raise UnsupportedTypeError(f"Property {field_path} has neither 'type' nor '$ref'", declaration=declaration, field=field_path, line=node.line)
        raise UnsupportedTypeError(f"Unsupported type: {type_token!r} for property {field_path}", declaration=declaration, field=field_path, line=node.line)

    def _synthesize_object(self, node: MappingNode, declaration: str, field_path: str, base_name: str) -> NamedObjectType:
        type_name = self.table.unique_name(to_type_name(base_name))
        nested = NamedObjectType(name=type_name, source_name=base_name, synthesized=True)
        # Registered before recursing so deeper objects see the name as taken
        self.table.register_synthesized(nested)
        logger.debug(f"Synthesized type {type_name} for {declaration}.{field_path}")
        self._resolve_object(nested, node, declaration, field_path)
        return nested

    def _resolve_array(self, node: SchemaNode, declaration: str, field_path: str, owner_type_name: str) -> ArrayType:
        items = node.get("items") if isinstance(node, MappingNode) else None
        if items is None or (isinstance(items, ScalarNode) and items.value is None):
            return ArrayType(AnyType())
        if not isinstance(items, MappingNode):
            raise UnsupportedTypeError(
                "'items' must be a single schema mapping",
                declaration=declaration,
                field=field_path or None,
                line=items.line,
            )
        item_path = f"{field_path}[]" if field_path else "[]"
        return ArrayType(self._resolve_type(items, declaration, item_path, f"{owner_type_name}Item"))

    def _resolve_enum(self, node: MappingNode, declaration: str) -> list[str]:
        values_node = node.get("enum")
        if not isinstance(values_node, SequenceNode):
            if isinstance(values_node, ScalarNode) and values_node.value is None:
                raise EmptyEnumerationError("Enumeration has no values", declaration=declaration, line=values_node.line)
            raise MalformedDocumentError("'enum' must be a list of values", declaration=declaration, line=node.line)
        if len(values_node) == 0:
            raise EmptyEnumerationError("Enumeration has no values", declaration=declaration, line=values_node.line)

        values: list[str] = []
        origins: dict[str, object] = {}
        for item in values_node:
            if not isinstance(item, ScalarNode) or item.value is None:
                raise MalformedDocumentError("Enumeration values must be non-null scalars", declaration=declaration, line=item.line)
            constant = to_enum_constant(str(item.value))
            if not constant:
                raise MalformedDocumentError(f"Enumeration value {item.value!r} has no identifier characters", declaration=declaration, line=item.line)
            if constant in origins:
                raise DuplicateEnumerationValueError(
                    f"Values {origins[constant]!r} and {item.value!r} both canonicalize to {constant}",
                    declaration=declaration,
                    line=item.line,
                )
            origins[constant] = item.value
            values.append(constant)
        return values

    def _required(self, node: MappingNode, declaration: str, field_path: str) -> bool:
        required_node = node.get("required")
        if required_node is None:
            return False
        if isinstance(required_node, ScalarNode) and isinstance(required_node.value, bool):
            return required_node.value
        raise MalformedDocumentError("'required' must be true or false", declaration=declaration, field=field_path, line=required_node.line)
