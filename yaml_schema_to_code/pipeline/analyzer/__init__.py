"""
Analyzer module.

Contains the anchor collector, reference and type resolution, and the
constraint compiler that together build the Type Graph.
"""

from __future__ import annotations

from .anchor_collector import AnchorCollector, find_declarations
from .constraint_compiler import (
    KOTLIN_STRING,
    PYTHON_STRING,
    ConstraintCompiler,
    StringLiteralSyntax,
    escape_string_literal,
    string_literal,
)
from .reference_resolver import ReferenceResolver, pointer_target
from .symbol_table import SymbolTable
from .type_nodes import (
    AliasType,
    AnyType,
    ArrayType,
    ConstraintDirective,
    EnumType,
    Field,
    NamedObjectType,
    NamedType,
    Predicate,
    ScalarKind,
    ScalarType,
    TypeDescriptor,
    TypeGraph,
    TypeKind,
    UnresolvedReference,
)
from .type_resolver import PendingConstraints, TypeResolver

__all__ = [
    "AnchorCollector",
    "find_declarations",
    "ConstraintCompiler",
    "StringLiteralSyntax",
    "PYTHON_STRING",
    "KOTLIN_STRING",
    "escape_string_literal",
    "string_literal",
    "ReferenceResolver",
    "pointer_target",
    "SymbolTable",
    "TypeResolver",
    "PendingConstraints",
    "TypeKind",
    "ScalarKind",
    "Predicate",
    "ConstraintDirective",
    "ScalarType",
    "AnyType",
    "ArrayType",
    "UnresolvedReference",
    "Field",
    "NamedObjectType",
    "EnumType",
    "AliasType",
    "NamedType",
    "TypeDescriptor",
    "TypeGraph",
]
