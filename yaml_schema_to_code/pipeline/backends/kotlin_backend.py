"""
Kotlin code generation backend.

Generates one file per named type (data classes, enum classes and type
aliases) plus the `Validate` annotation and `Validation` runtime files.
"""

from __future__ import annotations

from typing import Any

from ..analyzer.constraint_compiler import KOTLIN_STRING
from ..analyzer.type_nodes import (
    NAMED_TYPES,
    AliasType,
    AnyType,
    ArrayType,
    ConstraintDirective,
    EnumType,
    Field,
    NamedObjectType,
    ScalarType,
    TypeDescriptor,
)
from ..errors import UnsupportedTypeError
from .base import CodeBackend

KOTLIN_KEYWORDS = frozenset(
    {
        "as",
        "break",
        "class",
        "continue",
        "do",
        "else",
        "false",
        "for",
        "fun",
        "if",
        "in",
        "interface",
        "is",
        "null",
        "object",
        "package",
        "return",
        "super",
        "this",
        "throw",
        "true",
        "try",
        "typealias",
        "typeof",
        "val",
        "var",
        "when",
        "while",
    }
)


class KotlinBackend(CodeBackend):
    """Kotlin code generation backend."""

    TEMPLATE_LANG = "kotlin"
    FILE_EXTENSION = "kt"
    COMMENT_PREFIX = "//"
    LITERAL_SYNTAX = KOTLIN_STRING
    RESERVED_TYPE_NAMES = frozenset({"Validation", "ValidationError", "Validate", "Constraint"})

    TYPE_MAP = {
        "string": "String",
        "integer": "Int",
        "number": "Double",
        "boolean": "Boolean",
    }

    def translate_type(self, descriptor: TypeDescriptor) -> str:
        """Translate a type descriptor to a Kotlin type string."""
        if isinstance(descriptor, ScalarType):
            return self.TYPE_MAP[descriptor.kind.value]

        if isinstance(descriptor, AnyType):
            return "Any?"

        if isinstance(descriptor, ArrayType):
            return f"List<{self.translate_type(descriptor.items)}>"

        if isinstance(descriptor, NAMED_TYPES):
            return descriptor.name

        raise UnsupportedTypeError(f"Cannot translate {type(descriptor).__name__} to a Kotlin type")

    def object_context(self, named: NamedObjectType, header: str) -> dict[str, Any]:
        fields = []
        for field in named.fields:
            type_str = self.translate_type(field.type)
            # Any? is already nullable
            if field.optional and not type_str.endswith("?"):
                type_str = f"{type_str}?"
            directives = self.directives(field)
            fields.append(
                {
                    "name": self.field_name(field),
                    "type": type_str,
                    "default": " = null" if field.optional else "",
                    "annotation": f"@property:Validate({', '.join(directives)})" if directives else "",
                }
            )
        return {
            "header": header,
            "package": self.config.package_name,
            "class_name": named.name,
            "fields": fields,
        }

    def enum_context(self, named: EnumType, header: str) -> dict[str, Any]:
        return {
            "header": header,
            "package": self.config.package_name,
            "class_name": named.name,
            "members": list(named.values),
        }

    def alias_context(self, named: AliasType, header: str) -> dict[str, Any]:
        return {
            "header": header,
            "package": self.config.package_name,
            "class_name": named.name,
            "target": self.translate_type(named.target),
        }

    def serialize_directive(self, directive: ConstraintDirective) -> str:
        predicate = self.literal(directive.predicate.value)
        if directive.argument is None:
            return f"Constraint(predicate = {predicate})"
        # Annotation arguments are strings; the runtime parses lengths back
        return f"Constraint(predicate = {predicate}, argument = {self.literal(str(directive.argument))})"

    def file_name(self, unit_name: str) -> str:
        return f"{unit_name}.kt"

    def field_name(self, field: Field) -> str:
        if field.name in KOTLIN_KEYWORDS:
            return f"`{field.name}`"
        return field.name
