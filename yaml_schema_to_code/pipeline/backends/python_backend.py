"""
Python code generation backend.

Generates one module per named type (dataclasses, Enum classes and type
aliases) plus the `validate` marker and `validation` runtime modules.
"""

from __future__ import annotations

import collections
import keyword
from typing import Any

from ...utils import to_module_name
from ..analyzer.constraint_compiler import PYTHON_STRING
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
from ..config import CodeGeneratorConfig
from ..errors import UnsupportedTypeError
from .base import MARKER_UNIT, CodeBackend


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"
    COMMENT_PREFIX = "#"
    LITERAL_SYNTAX = PYTHON_STRING
    PYTHON_REGEX = True
    RESERVED_TYPE_NAMES = frozenset({"Validation", "ValidationError", "Validate", "Constraint"})

    TYPE_MAP = {
        "string": "str",
        "integer": "int",
        "number": "float",
        "boolean": "bool",
    }

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()
        self.referenced_types: set[str] = set()

    def _reset_imports(self) -> None:
        self.python_imports = set()
        self.referenced_types = set()

    def translate_type(self, descriptor: TypeDescriptor) -> str:
        """Translate a type descriptor to a Python type string."""
        if isinstance(descriptor, ScalarType):
            return self.TYPE_MAP[descriptor.kind.value]

        if isinstance(descriptor, AnyType):
            self.python_imports.add(("typing", "Any"))
            return "Any"

        if isinstance(descriptor, ArrayType):
            return f"list[{self.translate_type(descriptor.items)}]"

        if isinstance(descriptor, NAMED_TYPES):
            self.referenced_types.add(descriptor.name)
            return descriptor.name

        raise UnsupportedTypeError(f"Cannot translate {type(descriptor).__name__} to a Python type")

    def object_context(self, named: NamedObjectType, header: str) -> dict[str, Any]:
        self._reset_imports()
        self.python_imports.add(("dataclasses", "dataclass"))

        field_lines = [self._field_declaration(field) for field in named.fields]

        # Structures may refer to each other in cycles; imports are for type checkers only
        self.referenced_types.discard(named.name)
        type_checking_imports = self._local_imports(self.referenced_types)
        if type_checking_imports:
            self.python_imports.add(("typing", "TYPE_CHECKING"))

        return {
            "header": header,
            "class_name": named.name,
            "imports": self._assemble_imports(),
            "type_checking_imports": type_checking_imports,
            "field_lines": field_lines,
        }

    def enum_context(self, named: EnumType, header: str) -> dict[str, Any]:
        return {
            "header": header,
            "class_name": named.name,
            "members": [{"name": value, "value": self.literal(value)} for value in named.values],
        }

    def alias_context(self, named: AliasType, header: str) -> dict[str, Any]:
        self._reset_imports()
        self.python_imports.add(("typing", "TypeAlias"))
        target = self.translate_type(named.target)
        return {
            "header": header,
            "class_name": named.name,
            "target": target,
            "imports": self._assemble_imports(self._local_imports(self.referenced_types)),
        }

    def serialize_directive(self, directive: ConstraintDirective) -> str:
        predicate = self.literal(directive.predicate.value)
        if directive.argument is None:
            return f"Constraint({predicate})"
        if isinstance(directive.argument, str):
            return f"Constraint({predicate}, {self.literal(directive.argument)})"
        return f"Constraint({predicate}, {directive.argument})"

    def file_name(self, unit_name: str) -> str:
        return f"{to_module_name(unit_name)}.py"

    def field_name(self, field: Field) -> str:
        if keyword.iskeyword(field.name):
            return f"{field.name}_"
        return field.name

    def support_files(self) -> dict[str, str]:
        # Generated modules use relative imports and must live in a package
        return {"__init__.py": ""}

    def _field_declaration(self, field: Field) -> str:
        type_str = self.translate_type(field.type)
        if field.optional:
            type_str = f"{type_str} | None"

        directives = self.directives(field)
        if directives:
            # Field names are camelCase and cannot shadow underscored helpers
            self.python_imports.add(("dataclasses", "field as _field"))
            self.python_imports.add((f".{to_module_name(MARKER_UNIT)}", "Constraint"))
            self.python_imports.add((f".{to_module_name(MARKER_UNIT)}", "constrained as _constrained"))
            metadata = f"_constrained({', '.join(directives)})"
            init = f"_field(default=None, metadata={metadata})" if field.optional else f"_field(metadata={metadata})"
        elif field.optional:
            init = "None"
        else:
            init = None

        declaration = f"{self.field_name(field)}: {type_str}"
        return declaration if init is None else f"{declaration} = {init}"

    def _local_imports(self, type_names: set[str]) -> list[str]:
        return [f"from .{to_module_name(name)} import {name}" for name in sorted(type_names, key=to_module_name)]

    def _assemble_imports(self, extra_local: list[str] | None = None) -> list[str]:
        """Assemble Python import statements: standard library, then local modules."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib = [f"from {module} import {', '.join(sorted(import_groups[module]))}" for module in sorted(import_groups) if not module.startswith(".")]
        local = [f"from {module} import {', '.join(sorted(import_groups[module]))}" for module in sorted(import_groups) if module.startswith(".")]
        local.extend(extra_local or [])

        assembled = list(stdlib)
        if stdlib and local:
            assembled.append("")
        assembled.extend(local)
        return assembled
