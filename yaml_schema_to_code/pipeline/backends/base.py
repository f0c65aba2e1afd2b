"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement and
the emission contract shared by all of them: one output unit per named type,
then the constraint marker and validation runtime units.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2

from ..analyzer.constraint_compiler import StringLiteralSyntax, string_literal
from ..analyzer.type_nodes import (
    AliasType,
    ConstraintDirective,
    EnumType,
    Field,
    NamedObjectType,
    NamedType,
    TypeDescriptor,
    TypeGraph,
)
from ..config import CodeGeneratorConfig
from ..errors import DuplicateNameError, UnsupportedTypeError

# Names of the shared units
VALIDATION_UNIT = "Validation"
MARKER_UNIT = "Validate"


@dataclass(frozen=True)
class OutputUnit:
    """One generated artifact, named after the type it defines."""

    name: str
    body: str
    # True for the shared validation runtime and constraint marker units
    shared: bool = False


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Line comment prefix
    COMMENT_PREFIX: str = "#"

    # String literal rules for serialized constraint arguments
    LITERAL_SYNTAX: StringLiteralSyntax = StringLiteralSyntax()

    # Type names defined by the shared units, unavailable to schemas
    RESERVED_TYPE_NAMES: frozenset[str] = frozenset()

    # Regex arguments are matched by Python's `re` at runtime
    PYTHON_REGEX: bool = False

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )

        self.object_template = self.jinja_env.get_template(f"object.{self.FILE_EXTENSION}.jinja2")
        self.enum_template = self.jinja_env.get_template(f"enum.{self.FILE_EXTENSION}.jinja2")
        self.alias_template = self.jinja_env.get_template(f"alias.{self.FILE_EXTENSION}.jinja2")
        self.marker_template = self.jinja_env.get_template(f"validate.{self.FILE_EXTENSION}.jinja2")
        self.runtime_template = self.jinja_env.get_template(f"validation.{self.FILE_EXTENSION}.jinja2")

    def generate(self, graph: TypeGraph, generation_comment: str = "") -> list[OutputUnit]:
        """
        Generate the output units of a document.

        Args:
            graph: The resolved type graph
            generation_comment: Comment placed at the top of every type unit

        Returns:
            Units in graph order, followed by the shared units when validations are on

        Raises:
            DuplicateNameError: If two units would be written to the same file
        """
        header = self._header(generation_comment)
        units = [OutputUnit(named.name, self.render_type(named, header)) for named in graph]

        if self.config.generate_validations:
            self._check_reserved_names(graph)
            shared_header = self._header("Generated by yaml_schema_to_code")
            units.append(OutputUnit(VALIDATION_UNIT, self.runtime_template.render(self._shared_context(shared_header)), shared=True))
            units.append(OutputUnit(MARKER_UNIT, self.marker_template.render(self._shared_context(shared_header)), shared=True))

        self._check_file_names(units)
        return units

    def render_type(self, named: NamedType, header: str) -> str:
        """Render the unit body of one named type."""
        if isinstance(named, NamedObjectType):
            return self.object_template.render(self.object_context(named, header))
        if isinstance(named, EnumType):
            return self.enum_template.render(self.enum_context(named, header))
        if isinstance(named, AliasType):
            return self.alias_template.render(self.alias_context(named, header))
        raise UnsupportedTypeError(f"Cannot emit {type(named).__name__}", declaration=getattr(named, "source_name", None))

    @abstractmethod
    def translate_type(self, descriptor: TypeDescriptor) -> str:
        """
        Translate a type descriptor to a language-specific type string.

        Args:
            descriptor: The type descriptor

        Returns:
            Language-specific type string
        """

    @abstractmethod
    def object_context(self, named: NamedObjectType, header: str) -> dict[str, Any]:
        """Prepare the template context for an object type."""

    @abstractmethod
    def enum_context(self, named: EnumType, header: str) -> dict[str, Any]:
        """Prepare the template context for an enumeration."""

    @abstractmethod
    def alias_context(self, named: AliasType, header: str) -> dict[str, Any]:
        """Prepare the template context for an alias."""

    @abstractmethod
    def serialize_directive(self, directive: ConstraintDirective) -> str:
        """Render one constraint directive in the marker syntax of the language."""

    @abstractmethod
    def file_name(self, unit_name: str) -> str:
        """Map a unit name to the file name it is written to."""

    @abstractmethod
    def field_name(self, field: Field) -> str:
        """Name of a field in the target language, keywords escaped."""

    def support_files(self) -> dict[str, str]:
        """Extra files the output directory needs, written only when absent."""
        return {}

    def literal(self, value: str) -> str:
        """Quote a value as a string literal of the target language."""
        return string_literal(value, self.LITERAL_SYNTAX)

    def directives(self, field: Field) -> list[str]:
        if not self.config.generate_validations:
            return []
        return [self.serialize_directive(directive) for directive in field.constraints]

    def _shared_context(self, header: str) -> dict[str, Any]:
        return {"header": header, "package": self.config.package_name}

    def _header(self, comment: str) -> str:
        if not comment or not self.config.add_generation_comment:
            return ""
        return "".join(f"{self.COMMENT_PREFIX} {line}\n" for line in comment.splitlines()) + "\n"

    def _check_reserved_names(self, graph: TypeGraph) -> None:
        for named in graph:
            if named.name in self.RESERVED_TYPE_NAMES:
                raise DuplicateNameError(f"Type name '{named.name}' is reserved by the validation runtime", declaration=named.source_name)

    def _check_file_names(self, units: list[OutputUnit]) -> None:
        seen: dict[str, str] = {}
        for unit in units:
            file_name = self.file_name(unit.name)
            if file_name in seen:
                raise DuplicateNameError(f"Types '{seen[file_name]}' and '{unit.name}' would both be written to {file_name}", declaration=unit.name)
            seen[file_name] = unit.name
