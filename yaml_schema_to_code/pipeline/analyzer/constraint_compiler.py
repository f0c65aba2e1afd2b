"""
Constraint compiler.

Turns the `validate` declarations of a property into canonical constraint
directives, and serializes directive arguments as string literals of the
target language.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import (
    InvalidConstraintArgumentError,
    MalformedDocumentError,
    UnsupportedConstraintError,
)
from ..schema_ast.nodes import MappingNode, ScalarNode, SchemaNode, SequenceNode
from .type_nodes import ConstraintDirective, Predicate
from .type_resolver import PendingConstraints

logger = logging.getLogger(__name__)

# Declared pattern name -> canonical predicate
PATTERN_PREDICATES = {
    "isLetter": Predicate.IS_ALPHA,
    "isNumeric": Predicate.IS_NUMERIC,
    "minLength": Predicate.MIN_LENGTH,
    "maxLength": Predicate.MAX_LENGTH,
    "regex": Predicate.REGEX,
}

_CONTROL_ESCAPES = {"\n": "n", "\r": "r", "\t": "t"}


@dataclass(frozen=True)
class StringLiteralSyntax:
    """Lexical rules of a double-quoted string literal in a target language."""

    quote: str = '"'
    escape: str = "\\"
    # Character starting an interpolation inside literals, if the language has one
    interpolation_marker: str | None = None


PYTHON_STRING = StringLiteralSyntax()
KOTLIN_STRING = StringLiteralSyntax(interpolation_marker="$")


def escape_string_literal(value: str, syntax: StringLiteralSyntax) -> str:
    """
    Escape a value for embedding between the quotes of a string literal.

    The escape character is escaped first so that escapes added afterwards are
    not doubled.

    Args:
        value: The raw text
        syntax: The target literal syntax

    Returns:
        The escaped text, without surrounding quotes
    """
    escaped = value.replace(syntax.escape, syntax.escape * 2)
    escaped = escaped.replace(syntax.quote, syntax.escape + syntax.quote)
    if syntax.interpolation_marker:
        escaped = escaped.replace(syntax.interpolation_marker, syntax.escape + syntax.interpolation_marker)
    for char, code in _CONTROL_ESCAPES.items():
        escaped = escaped.replace(char, syntax.escape + code)
    return escaped


def string_literal(value: str, syntax: StringLiteralSyntax) -> str:
    """Quote and escape a value as a string literal."""
    return f"{syntax.quote}{escape_string_literal(value, syntax)}{syntax.quote}"


class ConstraintCompiler:
    """Compiles `validate` declarations into ConstraintDirective lists."""

    def __init__(self, strict: bool = False, check_regex: bool = True):
        """
        Initialize the compiler.

        Args:
            strict: Raise on unknown pattern names instead of dropping them
            check_regex: Require `regex` arguments to compile with Python's `re`
        """
        self.strict = strict
        self.check_regex = check_regex

    def attach(self, pending: list[PendingConstraints]) -> None:
        """Compile the collected `validate` declarations onto their fields."""
        for item in pending:
            item.field.constraints = self.compile(item.node, item.declaration, item.field_path)
        logger.debug(f"Compiled constraints for {len(pending)} fields")

    def compile(self, node: SchemaNode | None, declaration: str, field: str) -> list[ConstraintDirective]:
        """
        Compile the `validate` node of one property.

        Args:
            node: The `validate` value (a sequence of {pattern, value} mappings)
            declaration: Name of the declaration owning the property
            field: Name of the property

        Returns:
            Directives in declaration order

        Raises:
            MalformedDocumentError: If `validate` is not a list of mappings
            InvalidConstraintArgumentError: If an argument has the wrong kind
            UnsupportedConstraintError: In strict mode, for unknown patterns
        """
        if node is None or (isinstance(node, ScalarNode) and node.value is None):
            return []
        if not isinstance(node, SequenceNode):
            raise MalformedDocumentError("'validate' must be a list", declaration=declaration, field=field, line=node.line)

        directives = []
        for entry in node:
            if not isinstance(entry, MappingNode):
                raise MalformedDocumentError(
                    "'validate' entries must be mappings with 'pattern' and 'value'",
                    declaration=declaration,
                    field=field,
                    line=entry.line,
                )
            directive = self._compile_entry(entry, declaration, field)
            if directive is not None:
                directives.append(directive)
        return directives

    def _compile_entry(self, entry: MappingNode, declaration: str, field: str) -> ConstraintDirective | None:
        pattern = entry.scalar("pattern")
        predicate = PATTERN_PREDICATES.get(pattern) if isinstance(pattern, str) else None

        if predicate is None:
            if self.strict:
                raise UnsupportedConstraintError(
                    f"Unknown validation pattern {pattern!r}",
                    declaration=declaration,
                    field=field,
                    line=entry.line,
                )
            logger.warning(f"Dropping unknown validation pattern {pattern!r} on {declaration}.{field}")
            return None

        if predicate in (Predicate.IS_ALPHA, Predicate.IS_NUMERIC):
            return ConstraintDirective(predicate)

        value_node = entry.get("value")
        value = value_node.value if isinstance(value_node, ScalarNode) else value_node

        if predicate in (Predicate.MIN_LENGTH, Predicate.MAX_LENGTH):
            # bool is an int subclass; `value: true` is not a length
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidConstraintArgumentError(
                    f"{pattern} expects a non-negative integer, got {_describe(value)}",
                    declaration=declaration,
                    field=field,
                    line=entry.line,
                )
            return ConstraintDirective(predicate, value)

        if not isinstance(value, str):
            raise InvalidConstraintArgumentError(
                f"regex expects a string pattern, got {_describe(value)}",
                declaration=declaration,
                field=field,
                line=entry.line,
            )
        if self.check_regex:
            try:
                re.compile(value)
            except re.error as exc:
                raise InvalidConstraintArgumentError(
                    f"Invalid regular expression {value!r}: {exc}",
                    declaration=declaration,
                    field=field,
                    line=entry.line,
                ) from exc
        return ConstraintDirective(predicate, value)


def _describe(value) -> str:
    if value is None:
        return "nothing"
    if isinstance(value, SchemaNode):
        return "a nested structure"
    return f"{type(value).__name__} {value!r}"
