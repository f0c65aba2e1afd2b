"""
Errors raised while compiling a schema document.

Every structural error is fatal for the document being compiled. Errors carry
the document, declaration and field they were raised against so that the
caller can report them precisely.
"""

from __future__ import annotations


class SchemaCompileError(Exception):
    """Base class for all schema compilation errors."""

    def __init__(
        self,
        message: str,
        declaration: str | None = None,
        field: str | None = None,
        document: str | None = None,
        line: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.declaration = declaration
        self.field = field
        self.document = document
        self.line = line

    def __str__(self) -> str:
        location = []
        if self.document:
            location.append(self.document if self.line is None else f"{self.document}:{self.line}")
        elif self.line is not None:
            location.append(f"line {self.line}")
        if self.declaration:
            location.append(self.declaration if self.field is None else f"{self.declaration}.{self.field}")
        if not location:
            return self.message
        return f"{', '.join(location)}: {self.message}"


class MalformedDocumentError(SchemaCompileError):
    """The document or one of its sections does not have the expected shape."""


class DuplicateNameError(SchemaCompileError):
    """A type name is declared (or would be generated) more than once."""


class UnknownReferenceError(SchemaCompileError):
    """A $ref pointer names a declaration that does not exist in the document."""


class UnsupportedTypeError(SchemaCompileError):
    """A type token or schema shape cannot be mapped to a type descriptor."""


class ReferenceCycleError(SchemaCompileError):
    """A chain of aliases refers back to itself."""


class InvalidConstraintArgumentError(SchemaCompileError):
    """A validation declaration carries an argument of the wrong kind."""


class UnsupportedConstraintError(SchemaCompileError):
    """A validation pattern is unknown and strict constraint checking is on."""


class EmptyEnumerationError(SchemaCompileError):
    """An enumeration declares no values."""


class DuplicateEnumerationValueError(SchemaCompileError):
    """Two values of one enumeration canonicalize to the same constant."""
