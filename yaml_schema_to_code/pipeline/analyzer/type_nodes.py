"""
Type descriptor definitions.

These nodes form the Type Graph: the analyzed and resolved schema, ready for
code generation. Once resolution finishes, no UnresolvedReference remains.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Union

from ..errors import ReferenceCycleError, UnknownReferenceError


class TypeKind(Enum):
    """Kind of type in the graph."""

    SCALAR = "scalar"  # string, integer, number, boolean
    OBJECT = "object"  # A generated structure
    ENUM = "enum"  # Enumeration
    ALIAS = "alias"  # Named alias of another type
    ARRAY = "array"  # Ordered collection
    ANY = "any"  # Unconstrained element type
    UNRESOLVED = "unresolved"  # Pending reference, never emitted


class ScalarKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


SCALAR_TOKENS = {kind.value: kind for kind in ScalarKind}


class Predicate(str, Enum):
    """Canonical validation predicates."""

    IS_ALPHA = "isAlpha"
    IS_NUMERIC = "isNumeric"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    REGEX = "regex"


@dataclass(frozen=True)
class ConstraintDirective:
    """A canonical validation rule attached to one field."""

    predicate: Predicate
    argument: str | int | None = None


@dataclass(eq=False)
class ScalarType:
    kind: ScalarKind = ScalarKind.STRING

    type_kind = TypeKind.SCALAR

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ScalarType) and other.kind == self.kind

    def __hash__(self) -> int:
        return hash((ScalarType, self.kind))


@dataclass(eq=False)
class AnyType:
    type_kind = TypeKind.ANY

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AnyType)

    def __hash__(self) -> int:
        return hash(AnyType)


@dataclass(eq=False)
class ArrayType:
    items: TypeDescriptor = field(default_factory=AnyType)

    type_kind = TypeKind.ARRAY


@dataclass(eq=False)
class UnresolvedReference:
    """A name whose target is not known yet."""

    name: str = ""
    # True when the name came from a $ref pointer rather than a type token
    is_pointer: bool = False

    type_kind = TypeKind.UNRESOLVED


@dataclass
class Field:
    """A field of a named object type."""

    name: str = ""  # Field name in target convention (camelCase)
    source_name: str = ""  # Property key in the document
    type: TypeDescriptor | None = None
    required: bool = False
    # Non-required fields are nullable at emission time; the type is left untouched
    optional: bool = True
    constraints: list[ConstraintDirective] = field(default_factory=list)


# Named types compare by identity: two declarations are never the same type.


@dataclass(eq=False)
class NamedObjectType:
    name: str = ""
    source_name: str = ""
    fields: list[Field] = field(default_factory=list)
    # True for types synthesized from anonymous nested objects
    synthesized: bool = False

    type_kind = TypeKind.OBJECT


@dataclass(eq=False)
class EnumType:
    name: str = ""
    source_name: str = ""
    values: list[str] = field(default_factory=list)

    type_kind = TypeKind.ENUM


@dataclass(eq=False)
class AliasType:
    name: str = ""
    source_name: str = ""
    target: TypeDescriptor | None = None

    type_kind = TypeKind.ALIAS


TypeDescriptor = Union[ScalarType, AnyType, ArrayType, UnresolvedReference, NamedObjectType, EnumType, AliasType]
NamedType = Union[NamedObjectType, EnumType, AliasType]

NAMED_TYPES = (NamedObjectType, EnumType, AliasType)


def iter_type_tree(descriptor: TypeDescriptor | None) -> Iterator[TypeDescriptor]:
    """Yield a descriptor and its anonymous components, stopping at named types.

    Named types referenced from a field are yielded but not descended into,
    since they are emitted as their own units.
    """
    if descriptor is None:
        return
    yield descriptor
    if isinstance(descriptor, ArrayType):
        yield from iter_type_tree(descriptor.items)


def check_alias_cycles(types: Iterable[TypeDescriptor | None]) -> None:
    """
    Reject aliases whose target leads back to themselves.

    Array element types are followed. Objects and enumerations end the walk,
    so structures may refer to each other through their fields.

    Raises:
        ReferenceCycleError: Naming the aliases of the first cycle found
    """
    for start in types:
        if not isinstance(start, AliasType):
            continue
        chain = [start]
        current = start.target
        while True:
            while isinstance(current, ArrayType):
                current = current.items
            if not isinstance(current, AliasType):
                break
            if current in chain:
                names = " -> ".join(alias.source_name for alias in chain[chain.index(current) :])
                raise ReferenceCycleError(f"Alias cycle: {names} -> {current.source_name}", declaration=start.source_name)
            chain.append(current)
            current = current.target


@dataclass
class TypeGraph:
    """The fully resolved set of named types of one document."""

    document: str = ""

    # All named types in generation order
    types: list[NamedType] = field(default_factory=list)

    def get(self, name: str) -> NamedType | None:
        for named in self.types:
            if named.name == name:
                return named
        return None

    def __iter__(self) -> Iterator[NamedType]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def unresolved(self) -> list[tuple[NamedType, str | None, UnresolvedReference]]:
        """List every UnresolvedReference still reachable, with its owner and field."""
        found = []
        for named in self.types:
            if isinstance(named, NamedObjectType):
                for item in named.fields:
                    for node in iter_type_tree(item.type):
                        if isinstance(node, UnresolvedReference):
                            found.append((named, item.source_name, node))
            elif isinstance(named, AliasType):
                for node in iter_type_tree(named.target):
                    if isinstance(node, UnresolvedReference):
                        found.append((named, None, node))
        return found

    def verify(self) -> None:
        """
        Check that resolution left no reference behind.

        Raises:
            UnknownReferenceError: Naming the first unresolved reference found
        """
        leftover = self.unresolved()
        if leftover:
            owner, field_name, reference = leftover[0]
            raise UnknownReferenceError(f"Unresolved reference: {reference.name}", declaration=owner.source_name, field=field_name, document=self.document or None)
