"""
Tests for the second analyzer pass: building the Type Graph.
"""

from textwrap import dedent

import pytest

from yaml_schema_to_code.pipeline.analyzer import (
    AliasType,
    AnchorCollector,
    AnyType,
    ArrayType,
    EnumType,
    Field,
    NamedObjectType,
    ScalarKind,
    ScalarType,
    TypeGraph,
    TypeKind,
    TypeResolver,
    UnresolvedReference,
    find_declarations,
)
from yaml_schema_to_code.pipeline.errors import (
    DuplicateEnumerationValueError,
    DuplicateNameError,
    EmptyEnumerationError,
    MalformedDocumentError,
    ReferenceCycleError,
    UnknownReferenceError,
    UnsupportedTypeError,
)
from yaml_schema_to_code.pipeline.schema_ast import DocumentLoader


def resolve(schemas):
    """Resolve a `Components.Schemas` body given as indented YAML."""
    text = "Components:\n  Schemas:\n" + "\n".join(f"    {line}" for line in dedent(schemas).strip("\n").splitlines())
    declarations = find_declarations(DocumentLoader().load(text).root, ["Components", "Schemas"])
    resolver = TypeResolver(AnchorCollector().collect(declarations))
    return resolver.resolve(declarations, "test.yaml")


def test_fields_in_source_order():
    graph = resolve(
        """
        Person:
          type: object
          properties:
            zeta:
              type: string
            alpha:
              type: integer
            mid:
              type: boolean
        """
    )

    person = graph.get("Person")
    assert [f.name for f in person.fields] == ["zeta", "alpha", "mid"]
    assert [f.type for f in person.fields] == [
        ScalarType(ScalarKind.STRING),
        ScalarType(ScalarKind.INTEGER),
        ScalarType(ScalarKind.BOOLEAN),
    ]


def test_required_and_optional():
    graph = resolve(
        """
        Person:
          type: object
          properties:
            first_name:
              type: string
              required: true
            nickname:
              type: string
        """
    )

    first_name, nickname = graph.get("Person").fields
    assert (first_name.name, first_name.source_name) == ("firstName", "first_name")
    assert first_name.required and not first_name.optional
    assert not nickname.required and nickname.optional
    # Optionality does not wrap the type
    assert nickname.type == ScalarType(ScalarKind.STRING)


def test_required_must_be_boolean():
    with pytest.raises(MalformedDocumentError, match="'required' must be true or false"):
        resolve(
            """
            Person:
              type: object
              properties:
                name:
                  type: string
                  required: "yes"
            """
        )


def test_forward_reference_to_enum():
    graph = resolve(
        """
        Employee:
          type: object
          properties:
            department:
              $ref: '#/Components/Schemas/Department'
        Department:
          type: string
          enum: [SALES, HR]
        """
    )

    department = graph.get("Employee").fields[0].type
    assert isinstance(department, EnumType)
    assert department is graph.get("Department")
    assert department.values == ["SALES", "HR"]


def test_type_token_naming_declaration():
    graph = resolve(
        """
        Employee:
          type: object
          properties:
            contact:
              type: Email
        Email:
          type: string
        """
    )

    assert graph.get("Employee").fields[0].type is graph.get("Email")


def test_nested_object_is_synthesized():
    graph = resolve(
        """
        Employee:
          type: object
          properties:
            address_details:
              type: object
              properties:
                street:
                  type: string
        """
    )

    assert [named.name for named in graph] == ["Employee", "AddressDetails"]
    nested = graph.get("AddressDetails")
    assert nested.synthesized
    assert graph.get("Employee").fields[0].type is nested
    assert [f.name for f in nested.fields] == ["street"]


def test_synthesized_name_collision_gets_suffix():
    graph = resolve(
        """
        Address:
          type: string
        Employee:
          type: object
          properties:
            address:
              type: object
              properties:
                home:
                  type: object
            manager:
              type: object
              properties:
                address:
                  type: object
        """
    )

    assert [named.name for named in graph] == ["Address", "Employee", "Address2", "Home", "Manager", "Address3"]
    assert isinstance(graph.get("Address"), AliasType)


def test_arrays():
    graph = resolve(
        """
        Team:
          type: object
          properties:
            names:
              type: array
              items:
                type: string
            anything:
              type: array
            members:
              type: array
              items:
                type: object
                properties:
                  name:
                    type: string
        """
    )

    names, anything, members = graph.get("Team").fields
    assert isinstance(names.type, ArrayType)
    assert names.type.items == ScalarType(ScalarKind.STRING)
    assert anything.type.items == AnyType()
    item = members.type.items
    assert isinstance(item, NamedObjectType)
    assert item.name == "MembersItem"


def test_array_declaration():
    graph = resolve(
        """
        Tags:
          type: array
          items:
            type: object
            properties:
              label:
                type: string
        """
    )

    tags = graph.get("Tags")
    assert isinstance(tags, AliasType)
    assert isinstance(tags.target, ArrayType)
    assert tags.target.items is graph.get("TagsItem")


def test_unknown_reference():
    with pytest.raises(UnknownReferenceError) as exc_info:
        resolve(
            """
            Employee:
              type: object
              properties:
                manager:
                  $ref: '#/Components/Schemas/Manager'
            """
        )

    assert exc_info.value.declaration == "Employee"
    assert exc_info.value.field == "manager"


def test_external_reference_is_unknown():
    with pytest.raises(UnknownReferenceError, match="Only local references"):
        resolve(
            """
            Employee:
              type: object
              properties:
                manager:
                  $ref: 'people.yaml#/Manager'
            """
        )


def test_unsupported_type():
    with pytest.raises(UnsupportedTypeError, match="Unsupported type: date for property hired"):
        resolve(
            """
            Employee:
              type: object
              properties:
                hired:
                  type: date
            """
        )


def test_property_without_type():
    with pytest.raises(UnsupportedTypeError, match="neither"):
        resolve(
            """
            Employee:
              type: object
              properties:
                hired:
                  format: date
            """
        )


def test_duplicate_field_names():
    with pytest.raises(DuplicateNameError, match="both generate field 'firstName'"):
        resolve(
            """
            Employee:
              type: object
              properties:
                first_name:
                  type: string
                firstName:
                  type: string
            """
        )


def test_enum_values_are_canonicalized():
    graph = resolve(
        """
        Status:
          type: string
          enum: [open, closed, under repair, 1st]
        """
    )

    assert graph.get("Status").values == ["OPEN", "CLOSED", "UNDER_REPAIR", "_1ST"]


def test_empty_enum():
    with pytest.raises(EmptyEnumerationError):
        resolve(
            """
            Status:
              type: string
              enum: []
            """
        )


def test_duplicate_enum_values():
    with pytest.raises(DuplicateEnumerationValueError, match="SALES_TEAM"):
        resolve(
            """
            Team:
              type: string
              enum: [sales team, Sales-Team]
            """
        )


def test_graph_has_no_unresolved_references():
    graph = resolve(
        """
        Contact:
          type: Email
        Email:
          type: string
        Team:
          type: object
          properties:
            contacts:
              type: array
              items:
                $ref: '#/Components/Schemas/Contact'
        """
    )

    assert graph.unresolved() == []
    assert graph.document == "test.yaml"


def test_verify_rejects_leftover_reference():
    person = NamedObjectType(name="Person", source_name="Person")
    person.fields.append(Field(name="manager", source_name="manager", type=ArrayType(UnresolvedReference("Manager"))))
    graph = TypeGraph(document="people.yaml", types=[person])

    with pytest.raises(UnknownReferenceError) as exc_info:
        graph.verify()

    assert str(exc_info.value) == "people.yaml, Person.manager: Unresolved reference: Manager"


def test_alias_of_array_of_itself():
    with pytest.raises(ReferenceCycleError) as exc_info:
        resolve(
            """
            Tags:
              type: array
              items:
                $ref: '#/Components/Schemas/Tags'
            """
        )

    assert "Tags -> Tags" in str(exc_info.value)


def test_alias_cycle_through_array():
    with pytest.raises(ReferenceCycleError) as exc_info:
        resolve(
            """
            A:
              $ref: '#/Components/Schemas/B'
            B:
              type: array
              items:
                type: A
            """
        )

    assert "A -> B -> A" in str(exc_info.value)


def test_object_fields_may_form_cycles():
    graph = resolve(
        """
        Employee:
          type: object
          properties:
            manager:
              $ref: '#/Components/Schemas/Employee'
            team:
              $ref: '#/Components/Schemas/Team'
        Team:
          type: object
          properties:
            members:
              type: array
              items:
                $ref: '#/Components/Schemas/Employee'
        Staff:
          type: array
          items:
            $ref: '#/Components/Schemas/Employee'
        """
    )

    employee, team = graph.get("Employee"), graph.get("Team")
    assert employee.fields[0].type is employee
    assert employee.fields[1].type is team
    assert team.fields[0].type.items is employee
    assert graph.get("Staff").target.items is employee


def test_type_kinds():
    graph = resolve(
        """
        Status:
          type: string
          enum: [OPEN]
        Code:
          type: string
        Box:
          type: object
          properties:
            labels:
              type: array
        """
    )

    assert [named.type_kind for named in graph] == [TypeKind.ENUM, TypeKind.ALIAS, TypeKind.OBJECT]
    labels = graph.get("Box").fields[0].type
    assert labels.type_kind == TypeKind.ARRAY
    assert labels.items.type_kind == TypeKind.ANY
    assert graph.get("Code").target.type_kind == TypeKind.SCALAR
