"""
End-to-end tests of the compilation pipeline.
"""

import shutil
from pathlib import Path

import pytest

from yaml_schema_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator
from yaml_schema_to_code.pipeline.analyzer import AliasType, EnumType, NamedObjectType, Predicate
from yaml_schema_to_code.pipeline.errors import (
    DuplicateNameError,
    InvalidConstraintArgumentError,
    MalformedDocumentError,
    UnknownReferenceError,
)

TEST_DATA = Path(__file__).parent / "test_data"

COMPANY = """
Components:
  Schemas:
    Department:
      type: string
      enum: [SALES, ENGINEERING]
    Email:
      type: string
    Employee:
      type: object
      properties:
        firstName:
          type: string
          required: true
          validate:
            - pattern: isLetter
        email:
          $ref: '#/Components/Schemas/Email'
        departmentName:
          $ref: '#/Components/Schemas/Department'
"""


@pytest.fixture
def generator():
    return PipelineGenerator(CodeGeneratorConfig())


def test_company_scenario(generator):
    graph = generator.compile_document(generator.loader.load(COMPANY, "company.yaml"))

    assert [named.name for named in graph] == ["Department", "Email", "Employee"]
    assert isinstance(graph.get("Department"), EnumType)
    assert isinstance(graph.get("Email"), AliasType)

    employee = graph.get("Employee")
    assert isinstance(employee, NamedObjectType)
    assert [(f.name, f.required, len(f.constraints)) for f in employee.fields] == [
        ("firstName", True, 1),
        ("email", False, 0),
        ("departmentName", False, 0),
    ]
    assert employee.fields[0].constraints[0].predicate == Predicate.IS_ALPHA
    assert employee.fields[1].type is graph.get("Email")
    assert employee.fields[2].type is graph.get("Department")


def test_company_scenario_units(generator):
    units = generator.generate_text(COMPANY, "company.yaml")

    assert [unit.name for unit in units] == ["Department", "Email", "Employee", "Validation", "Validate"]
    assert [unit.shared for unit in units] == [False, False, False, True, True]


def test_generation_is_deterministic():
    first = PipelineGenerator(CodeGeneratorConfig()).generate_file(TEST_DATA / "sample-schema.yaml")
    second = PipelineGenerator(CodeGeneratorConfig()).generate_file(TEST_DATA / "sample-schema.yaml")

    assert first == second


def test_forward_references_in_second_document(generator):
    units = generator.generate_file(TEST_DATA / "inventory.yaml")

    names = [unit.name for unit in units]
    assert names[:3] == ["Warehouse", "StockItem", "WarehouseStatus"]
    warehouse = units[0].body
    assert "    items: list[StockItem] | None = None\n" in warehouse
    assert "    status: WarehouseStatus | None = None\n" in warehouse
    assert "UNDER_REPAIR" in units[2].body


def test_failure_produces_no_units(generator):
    text = COMPANY + "    Broken:\n      type: object\n      properties:\n        code:\n          type: string\n          validate:\n            - pattern: minLength\n              value: -1\n"

    with pytest.raises(InvalidConstraintArgumentError) as exc_info:
        generator.generate_text(text, "company.yaml")

    assert exc_info.value.document == "company.yaml"
    assert str(exc_info.value).startswith("company.yaml:")


def test_unknown_reference_names_document(generator):
    with pytest.raises(UnknownReferenceError) as exc_info:
        generator.generate_file(TEST_DATA / "invalid" / "unknown-reference.yaml")

    assert exc_info.value.document == "unknown-reference.yaml"
    assert "Employee.manager" in str(exc_info.value)


def test_schemas_path_is_configurable():
    generator = PipelineGenerator(CodeGeneratorConfig(schemas_path=["Types"]))

    units = generator.generate_text("Types:\n  Email:\n    type: string\n")

    assert units[0].name == "Email"


def test_missing_section(generator):
    with pytest.raises(MalformedDocumentError, match="Missing 'Components'"):
        generator.generate_text("Other: {}\n", "empty.yaml")


def test_unsupported_language():
    with pytest.raises(ValueError, match="Unsupported language"):
        PipelineGenerator(CodeGeneratorConfig(language="cobol"))


def test_command_line_in_generation_comment():
    generator = PipelineGenerator(CodeGeneratorConfig(), command_line="yaml_schema_to_code schemas out")

    body = generator.generate_text("Components:\n  Schemas:\n    Email:\n      type: string\n", "a.yaml")[0].body

    assert body.startswith("# Generated by yaml_schema_to_code from a.yaml\n# Command: yaml_schema_to_code schemas out\n\n")


class TestGenerateFiles:
    def test_merges_documents_and_shares_runtime(self, generator):
        result = generator.generate_files([TEST_DATA / "sample-schema.yaml", TEST_DATA / "inventory.yaml"])

        names = [unit.name for unit in result.units]
        assert result.ok
        assert names.count("Validation") == 1
        assert names.count("Validate") == 1
        assert "Employee" in names and "Warehouse" in names

    def test_conflicting_unit_is_refused(self, generator, tmp_path):
        (tmp_path / "a.yaml").write_text("Components:\n  Schemas:\n    Email:\n      type: string\n", encoding="utf-8")
        (tmp_path / "b.yaml").write_text("Components:\n  Schemas:\n    Email:\n      type: integer\n", encoding="utf-8")

        with pytest.raises(DuplicateNameError) as exc_info:
            generator.generate_files([tmp_path / "a.yaml", tmp_path / "b.yaml"])

        assert exc_info.value.document == "b.yaml"
        assert "also generated from a.yaml" in str(exc_info.value)

    def test_identical_unit_is_accepted(self, tmp_path):
        generator = PipelineGenerator(CodeGeneratorConfig(add_generation_comment=False))
        for name in ("a.yaml", "b.yaml"):
            (tmp_path / name).write_text("Components:\n  Schemas:\n    Email:\n      type: string\n", encoding="utf-8")

        result = generator.generate_files([tmp_path / "a.yaml", tmp_path / "b.yaml"])

        assert [unit.name for unit in result.units] == ["Email", "Validation", "Validate"]

    def test_keep_going_records_failures(self, generator, tmp_path):
        shutil.copy(TEST_DATA / "invalid" / "unknown-reference.yaml", tmp_path)
        shutil.copy(TEST_DATA / "inventory.yaml", tmp_path)

        result = generator.generate_files([tmp_path / "unknown-reference.yaml", tmp_path / "inventory.yaml"], keep_going=True)

        assert not result.ok
        assert [name for name, _ in result.failures] == ["unknown-reference.yaml"]
        assert isinstance(result.failures[0][1], UnknownReferenceError)
        assert "Warehouse" in [unit.name for unit in result.units]

    def test_failure_aborts_by_default(self, generator):
        with pytest.raises(UnknownReferenceError):
            generator.generate_files([TEST_DATA / "invalid" / "unknown-reference.yaml", TEST_DATA / "inventory.yaml"])
