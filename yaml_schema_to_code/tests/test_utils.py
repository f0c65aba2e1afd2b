"""
Unit tests for identifier conversion helpers.
"""

import pytest

from yaml_schema_to_code.utils import to_enum_constant, to_field_name, to_module_name, to_type_name


@pytest.mark.parametrize(
    "text, expected",
    [
        ("employee", "Employee"),
        ("address_details", "AddressDetails"),
        ("AddressDetails", "AddressDetails"),
        ("home-address.v2", "HomeAddressV2"),
        ("first name", "FirstName"),
        ("", ""),
    ],
)
def test_to_type_name(text, expected):
    assert to_type_name(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("firstName", "firstName"),
        ("FirstName", "firstName"),
        ("HomeAddress", "homeAddress"),
        ("zip_code", "zipCode"),
        ("URLPath", "urlPath"),
        ("___", ""),
    ],
)
def test_to_field_name(text, expected):
    assert to_field_name(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Employee", "employee"),
        ("AddressDetails", "address_details"),
        ("HTTPServer", "http_server"),
        ("Validation", "validation"),
    ],
)
def test_to_module_name(text, expected):
    assert to_module_name(text) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("SALES", "SALES"),
        (" sales ", "SALES"),
        ("sales team", "SALES_TEAM"),
        ("b2b-partner", "B2B_PARTNER"),
        ("1st", "_1ST"),
        ("!!!", ""),
    ],
)
def test_to_enum_constant(value, expected):
    assert to_enum_constant(value) == expected
