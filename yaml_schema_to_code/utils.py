"""
Utility functions for the YAML schema to code generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z]+(?![a-z])|[A-Z][a-z]*|[0-9]+")

# Runs of characters that cannot appear in an identifier
_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z]+")


def _normalize_separators(text: str) -> str:
    """Normalize word boundaries (underscores, hyphens, periods) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(_normalize_separators(text))


def to_type_name(text: str) -> str:
    """Convert a declared identifier to a type name (PascalCase).

    Examples:
        "employee" -> "Employee"
        "address_details" -> "AddressDetails"
        "AddressDetails" -> "AddressDetails"
        "home-address.v2" -> "HomeAddressV2"

    Args:
        text: The declared identifier

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    words = _split_into_words(text)
    return "".join(word[0].upper() + word[1:] for word in words if word)


def to_field_name(text: str) -> str:
    """Convert a declared identifier to a field name (camelCase).

    Examples:
        "firstName" -> "firstName"
        "FirstName" -> "firstName"
        "HomeAddress" -> "homeAddress"
        "zip_code" -> "zipCode"
        "URLPath" -> "urlPath"
    """
    words = _split_into_words(text)
    if not words:
        return ""
    return words[0].lower() + "".join(word[0].upper() + word[1:] for word in words[1:])


def to_module_name(text: str) -> str:
    """Convert a type name to a snake_case module name.

    Examples:
        "Employee" -> "employee"
        "AddressDetails" -> "address_details"
        "HTTPServer" -> "http_server"
    """
    return "_".join(word.lower() for word in _split_into_words(text))


def to_enum_constant(value: str) -> str:
    """Canonicalize an enumeration value to an upper-case identifier.

    Returns an empty string when nothing identifier-like is left.

    Examples:
        " sales " -> "SALES"
        "sales team" -> "SALES_TEAM"
        "b2b-partner" -> "B2B_PARTNER"
        "1st" -> "_1ST"
    """
    constant = _NON_IDENTIFIER.sub("_", value.strip()).strip("_").upper()
    if constant and constant[0].isdigit():
        constant = "_" + constant
    return constant
