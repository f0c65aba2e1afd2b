"""
Schema AST module.

Contains the document node definitions and the YAML loader.
"""

from __future__ import annotations

from .loader import DocumentLoader
from .nodes import (
    MappingNode,
    ScalarNode,
    ScalarValue,
    SchemaDocument,
    SchemaNode,
    SequenceNode,
)

__all__ = [
    "SchemaNode",
    "MappingNode",
    "SequenceNode",
    "ScalarNode",
    "ScalarValue",
    "SchemaDocument",
    "DocumentLoader",
]
