"""
YAML document loader.

Phase 1 of the pipeline: turn raw text into a tree of SchemaNode objects
without interpreting any schema keyword. Uses PyYAML's composer so that
duplicate keys and source lines are preserved.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from yaml.constructor import SafeConstructor

from ..errors import MalformedDocumentError
from .nodes import MappingNode, ScalarNode, SchemaDocument, SchemaNode, SequenceNode

logger = logging.getLogger(__name__)

_MERGE_TAG = "tag:yaml.org,2002:merge"


class DocumentLoader:
    """Loads YAML text into a SchemaDocument."""

    def __init__(self) -> None:
        self._constructor = SafeConstructor()

    def load_file(self, path: str | Path) -> SchemaDocument:
        """Load a schema document from a file."""
        path = Path(path)
        logger.debug(f"Loading schema document: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedDocumentError(f"Cannot read schema document: {exc}", document=path.name) from exc
        return self.load(text, path.name)

    def load(self, text: str, name: str = "<string>") -> SchemaDocument:
        """
        Parse YAML text into a SchemaDocument.

        Args:
            text: The YAML source
            name: Document name used in error messages

        Returns:
            SchemaDocument whose root is the converted node tree

        Raises:
            MalformedDocumentError: If the text is not valid YAML or is empty
        """
        try:
            root = yaml.compose(text, Loader=yaml.SafeLoader)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            problem = getattr(exc, "problem", None) or str(exc)
            raise MalformedDocumentError(f"Invalid YAML: {problem}", document=name, line=line) from exc

        if root is None:
            raise MalformedDocumentError("Document is empty", document=name)

        return SchemaDocument(name=name, root=self._convert(root, set(), name))

    def _convert(self, node: yaml.Node, active: set[int], document: str) -> SchemaNode:
        """Convert a PyYAML node (and its children) to a SchemaNode."""
        line = node.start_mark.line + 1

        if isinstance(node, yaml.ScalarNode):
            return ScalarNode(line=line, value=self._scalar_value(node, document))

        # Aliases share node objects; a node reachable from itself never ends
        if id(node) in active:
            raise MalformedDocumentError("Recursive YAML alias", document=document, line=line)
        active.add(id(node))
        try:
            if isinstance(node, yaml.SequenceNode):
                return SequenceNode(line=line, items=tuple(self._convert(item, active, document) for item in node.value))
            if isinstance(node, yaml.MappingNode):
                return MappingNode(line=line, entries=self._convert_entries(node, active, document))
        finally:
            active.discard(id(node))

        raise MalformedDocumentError(f"Unsupported YAML node {type(node).__name__}", document=document, line=line)

    def _convert_entries(self, node: yaml.MappingNode, active: set[int], document: str) -> tuple[tuple[str, SchemaNode], ...]:
        """Convert mapping entries, expanding YAML merge keys (<<)."""
        merged: list[tuple[str, SchemaNode]] = []
        entries: list[tuple[str, SchemaNode]] = []

        for key_node, value_node in node.value:
            if key_node.tag == _MERGE_TAG:
                merged.extend(self._merge_sources(value_node, active, document))
                continue
            if not isinstance(key_node, yaml.ScalarNode):
                raise MalformedDocumentError("Mapping keys must be scalars", document=document, line=key_node.start_mark.line + 1)
            # Keys keep their source spelling: `on:` or `yes:` are names, not booleans
            entries.append((str(key_node.value), self._convert(value_node, active, document)))

        if not merged:
            return tuple(entries)

        explicit = {key for key, _ in entries}
        inherited = []
        seen: set[str] = set()
        for key, value in merged:
            if key in explicit or key in seen:
                continue
            seen.add(key)
            inherited.append((key, value))
        return tuple(inherited + entries)

    def _merge_sources(self, value_node: yaml.Node, active: set[int], document: str) -> list[tuple[str, SchemaNode]]:
        sources = value_node.value if isinstance(value_node, yaml.SequenceNode) else [value_node]
        result: list[tuple[str, SchemaNode]] = []
        for source in sources:
            converted = self._convert(source, active, document)
            if not isinstance(converted, MappingNode):
                raise MalformedDocumentError("Merge keys (<<) must refer to mappings", document=document, line=converted.line)
            result.extend(converted.entries)
        return result

    def _scalar_value(self, node: yaml.ScalarNode, document: str):
        try:
            value = self._constructor.construct_object(node, deep=True)
        except yaml.YAMLError as exc:
            raise MalformedDocumentError(f"Invalid scalar {node.value!r}: {exc}", document=document, line=node.start_mark.line + 1) from exc
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        # Timestamps, binary and other rich scalars keep their source text
        return str(node.value)
