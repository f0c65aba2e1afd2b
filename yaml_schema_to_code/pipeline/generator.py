"""
Pipeline generator: runs the compilation phases on schema documents.

1. Load: parse YAML into a SchemaDocument
2. Collect anchors: build the symbol table of declarations
3. Resolve types: build the TypeGraph
4. Compile constraints: attach validation directives to fields
5. Emit: render the graph as output units
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .analyzer import AnchorCollector, ConstraintCompiler, TypeGraph, TypeResolver, find_declarations
from .backends import BACKENDS, CodeBackend, OutputUnit
from .config import CodeGeneratorConfig
from .errors import DuplicateNameError, SchemaCompileError
from .schema_ast import DocumentLoader, SchemaDocument

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Units of a batch of documents, and the documents that failed."""

    units: list[OutputUnit] = field(default_factory=list)
    # (document name, error) for every document that did not compile
    failures: list[tuple[str, SchemaCompileError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class PipelineGenerator:
    """
    Schema compiler.

    Example:
        generator = PipelineGenerator(CodeGeneratorConfig(language="kotlin"))
        units = generator.generate_text(yaml_text, "company.yaml")
    """

    def __init__(self, config: CodeGeneratorConfig | None = None, command_line: str = ""):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
            command_line: Command echoed in the generation comment of each unit
        """
        self.config = config or CodeGeneratorConfig()
        self.config.validate()
        self.command_line = command_line
        self.loader = DocumentLoader()
        self.backend: CodeBackend = BACKENDS[self.config.language](self.config)

    def compile_document(self, document: SchemaDocument) -> TypeGraph:
        """
        Run the analysis phases on a loaded document.

        Raises:
            SchemaCompileError: On the first structural error, with the document name set
        """
        try:
            declarations = find_declarations(document.root, self.config.schemas_path)
            table = AnchorCollector().collect(declarations)
            resolver = TypeResolver(table)
            graph = resolver.resolve(declarations, document.name)
            ConstraintCompiler(strict=self.config.strict_constraints, check_regex=self.backend.PYTHON_REGEX).attach(resolver.pending_constraints)
        except SchemaCompileError as e:
            if e.document is None:
                e.document = document.name
            raise
        return graph

    def generate(self, document: SchemaDocument) -> list[OutputUnit]:
        """Compile a loaded document into its output units."""
        graph = self.compile_document(document)
        try:
            units = self.backend.generate(graph, self._generation_comment(document.name))
        except SchemaCompileError as e:
            if e.document is None:
                e.document = document.name
            raise
        logger.debug(f"{document.name}: {len(units)} units")
        return units

    def generate_text(self, text: str, name: str = "<string>") -> list[OutputUnit]:
        """Compile YAML source text into output units."""
        return self.generate(self.loader.load(text, name))

    def generate_file(self, path: str | Path) -> list[OutputUnit]:
        """Compile a schema file into output units."""
        return self.generate(self.loader.load_file(path))

    def generate_files(self, paths: list[str | Path], keep_going: bool = False) -> GenerationResult:
        """
        Compile several schema files whose units share one output directory.

        Every document is compiled before any unit is returned. Documents
        producing a unit already produced by another document with a
        different body are refused.

        Args:
            paths: Schema files, compiled in the given order
            keep_going: Record failed documents and continue instead of raising

        Returns:
            GenerationResult with the merged units

        Raises:
            SchemaCompileError: On the first failure, unless keep_going is set
        """
        result = GenerationResult()
        owners: dict[str, tuple[str, OutputUnit]] = {}
        files: dict[str, str] = {}

        for path in paths:
            name = Path(path).name
            try:
                units = self.generate_file(path)
                self._check_conflicts(name, units, owners, files)
            except SchemaCompileError as e:
                if not keep_going:
                    raise
                logger.error(f"Skipping {name}: {e}")
                result.failures.append((name, e))
                continue

            for unit in units:
                if unit.name not in owners:
                    owners[unit.name] = (name, unit)
                    files[self.backend.file_name(unit.name)] = unit.name
                    result.units.append(unit)

        return result

    def _check_conflicts(
        self,
        document: str,
        units: list[OutputUnit],
        owners: dict[str, tuple[str, OutputUnit]],
        files: dict[str, str],
    ) -> None:
        for unit in units:
            if unit.name in owners:
                owner, existing = owners[unit.name]
                if existing.body != unit.body:
                    raise DuplicateNameError(f"Type '{unit.name}' is also generated from {owner}", declaration=unit.name, document=document)
                continue
            file_name = self.backend.file_name(unit.name)
            if file_name in files:
                raise DuplicateNameError(
                    f"Types '{files[file_name]}' and '{unit.name}' would both be written to {file_name}",
                    declaration=unit.name,
                    document=document,
                )

    def _generation_comment(self, document: str) -> str:
        comment = f"Generated by yaml_schema_to_code from {document}"
        if self.command_line:
            comment += f"\nCommand: {self.command_line}"
        return comment
