"""YAML Schema to Code Generator

A Python package for generating typed data classes from YAML schema
documents. Supports Python and Kotlin code generation, with field
validation directives and a generated validation runtime.
"""

__version__ = "1.0.0"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    GenerationResult,
    OutputError,
    OutputSink,
    OutputUnit,
    PipelineGenerator,
    SchemaCompileError,
)

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "CodeGeneratorConfig",
    "OutputUnit",
    "SchemaCompileError",
    "OutputError",
    "OutputSink",
    "AtomicWriter",
]
