"""
Pipeline - YAML schema to code compiler.

This module provides a multi-phase architecture for generating typed data
classes and validation runtimes from YAML schema documents:

1. Phase 1 (Loader): Parse YAML into a Schema AST
2. Phase 2 (Anchor Collector): Register every named declaration
3. Phase 3 (Type Resolver): Resolve references and build the Type Graph
4. Phase 4 (Constraint Compiler): Attach validation directives to fields
5. Phase 5 (Backend): Render output units from templates
6. Phase 6 (Output): Write units to disk atomically
"""

from __future__ import annotations

from .backends import OutputUnit
from .config import CodeGeneratorConfig
from .errors import SchemaCompileError
from .generator import GenerationResult, PipelineGenerator
from .output import AtomicWriter, OutputError, OutputSink

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
