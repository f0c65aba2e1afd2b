"""
Configuration for the code generator pipeline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

SUPPORTED_LANGUAGES = ("python", "kotlin")


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Package (Python) or package declaration (Kotlin) of the generated units
    package_name: str = "generated"

    # Target language: "python" or "kotlin"
    language: str = "python"

    # Keys leading from the document root to the named declarations
    schemas_path: list[str] = field(default_factory=lambda: ["Components", "Schemas"])

    # Extension of schema files picked up when walking a directory
    schema_file_extension: str = "yaml"

    # File names skipped when walking a directory
    exclude_files: list[str] = field(default_factory=list)

    # Emit constraint directives and the validation runtime units
    generate_validations: bool = True

    # Replace output files that already exist
    overwrite_existing_files: bool = True

    # Add generation comment at top of each unit
    add_generation_comment: bool = True

    # Fail on unknown validation patterns instead of dropping them
    strict_constraints: bool = False

    # Log debug output
    verbose: bool = False

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary. Unknown keys are ignored."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        if isinstance(config.schemas_path, str):
            config.schemas_path = [part for part in config.schemas_path.split(".") if part]
        return config

    @staticmethod
    def from_file(path: str | Path) -> CodeGeneratorConfig:
        """Load a config from a YAML or JSON file."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        return CodeGeneratorConfig.from_dict(data)

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def validate(self) -> None:
        """Check option values that cannot be typed statically."""
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language '{self.language}', expected one of {', '.join(SUPPORTED_LANGUAGES)}")
        if not self.schemas_path:
            raise ValueError("schemas_path must name at least one key")
