"""
Code generation backends.

Contains language-specific code generators.
"""

from __future__ import annotations

from .base import MARKER_UNIT, VALIDATION_UNIT, CodeBackend, OutputUnit
from .kotlin_backend import KotlinBackend
from .python_backend import PythonBackend

BACKENDS = {
    "python": PythonBackend,
    "kotlin": KotlinBackend,
}

__all__ = [
    "BACKENDS",
    "CodeBackend",
    "OutputUnit",
    "PythonBackend",
    "KotlinBackend",
    "VALIDATION_UNIT",
    "MARKER_UNIT",
]
