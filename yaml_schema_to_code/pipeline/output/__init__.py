"""
Output module.

Writes generated units to disk atomically.
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .errors import OutputError
from .sink import OutputSink

__all__ = [
    "AtomicWriter",
    "OutputError",
    "OutputSink",
]
