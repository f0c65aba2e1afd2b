"""
Errors raised while writing generated units.
"""

from __future__ import annotations


class OutputError(Exception):
    """A generated unit could not be written or failed its content check."""
