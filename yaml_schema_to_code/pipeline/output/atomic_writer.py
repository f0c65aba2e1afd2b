"""
Atomic file writer for generated units.

A unit is checked in memory, written to a temporary file beside its target,
and then renamed over the target, so an interrupted run never leaves a
partially written file behind.
"""

from __future__ import annotations

import ast
import re
import tempfile
from pathlib import Path

from .errors import OutputError

_KOTLIN_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
_KOTLIN_COMMENT = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)


def check_python(content: str) -> None:
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise OutputError(f"Generated Python code is not valid: {e}") from e


def check_kotlin(content: str) -> None:
    """Structural check of a Kotlin unit: a package line and balanced brackets."""
    if "package " not in content:
        raise OutputError("Generated Kotlin code is missing package declaration")

    # Strings are blanked first so a "//" inside a pattern is not read as a comment
    code = _KOTLIN_COMMENT.sub("", _KOTLIN_STRING_LITERAL.sub('""', content))
    for opening, closing in (("{", "}"), ("(", ")")):
        opened, closed = code.count(opening), code.count(closing)
        if opened != closed:
            raise OutputError(f"Generated Kotlin code has unbalanced '{opening}{closing}': {opened} open, {closed} close")


CHECKS = {
    "python": check_python,
    "kotlin": check_kotlin,
}


class AtomicWriter:
    """Writes files through a temporary sibling and a rename."""

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """Check content for its language, then replace path with it.

        Raises:
            OutputError: If the content fails the language check
            OSError: If file operations fail
        """
        check = CHECKS.get(language) if validate else None
        if check is not None:
            check(content)

        path.parent.mkdir(parents=True, exist_ok=True)
        # The rename stays atomic only within one filesystem
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        temp_path = Path(temp_name)
        try:
            with open(fd, "w", encoding="utf-8") as stream:
                stream.write(content)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str, language: str, validate: bool = True) -> bool:
        """Write path unless it exists; return whether it was written."""
        if path.exists():
            return False
        self.write(path, content, language, validate)
        return True
