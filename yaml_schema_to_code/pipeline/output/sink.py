"""
Output sink: maps output units to files of an output directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..backends.base import CodeBackend, OutputUnit
from ..config import CodeGeneratorConfig
from .atomic_writer import AtomicWriter
from .errors import OutputError

logger = logging.getLogger(__name__)


class OutputSink:
    """Writes output units into one directory through a backend's naming rules.

    Shared units are written at most once per sink, whatever the number of
    documents handed to it.
    """

    def __init__(
        self,
        output_dir: str | Path,
        backend: CodeBackend,
        config: CodeGeneratorConfig,
        writer: AtomicWriter | None = None,
    ):
        self.output_dir = Path(output_dir)
        self.backend = backend
        self.config = config
        self.writer = writer or AtomicWriter()
        self._shared_written: set[str] = set()
        self._support_written = False

    def path_for(self, unit: OutputUnit) -> Path:
        return self.output_dir / self.backend.file_name(unit.name)

    def write(self, units: list[OutputUnit]) -> list[Path]:
        """
        Write units to the output directory.

        Args:
            units: Units of one or more compiled documents

        Returns:
            Paths actually written, in unit order

        Raises:
            OutputError: If a unit cannot be written
        """
        self._write_support_files()

        written = []
        for unit in units:
            if unit.shared and unit.name in self._shared_written:
                continue

            path = self.path_for(unit)
            if path.exists() and not self.config.overwrite_existing_files:
                logger.warning(f"Skipping existing file {path}")
                continue

            try:
                self.writer.write(path, unit.body, self.config.language)
            except OSError as e:
                raise OutputError(f"Cannot write {path}: {e}") from e

            if unit.shared:
                self._shared_written.add(unit.name)
            logger.info(f"Wrote {path}")
            written.append(path)
        return written

    def _write_support_files(self) -> None:
        if self._support_written:
            return
        for name, content in self.backend.support_files().items():
            path = self.output_dir / name
            try:
                if self.writer.write_if_not_exists(path, content, self.config.language):
                    logger.debug(f"Wrote support file {path}")
            except OSError as e:
                raise OutputError(f"Cannot write {path}: {e}") from e
        self._support_written = True
