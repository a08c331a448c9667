"""
Writes generated artifacts below an output root.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..config import CodeGeneratorConfig, LayoutPolicy, OutputMode
from .atomic_writer import AtomicWriter
from .generator import CodeGenerator, GeneratedType

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Materializes a batch of generated types on disk."""

    def __init__(self, output_root: str | Path, config: CodeGeneratorConfig, atomic_writer: AtomicWriter | None = None):
        self.output_root = Path(output_root)
        self.config = config
        self.validate_code = CodeGenerator.BACKENDS[config.language].validate_code
        self.atomic_writer = atomic_writer or AtomicWriter(self.validate_code)

    def target_path(self, artifact: GeneratedType) -> Path:
        return self.output_root / artifact.relative_path

    def write_all(self, artifacts: Sequence[GeneratedType]) -> list[Path]:
        """
        Write every artifact.

        In error mode, existing files are detected before anything is written.

        Args:
            artifacts: The generated types

        Returns:
            Paths that were written, package markers included

        Raises:
            FileExistsError: If an output file exists and mode is error
            GeneratedCodeError: If validation of an artifact fails
        """
        output = self.config.output
        targets = [(self.target_path(artifact), artifact) for artifact in artifacts]

        if output.mode == OutputMode.ERROR_IF_EXISTS:
            existing = [path for path, _ in targets if path.exists()]
            if existing:
                names = ", ".join(str(path) for path in existing)
                raise FileExistsError(f"Output file already exists: {names}. Use --force to overwrite.")

        # Validate the whole batch before touching storage
        if output.validate_before_write:
            for _, artifact in targets:
                self.validate_code(artifact.code)

        written = []
        for path, artifact in targets:
            self._write(path, artifact.code)
            logger.debug("Wrote %s", path)
            written.append(path)

        if self.config.language == "python":
            written.extend(self._write_package_markers(path for path, _ in targets))

        return written

    def _write(self, path: Path, content: str) -> None:
        if self.config.output.atomic_write:
            # Already validated as a batch
            self.atomic_writer.write(path, content, validate=False)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

    def _write_package_markers(self, paths) -> list[Path]:
        """Add empty ``__init__.py`` files so generated modules import as packages."""
        directories: set[Path] = set()
        for path in paths:
            directory = path.parent
            if self.config.layout == LayoutPolicy.FLAT:
                directories.add(directory)
                continue
            while directory != self.output_root and self.output_root in directory.parents:
                directories.add(directory)
                directory = directory.parent
            directories.add(self.output_root)

        markers = []
        for directory in sorted(directories):
            marker = directory / "__init__.py"
            if not marker.exists():
                marker.write_text("", encoding="utf-8")
                markers.append(marker)
        return markers
