"""
Batch code generation over a fully resolved set of named types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import CodeGeneratorConfig
from ..errors import NamespaceConflictError
from ..schema.names import SchemaNames
from ..schema.nodes import Protocol
from .base import CodeBackend
from .csharp_backend import CSharpBackend
from .python_backend import PythonBackend

logger = logging.getLogger(__name__)


@dataclass
class GeneratedType:
    """One generated source file, not yet written."""

    fullname: str
    name: str
    namespace: str | None  # Generated (mapped) namespace
    relative_path: Path
    code: str
    source: Path | None = None


class CodeGenerator:
    """Generates code for every named type of a registry in one batch."""

    BACKENDS: dict[str, type[CodeBackend]] = {
        "cs": CSharpBackend,
        "python": PythonBackend,
    }

    def __init__(self, config: CodeGeneratorConfig, generation_comment: list[str] | None = None):
        if config.language not in self.BACKENDS:
            raise ValueError(f"Language not supported: {config.language}")
        self.config = config
        self.backend = self.BACKENDS[config.language](config, generation_comment or [])

    def generate(self, names: SchemaNames) -> list[GeneratedType]:
        """
        Generate one artifact per named type.

        Args:
            names: The complete registry of resolved types

        Returns:
            Generated artifacts, in registry order

        Raises:
            NamespaceConflictError: If two types would produce the same file
        """
        artifacts = []
        for schema in names.types():
            namespace = self.backend.target_namespace(schema.namespace)
            artifacts.append(
                GeneratedType(
                    fullname=schema.fullname,
                    name=schema.name,
                    namespace=namespace,
                    relative_path=self.backend.relative_path(schema.name, namespace),
                    code=self.backend.render_type(schema),
                    source=names.source_of(schema.fullname),
                )
            )
        self._check_conflicts(artifacts)
        logger.debug("Generated %d types", len(artifacts))
        return artifacts

    def generate_protocol(self, protocol: Protocol, source: Path | None = None) -> list[GeneratedType]:
        """Generate the protocol's types plus its message interface."""
        names = SchemaNames()
        names.commit(protocol.types, source)
        artifacts = self.generate(names)

        namespace = self.backend.target_namespace(protocol.namespace)
        file_name = f"I{protocol.name}" if self.config.language == "cs" else protocol.name
        artifacts.append(
            GeneratedType(
                fullname=f"{protocol.namespace}.{protocol.name}" if protocol.namespace else protocol.name,
                name=protocol.name,
                namespace=namespace,
                relative_path=self.backend.relative_path(file_name, namespace),
                code=self.backend.render_protocol(protocol),
                source=source,
            )
        )
        self._check_conflicts(artifacts)
        return artifacts

    def _check_conflicts(self, artifacts: list[GeneratedType]) -> None:
        """Reject artifacts whose paths collide, ignoring case."""
        seen: dict[str, GeneratedType] = {}
        for artifact in artifacts:
            key = artifact.relative_path.as_posix().lower()
            other = seen.get(key)
            if other is not None:
                raise NamespaceConflictError(f"{other.fullname} and {artifact.fullname} both generate {artifact.relative_path}")
            seen[key] = artifact
