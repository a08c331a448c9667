"""
Configuration for schema resolution, code generation and output.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from .resolver.catalogue import DEFAULT_SCHEMA_EXTENSION

LANGUAGE_EXTENSIONS = {"cs": "cs", "python": "py"}


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when an output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


class LayoutPolicy(str, Enum):
    """Where generated files go below the output root."""

    NAMESPACE_DIRECTORIES = "namespace"  # One directory level per namespace component
    FLAT = "flat"  # Everything directly in the output root


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Target language: "cs" or "python"
    language: str = "cs"

    # Avro namespace -> target namespace
    namespace_mapping: dict[str, str] = field(default_factory=dict)

    # Write every file into the output root instead of namespace directories
    skip_directories: bool = False

    # Extension of schema files to discover
    schema_extension: str = DEFAULT_SCHEMA_EXTENSION

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Use from __future__ import annotations (Python)
    use_future_annotations: bool = True

    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def layout(self) -> LayoutPolicy:
        return LayoutPolicy.FLAT if self.skip_directories else LayoutPolicy.NAMESPACE_DIRECTORIES

    @property
    def file_extension(self) -> str:
        return LANGUAGE_EXTENSIONS[self.language]

    def map_namespace(self, namespace: str | None) -> str | None:
        """Apply the longest matching namespace mapping to an Avro namespace."""
        if not namespace:
            return namespace
        best = None
        for source in self.namespace_mapping:
            if namespace == source or namespace.startswith(source + "."):
                if best is None or len(source) > len(best):
                    best = source
        if best is None:
            return namespace
        return self.namespace_mapping[best] + namespace[len(best) :]

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        known = {f.name for f in fields(CodeGeneratorConfig)}
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif k in known:
                setattr(config, k, v)
        if config.language not in LANGUAGE_EXTENSIONS:
            raise ValueError(f"Language not supported: {config.language}")
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "language": self.language,
            "namespace_mapping": self.namespace_mapping,
            "skip_directories": self.skip_directories,
            "schema_extension": self.schema_extension,
            "add_generation_comment": self.add_generation_comment,
            "use_future_annotations": self.use_future_annotations,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }


def parse_namespace_mapping(value: str) -> tuple[str, str]:
    """Parse an ``avro.namespace:target.namespace`` mapping.

    Raises:
        ValueError: If the value is not exactly two non-empty parts
    """
    parts = [part for part in value.split(":") if part]
    if len(parts) != 2:
        raise ValueError('Malformed namespace mapping. Required format is "avro.namespace:csharp.namespace"')
    return parts[0], parts[1]
