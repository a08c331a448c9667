"""
Exception hierarchy for schema parsing, dependency resolution and output.

Parser failures (``SchemaParseError``) are raised by the schema parser.
``UndefinedNameError`` is the one parse failure the resolution driver
recovers from; everything under ``ResolutionError`` is terminal for a run.
"""

from __future__ import annotations

from pathlib import Path


class CodeGenError(Exception):
    """Base class for every error reported by avsc_to_code."""


class SchemaParseError(CodeGenError):
    """Raised when schema text cannot be parsed."""


class UndefinedNameError(SchemaParseError):
    """Raised when a schema references a type name unknown to the registry.

    Attributes:
        name: The type name exactly as it was written in the schema
    """

    def __init__(self, name: str, source_path: str = ""):
        self.name = name
        self.source_path = source_path
        message = f"Undefined name: {name}"
        if source_path:
            message += f" at '{source_path}'"
        super().__init__(message)


class ResolutionError(CodeGenError):
    """Base class for fatal dependency resolution failures."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class CyclicDependencyError(ResolutionError):
    """Raised when a schema file is needed again while it is still being resolved."""

    def __init__(self, path: Path, chain: list[Path]):
        self.chain = list(chain)
        cycle = " -> ".join(p.name for p in [*self.chain, path])
        super().__init__(path, f"Cyclic dependency on {path}: {cycle}")


class UnresolvableReferenceError(ResolutionError):
    """Raised when an undefined name cannot be satisfied by any schema file."""

    def __init__(self, path: Path, name: str, reason: str = "no schema file defines it"):
        self.name = name
        super().__init__(path, f"Undefined name: {name} in {path} ({reason})")


class SchemaError(ResolutionError):
    """Raised when a schema file fails to parse for a reason other than an undefined name."""

    def __init__(self, path: Path, cause: SchemaParseError):
        self.cause = cause
        super().__init__(path, f"Invalid schema {path}: {cause}")


class SchemaIOError(ResolutionError):
    """Raised when a schema file cannot be read."""

    def __init__(self, path: Path, cause: OSError | UnicodeDecodeError):
        self.cause = cause
        super().__init__(path, f"Cannot read schema {path}: {cause}")


class NamespaceConflictError(CodeGenError):
    """Raised when two generated types would be written to the same artifact."""


class GeneratedCodeError(CodeGenError):
    """Raised when generated code fails validation before it is written."""
