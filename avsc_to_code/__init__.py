"""Avro Schema to Code Generator

A Python package for generating C# and Python data classes from a tree
of Avro schema files that reference each other's types. Files are
resolved in dependency order, discovered lazily from undefined-name
parse failures.
"""

__version__ = "1.0.0"

from .config import CodeGeneratorConfig, LayoutPolicy, OutputConfig, OutputMode
from .errors import (
    CodeGenError,
    CyclicDependencyError,
    GeneratedCodeError,
    NamespaceConflictError,
    ResolutionError,
    SchemaError,
    SchemaIOError,
    SchemaParseError,
    UndefinedNameError,
    UnresolvableReferenceError,
)
from .pipeline import SchemaPipeline
from .resolver import FileCatalogue, ResolutionContext, ResolutionDriver
from .schema import SchemaNames, SchemaParser

__all__ = [
    "SchemaPipeline",
    "CodeGeneratorConfig",
    "LayoutPolicy",
    "OutputConfig",
    "OutputMode",
    "FileCatalogue",
    "ResolutionContext",
    "ResolutionDriver",
    "SchemaNames",
    "SchemaParser",
    "CodeGenError",
    "SchemaParseError",
    "UndefinedNameError",
    "ResolutionError",
    "CyclicDependencyError",
    "UnresolvableReferenceError",
    "SchemaError",
    "SchemaIOError",
    "NamespaceConflictError",
    "GeneratedCodeError",
]
