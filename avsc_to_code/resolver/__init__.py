"""
Resolver module.

Discovers schema files and resolves them in dependency order.
"""

from __future__ import annotations

from .catalogue import DEFAULT_SCHEMA_EXTENSION, FileCatalogue, ResolutionState, SchemaFile
from .context import ResolutionContext
from .driver import ResolutionDriver, WorkItem

__all__ = [
    "DEFAULT_SCHEMA_EXTENSION",
    "FileCatalogue",
    "ResolutionState",
    "SchemaFile",
    "ResolutionContext",
    "ResolutionDriver",
    "WorkItem",
]
