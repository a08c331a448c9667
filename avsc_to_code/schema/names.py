"""
Registry of named types defined across a batch of schema files.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from ..errors import SchemaParseError
from .nodes import NamedSchema


class SchemaNames:
    """Accumulates every named type committed so far, keyed by fullname.

    The parser only ever sees a read-only view; the resolution driver is
    the single writer and commits a file's names after it parsed cleanly.
    """

    def __init__(self):
        self._types: dict[str, NamedSchema] = {}
        self._sources: dict[str, Path | None] = {}

    def __contains__(self, fullname: object) -> bool:
        return fullname in self._types

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def get(self, fullname: str) -> NamedSchema | None:
        return self._types.get(fullname)

    def source_of(self, fullname: str) -> Path | None:
        """Return the schema file that defined ``fullname``."""
        return self._sources.get(fullname)

    def types(self) -> list[NamedSchema]:
        """Return all named types in commit order."""
        return list(self._types.values())

    def view(self) -> Mapping[str, NamedSchema]:
        """Return a read-only view handed to the parser."""
        return MappingProxyType(self._types)

    def commit(self, defined: Mapping[str, NamedSchema], source: Path | None = None) -> None:
        """Register the names produced by one successful parse.

        Raises:
            SchemaParseError: If one of the names is already registered
        """
        duplicates = [name for name in defined if name in self._types]
        if duplicates:
            raise SchemaParseError(f"Duplicate name: {', '.join(duplicates)}")
        for fullname, schema in defined.items():
            self._types[fullname] = schema
            self._sources[fullname] = source
