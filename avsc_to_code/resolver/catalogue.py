"""
Catalogue of candidate schema files for one resolution run.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path

DEFAULT_SCHEMA_EXTENSION = ".avsc"


class ResolutionState(str, Enum):
    """Where a schema file stands in the resolution run."""

    UNVISITED = "unvisited"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(eq=False)
class SchemaFile:
    """A schema file, identified by its absolute path.

    The text is read on first access and cached.
    """

    path: Path
    state: ResolutionState = ResolutionState.UNVISITED

    @cached_property
    def text(self) -> str:
        return self.path.read_text(encoding="utf-8")

    @property
    def directory(self) -> Path:
        return self.path.parent

    def __repr__(self) -> str:
        return f"SchemaFile({self.path.name!r}, {self.state.value})"


def _identity(path: str | Path) -> Path:
    return Path(path).resolve()


class FileCatalogue:
    """The set of schema files discovered for one run, in iteration order."""

    def __init__(self, paths: Iterable[str | Path] = (), extension: str = DEFAULT_SCHEMA_EXTENSION):
        self.extension = extension
        self._files: dict[Path, SchemaFile] = {}
        for path in paths:
            self.add(path)

    @classmethod
    def discover(cls, root: str | Path, extension: str = DEFAULT_SCHEMA_EXTENSION) -> FileCatalogue:
        """Recursively collect every ``*<extension>`` file under ``root``, sorted by path."""
        paths = sorted(p for p in Path(root).rglob(f"*{extension}") if p.is_file())
        return cls(paths, extension)

    @classmethod
    def from_path(cls, path: str | Path, extension: str = DEFAULT_SCHEMA_EXTENSION) -> FileCatalogue:
        """Build a catalogue from a directory tree or a single schema file."""
        path = Path(path)
        if path.is_dir():
            return cls.discover(path, extension)
        if not path.is_file():
            raise FileNotFoundError(f"Schema path does not exist: {path}")
        return cls([path], extension)

    def __iter__(self) -> Iterator[SchemaFile]:
        # Snapshot: candidates synthesized during a run must not disturb iteration
        return iter(list(self._files.values()))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, SchemaFile):
            path = path.path
        if not isinstance(path, (str, Path)):
            return False
        return _identity(path) in self._files

    def get(self, path: str | Path) -> SchemaFile | None:
        return self._files.get(_identity(path))

    def add(self, path: str | Path) -> SchemaFile:
        """Return the entry for ``path``, creating it if needed."""
        identity = _identity(path)
        schema_file = self._files.get(identity)
        if schema_file is None:
            schema_file = SchemaFile(identity)
            self._files[identity] = schema_file
        return schema_file

    def candidate_for(self, name: str, referrer: SchemaFile) -> SchemaFile | None:
        """
        Find the schema file expected to define ``name``.

        Looks beside ``referrer`` for ``<name><ext>``, then for the simple
        (last dotted component) name.

        Args:
            name: The undefined type name, as written in the schema
            referrer: The file that referenced it

        Returns:
            The catalogue entry for the candidate, or None if no such file exists
        """
        # Lookup is flat: a name with a path separator never names a file
        if "/" in name or "\\" in name:
            return None

        stems = [name]
        simple_name = name.rsplit(".", 1)[-1]
        if simple_name != name:
            stems.append(simple_name)

        for stem in stems:
            candidate = referrer.directory / f"{stem}{self.extension}"
            known = self.get(candidate)
            if known is not None:
                return known
            if candidate.is_file():
                return self.add(candidate)
        return None
