"""
Dependency resolution driver.

Feeds schema files to the parser so that every type name is defined
before it is used. No dependency graph is computed up front: when a
parse fails on an undefined name, the file expected to define that name
is resolved first and the original file is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import (
    CyclicDependencyError,
    ResolutionError,
    SchemaError,
    SchemaIOError,
    SchemaParseError,
    UndefinedNameError,
    UnresolvableReferenceError,
)
from ..schema.names import SchemaNames
from ..schema.nodes import ParsedSchema
from ..schema.parser import SchemaOracle, SchemaParser
from .catalogue import FileCatalogue, ResolutionState, SchemaFile
from .context import ResolutionContext

logger = logging.getLogger(__name__)


@dataclass
class WorkItem:
    """A file on the work stack and the missing names it already retried for."""

    schema_file: SchemaFile
    retried_names: set[str] = field(default_factory=set)


class ResolutionDriver:
    """Resolves a catalogue of schema files into one registry of named types."""

    def __init__(self, oracle: SchemaOracle | None = None, context: ResolutionContext | None = None):
        """
        Initialize the driver.

        Args:
            oracle: Parser used for every attempt (defaults to SchemaParser)
            context: Bookkeeping to resolve into (defaults to a fresh one)
        """
        self.oracle = oracle or SchemaParser()
        self.context = context or ResolutionContext()

    @property
    def names(self) -> SchemaNames:
        return self.context.names

    def resolve_all(self, catalogue: FileCatalogue) -> SchemaNames:
        """
        Resolve every file of the catalogue.

        Args:
            catalogue: The schema files to resolve, in iteration order

        Returns:
            The registry holding every name defined by the catalogue

        Raises:
            ResolutionError: On the first file that cannot be resolved
        """
        for schema_file in catalogue:
            self.resolve(schema_file, catalogue)
        return self.context.names

    def resolve(self, schema_file: SchemaFile, catalogue: FileCatalogue) -> None:
        """Resolve one file, pulling in the files it depends on first."""
        context = self.context
        if context.is_resolved(schema_file.path):
            return
        if context.is_in_flight(schema_file.path):
            raise CyclicDependencyError(schema_file.path, context.in_flight)

        logger.info("Generating code for %s", schema_file.path)
        stack = [self._start(schema_file)]
        try:
            while stack:
                item = stack[-1]
                try:
                    parsed = self._parse(item.schema_file)
                except UndefinedNameError as e:
                    stack.append(self._start(self._dependency_for(item, e.name, catalogue)))
                    continue
                self._commit(item.schema_file, parsed)
                stack.pop()
        except ResolutionError:
            for item in stack:
                item.schema_file.state = ResolutionState.FAILED
                context.leave(item.schema_file.path)
            raise

    def _start(self, schema_file: SchemaFile) -> WorkItem:
        self.context.enter(schema_file.path)
        schema_file.state = ResolutionState.RESOLVING
        return WorkItem(schema_file)

    def _parse(self, schema_file: SchemaFile) -> ParsedSchema:
        path = schema_file.path
        try:
            text = schema_file.text
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaIOError(path, e) from e

        self.context.parse_attempts[path] += 1
        try:
            return self.oracle.parse(text, self.context.names.view(), str(path))
        except UndefinedNameError:
            raise
        except SchemaParseError as e:
            raise SchemaError(path, e) from e

    def _dependency_for(self, item: WorkItem, name: str, catalogue: FileCatalogue) -> SchemaFile:
        """Pick the file to resolve before retrying ``item``."""
        context = self.context
        path = item.schema_file.path

        # One retry per missing name
        if name in item.retried_names:
            raise UnresolvableReferenceError(path, name, "still undefined after resolving its schema file")
        item.retried_names.add(name)

        candidate = catalogue.candidate_for(name, item.schema_file)
        if candidate is None:
            raise UnresolvableReferenceError(path, name)
        if context.is_resolved(candidate.path):
            raise UnresolvableReferenceError(path, name, f"{candidate.path.name} does not define it")
        if context.is_in_flight(candidate.path):
            raise CyclicDependencyError(candidate.path, context.in_flight)

        logger.info("Generating missing schema for %s", candidate.path)
        logger.debug("%s needs %s from %s", path.name, name, candidate.path.name)
        return candidate

    def _commit(self, schema_file: SchemaFile, parsed: ParsedSchema) -> None:
        context = self.context
        path = schema_file.path
        try:
            context.names.commit(parsed.defined, path)
        except SchemaParseError as e:
            raise SchemaError(path, e) from e

        context.parse_successes[path] += 1
        context.leave(path)
        context.mark_resolved(path)
        schema_file.state = ResolutionState.RESOLVED
        logger.debug("Resolved %s (%d names)", path.name, len(parsed.defined))
