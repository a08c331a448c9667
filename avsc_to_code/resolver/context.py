"""
Mutable bookkeeping for one resolution run.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from ..schema.names import SchemaNames


@dataclass
class ResolutionContext:
    """State threaded through the resolution driver.

    Attributes:
        names: Registry of every name committed so far
        resolved: Paths of files that parsed successfully; never reprocessed
        in_flight: Paths on the active work chain, outermost first
        parse_attempts: Parser invocations per path, failed ones included
        parse_successes: Successful parses per path
        max_depth: Deepest work chain seen during the run
    """

    names: SchemaNames = field(default_factory=SchemaNames)
    resolved: set[Path] = field(default_factory=set)
    in_flight: list[Path] = field(default_factory=list)
    parse_attempts: Counter[Path] = field(default_factory=Counter)
    parse_successes: Counter[Path] = field(default_factory=Counter)
    max_depth: int = 0

    def is_resolved(self, path: Path) -> bool:
        return path in self.resolved

    def is_in_flight(self, path: Path) -> bool:
        return path in self.in_flight

    def enter(self, path: Path) -> None:
        self.in_flight.append(path)
        self.max_depth = max(self.max_depth, len(self.in_flight))

    def leave(self, path: Path) -> None:
        self.in_flight.remove(path)

    def mark_resolved(self, path: Path) -> None:
        self.resolved.add(path)

    @property
    def total_attempts(self) -> int:
        return sum(self.parse_attempts.values())

    @property
    def total_successes(self) -> int:
        return sum(self.parse_successes.values())
