"""
Node definitions for parsed Avro schemas.

These nodes represent the parsed structure of an Avro schema. Named
types carry their fully-qualified name; references to other named
types point at the node registered under that name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PRIMITIVE_TYPES = ("null", "boolean", "int", "long", "float", "double", "bytes", "string")


@dataclass(eq=False)
class SchemaNode:
    """Base class for all schema nodes."""

    # Location inside the schema document (for error messages)
    source_path: str = ""

    # Unknown attributes, kept as-is
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def type_name(self) -> str:
        raise NotImplementedError


@dataclass
class PrimitiveSchema(SchemaNode):
    """A primitive type (null, boolean, int, long, float, double, bytes, string)."""

    name: str = "null"
    logical_type: str | None = None

    @property
    def type_name(self) -> str:
        return self.name


@dataclass(eq=False)
class NamedSchema(SchemaNode):
    """Base class for record, error, enum and fixed schemas."""

    name: str = ""
    namespace: str | None = None
    doc: str | None = None
    aliases: list[str] = field(default_factory=list)

    @property
    def fullname(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name


@dataclass(eq=False)
class Field:
    """A field of a record."""

    name: str = ""
    type: SchemaNode | None = None
    doc: str | None = None
    default: Any = None
    has_default: bool = False
    order: str = "ascending"
    aliases: list[str] = field(default_factory=list)


@dataclass(eq=False)
class RecordSchema(NamedSchema):
    """A record (or error) with ordered fields."""

    fields: list[Field] = field(default_factory=list)
    is_error: bool = False

    @property
    def type_name(self) -> str:
        return "error" if self.is_error else "record"


@dataclass(eq=False)
class EnumSchema(NamedSchema):
    symbols: list[str] = field(default_factory=list)
    default: str | None = None

    @property
    def type_name(self) -> str:
        return "enum"


@dataclass(eq=False)
class FixedSchema(NamedSchema):
    size: int = 0

    @property
    def type_name(self) -> str:
        return "fixed"


@dataclass
class ArraySchema(SchemaNode):
    items: SchemaNode | None = None

    @property
    def type_name(self) -> str:
        return "array"


@dataclass
class MapSchema(SchemaNode):
    values: SchemaNode | None = None

    @property
    def type_name(self) -> str:
        return "map"


@dataclass
class UnionSchema(SchemaNode):
    branches: list[SchemaNode] = field(default_factory=list)

    @property
    def type_name(self) -> str:
        return "union"

    @property
    def is_nullable(self) -> bool:
        return any(isinstance(b, PrimitiveSchema) and b.name == "null" for b in self.branches)

    @property
    def non_null_branches(self) -> list[SchemaNode]:
        return [b for b in self.branches if not (isinstance(b, PrimitiveSchema) and b.name == "null")]


@dataclass
class Message:
    """A protocol message."""

    name: str = ""
    doc: str | None = None
    request: list[Field] = field(default_factory=list)
    response: SchemaNode | None = None
    errors: list[SchemaNode] = field(default_factory=list)
    one_way: bool = False


@dataclass
class Protocol:
    """Root of a parsed Avro protocol."""

    name: str = ""
    namespace: str | None = None
    doc: str | None = None
    types: dict[str, NamedSchema] = field(default_factory=dict)
    messages: list[Message] = field(default_factory=list)


@dataclass
class ParsedSchema:
    """Result of parsing one schema file.

    Attributes:
        root: The top-level schema of the document
        defined: Named types introduced by the document, by fullname, in definition order
    """

    root: SchemaNode | None = None
    defined: dict[str, NamedSchema] = field(default_factory=dict)
