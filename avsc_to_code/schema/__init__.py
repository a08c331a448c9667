"""
Schema module.

Contains the Avro schema nodes, the parser and the named type registry.
"""

from __future__ import annotations

from .names import SchemaNames
from .nodes import (
    ArraySchema,
    EnumSchema,
    Field,
    FixedSchema,
    MapSchema,
    Message,
    NamedSchema,
    ParsedSchema,
    PrimitiveSchema,
    Protocol,
    RecordSchema,
    SchemaNode,
    UnionSchema,
)
from .parser import SchemaOracle, SchemaParser

__all__ = [
    "SchemaNode",
    "PrimitiveSchema",
    "NamedSchema",
    "RecordSchema",
    "EnumSchema",
    "FixedSchema",
    "ArraySchema",
    "MapSchema",
    "UnionSchema",
    "Field",
    "Message",
    "Protocol",
    "ParsedSchema",
    "SchemaNames",
    "SchemaOracle",
    "SchemaParser",
]
