"""
Avro schema parser.

Parses the JSON text of an ``.avsc`` schema (or ``.avpr`` protocol) into
schema nodes. Type references are looked up in a read-only view of the
names committed so far plus the names the document itself defines.
Nothing is registered outside the returned result: a failed parse has
no side effects.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..errors import SchemaParseError, UndefinedNameError
from .nodes import (
    PRIMITIVE_TYPES,
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


class SchemaOracle(ABC):
    """Parses one schema document against the names known so far."""

    @abstractmethod
    def parse(self, text: str, names: Mapping[str, NamedSchema], source: str = "") -> ParsedSchema:
        """
        Parse schema text.

        Args:
            text: Raw schema text
            names: Read-only view of the names already committed
            source: Where the text came from (for error messages)

        Returns:
            ParsedSchema with the names this document defines

        Raises:
            UndefinedNameError: If the document references an unknown name
            SchemaParseError: For any other invalid schema
        """


@dataclass
class _ParseState:
    """Names visible while parsing one document."""

    names: Mapping[str, NamedSchema]
    source: str = ""
    pending: dict[str, NamedSchema] = field(default_factory=dict)

    def lookup(self, name: str, namespace: str | None) -> NamedSchema | None:
        if "." in name or not namespace:
            candidates = [name]
        else:
            candidates = [f"{namespace}.{name}", name]
        for candidate in candidates:
            schema = self.pending.get(candidate) or self.names.get(candidate)
            if schema is not None:
                return schema
        return None

    def register(self, schema: NamedSchema) -> None:
        fullname = schema.fullname
        if fullname in self.pending or fullname in self.names:
            raise SchemaParseError(f"Duplicate name: {fullname}")
        self.pending[fullname] = schema


class SchemaParser(SchemaOracle):
    """Parses Avro JSON schemas into schema nodes."""

    NAMED_TYPES = {"record", "error", "enum", "fixed"}
    FIELD_ORDERS = {"ascending", "descending", "ignore"}

    _NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

    # Attributes consumed by the parser; anything else lands in metadata
    _KNOWN_ATTRIBUTES = {
        "type",
        "name",
        "namespace",
        "doc",
        "aliases",
        "fields",
        "symbols",
        "default",
        "size",
        "items",
        "values",
        "logicalType",
    }

    def parse(self, text: str, names: Mapping[str, NamedSchema], source: str = "") -> ParsedSchema:
        document = self._load_json(text, source)
        state = _ParseState(names=names, source=source)
        root = self._parse_schema_node(document, state, None, "#")
        return ParsedSchema(root=root, defined=state.pending)

    def parse_protocol(self, text: str, source: str = "") -> Protocol:
        """
        Parse an Avro protocol document.

        Types are resolved in declaration order within the document only.

        Args:
            text: Raw protocol text
            source: Where the text came from (for error messages)

        Returns:
            Protocol with its named types and messages
        """
        document = self._load_json(text, source)
        if not isinstance(document, dict) or "protocol" not in document:
            raise SchemaParseError(f"Protocol must be an object with a 'protocol' attribute: {source or 'text'}")

        namespace = document.get("namespace") or None
        if namespace is not None and not isinstance(namespace, str):
            raise SchemaParseError(f"Invalid protocol namespace: {namespace!r}")
        protocol_name = document["protocol"]
        self._check_name(protocol_name, "#/protocol")

        state = _ParseState(names=MappingProxyType({}), source=source)
        for index, type_schema in enumerate(document.get("types", [])):
            path = f"#/types[{index}]"
            node = self._parse_schema_node(type_schema, state, namespace, path)
            if not isinstance(node, NamedSchema):
                raise SchemaParseError(f"Protocol types must be named types at {path}")

        messages = [
            self._parse_message(name, message, state, namespace) for name, message in document.get("messages", {}).items()
        ]

        return Protocol(
            name=protocol_name,
            namespace=namespace,
            doc=document.get("doc"),
            types=state.pending,
            messages=messages,
        )

    def _load_json(self, text: str, source: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaParseError(f"Invalid JSON in {source or 'schema'}: {e}") from e

    def _parse_schema_node(self, schema: Any, state: _ParseState, namespace: str | None, path: str) -> SchemaNode:
        """
        Parse a schema node recursively.

        Args:
            schema: A JSON value (string, list or object)
            state: Names visible to this document
            namespace: Enclosing namespace
            path: Current path in the document (for error messages)

        Returns:
            Appropriate SchemaNode subclass
        """
        # Primitive or reference by name
        if isinstance(schema, str):
            if schema in PRIMITIVE_TYPES:
                return PrimitiveSchema(name=schema, source_path=path)
            return self._resolve_reference(schema, state, namespace, path)

        # Unions are plain JSON arrays
        if isinstance(schema, list):
            return self._parse_union(schema, state, namespace, path)

        if not isinstance(schema, dict):
            raise SchemaParseError(f"Invalid schema at {path}: {schema!r}")

        if "type" not in schema:
            raise SchemaParseError(f"No 'type' property at {path}")

        type_value = schema["type"]
        metadata = {k: v for k, v in schema.items() if k not in self._KNOWN_ATTRIBUTES}

        # {"type": {...}} and {"type": [...]} wrap another schema
        if isinstance(type_value, (dict, list)):
            return self._parse_schema_node(type_value, state, namespace, path)

        if not isinstance(type_value, str):
            raise SchemaParseError(f"Invalid 'type' at {path}: {type_value!r}")

        if type_value in PRIMITIVE_TYPES:
            return PrimitiveSchema(
                name=type_value,
                logical_type=schema.get("logicalType"),
                source_path=path,
                metadata=metadata,
            )

        if type_value in ("record", "error"):
            return self._parse_record(schema, state, namespace, path, metadata)

        if type_value == "enum":
            return self._parse_enum(schema, state, namespace, path, metadata)

        if type_value == "fixed":
            return self._parse_fixed(schema, state, namespace, path, metadata)

        if type_value == "array":
            if "items" not in schema:
                raise SchemaParseError(f"Array has no 'items' at {path}")
            items = self._parse_schema_node(schema["items"], state, namespace, f"{path}/items")
            return ArraySchema(items=items, source_path=path, metadata=metadata)

        if type_value == "map":
            if "values" not in schema:
                raise SchemaParseError(f"Map has no 'values' at {path}")
            values = self._parse_schema_node(schema["values"], state, namespace, f"{path}/values")
            return MapSchema(values=values, source_path=path, metadata=metadata)

        # Anything else is a reference to a named type
        return self._resolve_reference(type_value, state, namespace, path)

    def _resolve_reference(self, name: str, state: _ParseState, namespace: str | None, path: str) -> NamedSchema:
        # Only well-formed names may be looked up, so a candidate file name never leaves its directory
        if not all(self._NAME_PATTERN.match(part) for part in name.split(".")):
            raise SchemaParseError(f"Invalid type name {name!r} at {path}")
        schema = state.lookup(name, namespace)
        if schema is None:
            raise UndefinedNameError(name, path)
        return schema

    def _parse_union(self, branches: list, state: _ParseState, namespace: str | None, path: str) -> UnionSchema:
        union = UnionSchema(source_path=path)
        seen: set[str] = set()
        for index, branch in enumerate(branches):
            node = self._parse_schema_node(branch, state, namespace, f"{path}[{index}]")
            if isinstance(node, UnionSchema):
                raise SchemaParseError(f"Unions may not immediately contain other unions at {path}")
            key = node.fullname if isinstance(node, NamedSchema) else node.type_name
            if key in seen:
                raise SchemaParseError(f"Duplicate type {key} in union at {path}")
            seen.add(key)
            union.branches.append(node)
        return union

    def _named_attributes(self, schema: dict, namespace: str | None, path: str) -> dict[str, Any]:
        """Split name/namespace and collect the attributes shared by named types."""
        if "name" not in schema:
            raise SchemaParseError(f"No 'name' property at {path}")
        name = schema["name"]
        if not isinstance(name, str):
            raise SchemaParseError(f"Invalid name at {path}: {name!r}")

        if "." in name:
            own_namespace, name = name.rsplit(".", 1)
        elif "namespace" in schema:
            own_namespace = schema["namespace"]
            if own_namespace is not None and not isinstance(own_namespace, str):
                raise SchemaParseError(f"Invalid namespace at {path}: {own_namespace!r}")
        else:
            own_namespace = namespace
        own_namespace = own_namespace or None

        self._check_name(name, path)
        if name in PRIMITIVE_TYPES:
            raise SchemaParseError(f"{name} is a reserved type name at {path}")
        if own_namespace is not None:
            for part in own_namespace.split("."):
                self._check_name(part, path)

        return {
            "name": name,
            "namespace": own_namespace,
            "doc": schema.get("doc"),
            "aliases": self._aliases(schema, path),
        }

    def _aliases(self, schema: dict, path: str) -> list[str]:
        aliases = schema.get("aliases", [])
        if not isinstance(aliases, list) or not all(isinstance(alias, str) for alias in aliases):
            raise SchemaParseError(f"Invalid aliases at {path}: {aliases!r}")
        return list(aliases)

    def _check_name(self, name: Any, path: str) -> None:
        if not isinstance(name, str) or not self._NAME_PATTERN.match(name):
            raise SchemaParseError(f"Invalid name {name!r} at {path}")

    def _parse_record(self, schema: dict, state: _ParseState, namespace: str | None, path: str, metadata: dict) -> RecordSchema:
        record = RecordSchema(
            is_error=schema["type"] == "error",
            source_path=path,
            metadata=metadata,
            **self._named_attributes(schema, namespace, path),
        )
        # Register before the fields so the record can refer to itself
        state.register(record)

        fields = schema.get("fields")
        if not isinstance(fields, list):
            raise SchemaParseError(f"Record {record.fullname} has no 'fields' list at {path}")

        record.fields = self._parse_fields(fields, state, record.namespace, f"{path}/fields", record.fullname)
        return record

    def _parse_fields(self, fields: list, state: _ParseState, namespace: str | None, path: str, owner: str) -> list[Field]:
        parsed: list[Field] = []
        seen: set[str] = set()
        for index, field_schema in enumerate(fields):
            field_path = f"{path}[{index}]"
            if not isinstance(field_schema, dict):
                raise SchemaParseError(f"Invalid field at {field_path}")
            if "name" not in field_schema:
                raise SchemaParseError(f"No 'name' property for field at {field_path}")
            name = field_schema["name"]
            self._check_name(name, field_path)
            if name in seen:
                raise SchemaParseError(f"Duplicate field name {name} in {owner}")
            seen.add(name)
            if "type" not in field_schema:
                raise SchemaParseError(f"No 'type' property for field {name} in {owner}")

            order = field_schema.get("order", "ascending")
            if not isinstance(order, str) or order not in self.FIELD_ORDERS:
                raise SchemaParseError(f"Invalid order {order!r} for field {name} in {owner}")

            parsed.append(
                Field(
                    name=name,
                    type=self._parse_schema_node(field_schema["type"], state, namespace, f"{field_path}/type"),
                    doc=field_schema.get("doc"),
                    default=field_schema.get("default"),
                    has_default="default" in field_schema,
                    order=order,
                    aliases=self._aliases(field_schema, field_path),
                )
            )
        return parsed

    def _parse_enum(self, schema: dict, state: _ParseState, namespace: str | None, path: str, metadata: dict) -> EnumSchema:
        enum = EnumSchema(source_path=path, metadata=metadata, **self._named_attributes(schema, namespace, path))

        symbols = schema.get("symbols")
        if not isinstance(symbols, list):
            raise SchemaParseError(f"Enum {enum.fullname} has no 'symbols' list at {path}")
        for symbol in symbols:
            self._check_name(symbol, f"{path}/symbols")
        if len(set(symbols)) != len(symbols):
            raise SchemaParseError(f"Duplicate symbol in enum {enum.fullname}")
        enum.symbols = list(symbols)

        default = schema.get("default")
        if default is not None and default not in symbols:
            raise SchemaParseError(f"Default {default!r} is not a symbol of enum {enum.fullname}")
        enum.default = default

        state.register(enum)
        return enum

    def _parse_fixed(self, schema: dict, state: _ParseState, namespace: str | None, path: str, metadata: dict) -> FixedSchema:
        fixed = FixedSchema(source_path=path, metadata=metadata, **self._named_attributes(schema, namespace, path))

        size = schema.get("size")
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise SchemaParseError(f"Fixed {fixed.fullname} needs a non-negative integer 'size' at {path}")
        fixed.size = size

        state.register(fixed)
        return fixed

    def _parse_message(self, name: str, message: Any, state: _ParseState, namespace: str | None) -> Message:
        path = f"#/messages/{name}"
        self._check_name(name, path)
        if not isinstance(message, dict):
            raise SchemaParseError(f"Invalid message at {path}")

        request = message.get("request", [])
        if not isinstance(request, list):
            raise SchemaParseError(f"Message request must be a list at {path}")

        one_way = bool(message.get("one-way", False))
        response = self._parse_schema_node(message.get("response", "null"), state, namespace, f"{path}/response")
        if one_way and not (isinstance(response, PrimitiveSchema) and response.name == "null"):
            raise SchemaParseError(f"One-way message {name} must have a null response")

        errors = [
            self._parse_schema_node(error, state, namespace, f"{path}/errors[{index}]")
            for index, error in enumerate(message.get("errors", []))
        ]

        return Message(
            name=name,
            doc=message.get("doc"),
            request=self._parse_fields(request, state, namespace, f"{path}/request", name),
            response=response,
            errors=errors,
            one_way=one_way,
        )
