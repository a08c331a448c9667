"""
C# code generation backend.

Generates one C# source file per named Avro type.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..config import CodeGeneratorConfig
from ..errors import GeneratedCodeError
from ..schema.nodes import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    NamedSchema,
    PrimitiveSchema,
    Protocol,
    RecordSchema,
    SchemaNode,
    UnionSchema,
)
from ..utils import escape_cs_identifier, snake_to_pascal_case
from .base import CodeBackend


class CSharpBackend(CodeBackend):
    """C# code generation backend."""

    TEMPLATE_LANG = "cs"
    FILE_EXTENSION = "cs"

    TYPE_MAP = {
        "null": "object",
        "boolean": "bool",
        "int": "int",
        "long": "long",
        "float": "float",
        "double": "double",
        "bytes": "byte[]",
        "string": "string",
    }

    # Types that need a "?" to hold null
    VALUE_TYPES = {"bool", "int", "long", "float", "double"}

    def __init__(self, config: CodeGeneratorConfig, generation_comment: list[str] | None = None):
        super().__init__(config, generation_comment)
        self.required_imports: set[str] = set()

    def _render_file(self, body: str, namespace: str | None) -> str:
        code = self.file_template.render(
            generation_comment=self.generation_comment,
            usings=sorted(self.required_imports),
            namespace=namespace,
            body=body.rstrip("\n"),
        )
        return code.rstrip("\n") + "\n"

    def _reset_imports(self) -> None:
        self.required_imports = {"System", "Newtonsoft.Json"}

    def render_record(self, schema: RecordSchema) -> str:
        self._reset_imports()
        namespace = self.target_namespace(schema.namespace)

        properties = []
        for field in schema.fields:
            type_name = self.translate_type(field.type, namespace)
            declaration = f"public {type_name} {self._property_name(field.name)} {{ get; set; }}"
            if field.has_default:
                default = self.format_default_value(field.default, field.type, namespace)
                if default is not None:
                    declaration += f" = {default};"
            properties.append(
                {
                    "json_name": field.name,
                    "doc_lines": self._doc_lines(field.doc),
                    "declaration": declaration,
                }
            )

        body = self.record_template.render(
            name=escape_cs_identifier(schema.name),
            base_class="Exception" if schema.is_error else None,
            doc_lines=self._doc_lines(schema.doc),
            properties=properties,
        )
        return self._render_file(body, namespace)

    def render_enum(self, schema: EnumSchema) -> str:
        self._reset_imports()
        self.required_imports.add("Newtonsoft.Json.Converters")
        namespace = self.target_namespace(schema.namespace)
        body = self.enum_template.render(
            name=escape_cs_identifier(schema.name),
            doc_lines=self._doc_lines(schema.doc),
            symbols=[escape_cs_identifier(symbol) for symbol in schema.symbols],
        )
        return self._render_file(body, namespace)

    def render_fixed(self, schema: FixedSchema) -> str:
        self._reset_imports()
        namespace = self.target_namespace(schema.namespace)
        body = self.fixed_template.render(
            name=escape_cs_identifier(schema.name),
            doc_lines=self._doc_lines(schema.doc),
            size=schema.size,
        )
        return self._render_file(body, namespace)

    def render_protocol(self, protocol: Protocol) -> str:
        self._reset_imports()
        namespace = self.target_namespace(protocol.namespace)

        methods = []
        for message in protocol.messages:
            if message.one_way or self._is_null(message.response):
                return_type = "void"
            else:
                return_type = self.translate_type(message.response, namespace)
            parameters = ", ".join(f"{self.translate_type(p.type, namespace)} {escape_cs_identifier(p.name)}" for p in message.request)
            methods.append(
                {
                    "doc_lines": self._doc_lines(message.doc),
                    "declaration": f"{return_type} {snake_to_pascal_case(message.name)}({parameters});",
                }
            )

        body = self.protocol_template.render(
            name=f"I{protocol.name}",
            doc_lines=self._doc_lines(protocol.doc),
            methods=methods,
        )
        return self._render_file(body, namespace)

    _STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"')
    _TYPE_DEFINITION = re.compile(r"\b(?:class|enum|interface)\s+\w")

    @classmethod
    def validate_code(cls, code: str) -> None:
        """Structural checks only: a type definition, usings and balanced braces."""
        if not cls._TYPE_DEFINITION.search(code):
            raise GeneratedCodeError("Generated C# code has no type definitions")
        if "using " not in code:
            raise GeneratedCodeError("Generated C# code is missing using statements")

        # Braces inside string defaults do not count
        depth = 0
        for char in cls._STRING_LITERAL.sub('""', code):
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth < 0:
                    break
        if depth != 0:
            raise GeneratedCodeError("Generated C# code has unbalanced braces")

    def _property_name(self, field_name: str) -> str:
        return escape_cs_identifier(snake_to_pascal_case(field_name) or field_name)

    def translate_type(self, node: SchemaNode, namespace: str | None) -> str:
        """Translate a schema node to a C# type string."""
        if isinstance(node, PrimitiveSchema):
            return self.TYPE_MAP[node.name]

        if isinstance(node, NamedSchema):
            target = self.target_namespace(node.namespace)
            name = escape_cs_identifier(node.name)
            if target and target != namespace:
                return f"{target}.{name}"
            return name

        if isinstance(node, ArraySchema):
            self.required_imports.add("System.Collections.Generic")
            return f"IList<{self.translate_type(node.items, namespace)}>"

        if isinstance(node, MapSchema):
            self.required_imports.add("System.Collections.Generic")
            return f"IDictionary<string, {self.translate_type(node.values, namespace)}>"

        if isinstance(node, UnionSchema):
            # C# doesn't support inline unions, use object
            # For [null, T], convert to T?
            non_null = node.non_null_branches
            if len(non_null) == 1:
                base_type = self.translate_type(non_null[0], namespace)
                if node.is_nullable and (base_type in self.VALUE_TYPES or isinstance(non_null[0], EnumSchema)):
                    return f"{base_type}?"
                return base_type
            return "object"

        return "object"

    def format_default_value(self, value: Any, node: SchemaNode, namespace: str | None) -> str | None:
        """Format a default value for C#."""
        node = self._default_branch(node)

        if value is None:
            return "null"

        if isinstance(node, EnumSchema) and isinstance(value, str):
            return f"{self.translate_type(node, namespace)}.{escape_cs_identifier(value)}"

        if isinstance(node, PrimitiveSchema):
            if node.name == "boolean" and isinstance(value, bool):
                return "true" if value else "false"
            if node.name == "string" and isinstance(value, str):
                return json.dumps(value)
            if node.name in ("int", "long") and isinstance(value, int) and not isinstance(value, bool):
                return f"{value}L" if node.name == "long" else str(value)
            if node.name == "float" and isinstance(value, (int, float)):
                return f"{float(value)}f"
            if node.name == "double" and isinstance(value, (int, float)):
                return f"{float(value)}d"
            return None

        if isinstance(node, ArraySchema) and isinstance(value, list):
            type_name = f"List<{self.translate_type(node.items, namespace)}>"
            items = [self.format_default_value(item, node.items, namespace) for item in value]
            if any(item is None for item in items):
                return None
            if not items:
                return f"new {type_name}()"
            return f"new {type_name} {{ {', '.join(items)} }}"

        if isinstance(node, MapSchema) and isinstance(value, dict):
            type_name = f"Dictionary<string, {self.translate_type(node.values, namespace)}>"
            entries = {k: self.format_default_value(v, node.values, namespace) for k, v in value.items()}
            if any(v is None for v in entries.values()):
                return None
            if not entries:
                return f"new {type_name}()"
            items = [f"[{json.dumps(k)}] = {v}" for k, v in entries.items()]
            return f"new {type_name} {{ {', '.join(items)} }}"

        # bytes, fixed and record defaults have no literal form
        return None
