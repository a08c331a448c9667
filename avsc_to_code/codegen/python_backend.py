"""
Python code generation backend.

Generates one Python module per named Avro type: dataclasses for
records, Enum subclasses for enums and bytes subclasses for fixed.
"""

from __future__ import annotations

import ast
import keyword
from typing import Any

from ..config import CodeGeneratorConfig, LayoutPolicy
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
from .base import CodeBackend


def python_identifier(name: str) -> str:
    """Append ``_`` to names that are Python keywords."""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    TYPE_MAP = {
        "null": "None",
        "boolean": "bool",
        "int": "int",
        "long": "int",
        "float": "float",
        "double": "float",
        "bytes": "bytes",
        "string": "str",
    }

    def __init__(self, config: CodeGeneratorConfig, generation_comment: list[str] | None = None):
        super().__init__(config, generation_comment)
        self.required_imports: set[tuple[str, str]] = set()
        self.type_imports: set[tuple[str, str]] = set()
        self._current: NamedSchema | None = None

    def module_name(self, schema: NamedSchema) -> str:
        """Import path of the module generated for ``schema``."""
        if self.config.layout == LayoutPolicy.FLAT:
            return f".{schema.name}"
        namespace = self.target_namespace(schema.namespace)
        return f"{namespace}.{schema.name}" if namespace else schema.name

    def _reset_imports(self, current: NamedSchema | None) -> None:
        self.required_imports = set()
        self.type_imports = set()
        self._current = current

    def _import_groups(self) -> list[list[str]]:
        """Group imports: __future__, standard library, third party, generated types."""
        future = ["from __future__ import annotations"] if self.config.use_future_annotations else []
        stdlib = self._import_lines(m for m in self.required_imports if m[0] != "dataclasses_json")
        third_party = self._import_lines(m for m in self.required_imports if m[0] == "dataclasses_json")
        local = self._import_lines(self.type_imports)
        return [group for group in (future, stdlib, third_party, local) if group]

    @staticmethod
    def _import_lines(imports) -> list[str]:
        by_module: dict[str, set[str]] = {}
        for module, name in imports:
            by_module.setdefault(module, set()).add(name)
        return [f"from {module} import {', '.join(sorted(names))}" for module, names in sorted(by_module.items())]

    def _render_file(self, body: str) -> str:
        code = self.file_template.render(
            generation_comment=self.generation_comment,
            import_groups=self._import_groups(),
            body=body.rstrip("\n"),
        )
        return code.strip("\n") + "\n"

    def _docstring(self, doc: str | None, indent: str = "    ") -> str | None:
        lines = self._doc_lines(doc)
        if not lines:
            return None
        text = f"\n{indent}".join(line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"') for line in lines)
        if text.endswith('"'):
            text = text[:-1] + '\\"'
        return text

    def render_record(self, schema: RecordSchema) -> str:
        self._reset_imports(schema)
        self.required_imports.add(("dataclasses", "dataclass"))
        self.required_imports.add(("dataclasses_json", "dataclass_json"))

        fields = [self._field_declaration(field.name, field.type, field.has_default, field.default) for field in schema.fields]

        body = self.record_template.render(
            name=schema.name,
            base_class="Exception" if schema.is_error else None,
            docstring=self._docstring(schema.doc),
            fields=fields,
        )
        return self._render_file(body)

    def _field_declaration(self, name: str, node: SchemaNode, has_default: bool, default: Any) -> str:
        identifier = python_identifier(name)
        declaration = f"{identifier}: {self.translate_type(node, None)}"

        metadata = None
        if identifier != name:
            self.required_imports.add(("dataclasses", "field"))
            self.required_imports.add(("dataclasses_json", "config"))
            metadata = f'metadata=config(field_name="{name}")'

        value = self.format_default_value(default, node, None) if has_default else None
        if value is not None and value.startswith("field("):
            if metadata:
                value = value[:-1] + f", {metadata})"
            return f"{declaration} = {value}"
        if metadata:
            if value is not None:
                return f"{declaration} = field(default={value}, {metadata})"
            return f"{declaration} = field({metadata})"
        if value is not None:
            return f"{declaration} = {value}"
        return declaration

    def render_enum(self, schema: EnumSchema) -> str:
        self._reset_imports(schema)
        self.required_imports.add(("enum", "Enum"))
        body = self.enum_template.render(
            name=schema.name,
            docstring=self._docstring(schema.doc),
            members=[(python_identifier(symbol), repr(symbol)) for symbol in schema.symbols],
        )
        return self._render_file(body)

    def render_fixed(self, schema: FixedSchema) -> str:
        self._reset_imports(schema)
        body = self.fixed_template.render(
            name=schema.name,
            docstring=self._docstring(schema.doc),
            size=schema.size,
        )
        return self._render_file(body)

    def render_protocol(self, protocol: Protocol) -> str:
        self._reset_imports(None)
        self.required_imports.add(("typing", "Protocol"))

        methods = []
        for message in protocol.messages:
            parameters = ", ".join(["self"] + [f"{python_identifier(p.name)}: {self.translate_type(p.type, None)}" for p in message.request])
            return_type = "None" if message.one_way else self.translate_type(message.response, None)
            methods.append(
                {
                    "signature": f"def {python_identifier(message.name)}({parameters}) -> {return_type}:",
                    "docstring": self._docstring(message.doc, indent="        "),
                }
            )

        body = self.protocol_template.render(
            name=protocol.name,
            docstring=self._docstring(protocol.doc),
            methods=methods,
        )
        return self._render_file(body)

    @classmethod
    def validate_code(cls, code: str) -> None:
        try:
            ast.parse(code)
        except SyntaxError as e:
            raise GeneratedCodeError(f"Generated Python code is not valid: {e}") from e

    def translate_type(self, node: SchemaNode, namespace: str | None) -> str:
        """Translate a schema node to a Python type annotation."""
        if isinstance(node, PrimitiveSchema):
            return self.TYPE_MAP[node.name]

        if isinstance(node, NamedSchema):
            if node is self._current:
                return node.name if self.config.use_future_annotations else f'"{node.name}"'
            self.type_imports.add((self.module_name(node), node.name))
            return node.name

        if isinstance(node, ArraySchema):
            return f"list[{self.translate_type(node.items, namespace)}]"

        if isinstance(node, MapSchema):
            return f"dict[str, {self.translate_type(node.values, namespace)}]"

        if isinstance(node, UnionSchema):
            return " | ".join(self.translate_type(branch, namespace) for branch in node.branches)

        return "object"

    def format_default_value(self, value: Any, node: SchemaNode, namespace: str | None) -> str | None:
        """Format a default value for Python."""
        node = self._default_branch(node)

        if value is None:
            return "None"

        if isinstance(node, EnumSchema) and isinstance(value, str):
            return f"{self.translate_type(node, namespace)}.{python_identifier(value)}"

        if isinstance(node, PrimitiveSchema):
            if node.name == "boolean" and isinstance(value, bool):
                return repr(value)
            if node.name == "string" and isinstance(value, str):
                return repr(value)
            if node.name in ("int", "long") and isinstance(value, int) and not isinstance(value, bool):
                return repr(value)
            if node.name in ("float", "double") and isinstance(value, (int, float)) and not isinstance(value, bool):
                return repr(float(value))
            if node.name == "bytes" and isinstance(value, str):
                return repr(value.encode("latin-1"))
            return None

        if isinstance(node, ArraySchema) and isinstance(value, list):
            items = [self.format_default_value(item, node.items, namespace) for item in value]
            if any(item is None for item in items):
                return None
            self.required_imports.add(("dataclasses", "field"))
            if not items:
                return "field(default_factory=list)"
            return f"field(default_factory=lambda: [{', '.join(items)}])"

        if isinstance(node, MapSchema) and isinstance(value, dict):
            entries = {k: self.format_default_value(v, node.values, namespace) for k, v in value.items()}
            if any(v is None for v in entries.values()):
                return None
            self.required_imports.add(("dataclasses", "field"))
            if not entries:
                return "field(default_factory=dict)"
            items = [f"{k!r}: {v}" for k, v in entries.items()]
            return f"field(default_factory=lambda: {{{', '.join(items)}}})"

        # fixed and record defaults have no literal form
        return None
