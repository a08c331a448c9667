"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import jinja2

from ..config import CodeGeneratorConfig, LayoutPolicy
from ..schema.nodes import (
    EnumSchema,
    FixedSchema,
    NamedSchema,
    PrimitiveSchema,
    Protocol,
    RecordSchema,
    SchemaNode,
    UnionSchema,
)
from ..utils import namespace_to_path, snake_to_pascal_case

TEMPLATE_ROOT = Path(__file__).parent.parent / "templates"


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Type mapping from Avro primitive types to language types
    TYPE_MAP: dict[str, str] = {}

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig, generation_comment: list[str] | None = None):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
            generation_comment: Lines of the header comment (empty for none)
        """
        self.config = config
        self.generation_comment = generation_comment if config.add_generation_comment else []
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_ROOT / self.TEMPLATE_LANG)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        # Add custom filters
        self.jinja_env.filters["snake_to_pascal"] = snake_to_pascal_case

        self.file_template = self.jinja_env.get_template(f"file.{self.FILE_EXTENSION}.jinja2")
        self.record_template = self.jinja_env.get_template(f"record.{self.FILE_EXTENSION}.jinja2")
        self.enum_template = self.jinja_env.get_template(f"enum.{self.FILE_EXTENSION}.jinja2")
        self.fixed_template = self.jinja_env.get_template(f"fixed.{self.FILE_EXTENSION}.jinja2")
        self.protocol_template = self.jinja_env.get_template(f"protocol.{self.FILE_EXTENSION}.jinja2")

    def target_namespace(self, namespace: str | None) -> str | None:
        """Map an Avro namespace to the generated namespace."""
        return self.config.map_namespace(namespace)

    def relative_path(self, name: str, namespace: str | None) -> Path:
        """Path of the generated file below the output root."""
        file_name = f"{name}.{self.FILE_EXTENSION}"
        if self.config.layout == LayoutPolicy.FLAT or not namespace:
            return Path(file_name)
        return Path(namespace_to_path(namespace)) / file_name

    def render_type(self, schema: NamedSchema) -> str:
        """
        Generate the source file for one named type.

        Args:
            schema: The record, error, enum or fixed schema

        Returns:
            Generated code as a string
        """
        if isinstance(schema, RecordSchema):
            return self.render_record(schema)
        if isinstance(schema, EnumSchema):
            return self.render_enum(schema)
        if isinstance(schema, FixedSchema):
            return self.render_fixed(schema)
        raise ValueError(f"Unknown named type {schema.fullname}")

    @abstractmethod
    def render_record(self, schema: RecordSchema) -> str:
        """Generate the source file for a record or error."""

    @abstractmethod
    def render_enum(self, schema: EnumSchema) -> str:
        """Generate the source file for an enum."""

    @abstractmethod
    def render_fixed(self, schema: FixedSchema) -> str:
        """Generate the source file for a fixed."""

    @abstractmethod
    def render_protocol(self, protocol: Protocol) -> str:
        """Generate the source file for a protocol's messages."""

    @classmethod
    @abstractmethod
    def validate_code(cls, code: str) -> None:
        """
        Check generated code before it is written.

        Raises:
            GeneratedCodeError: If the code is not well formed
        """

    @abstractmethod
    def translate_type(self, node: SchemaNode, namespace: str | None) -> str:
        """
        Translate a schema node to a language-specific type string.

        Args:
            node: The schema node
            namespace: Generated namespace of the file the type is used in

        Returns:
            Language-specific type string
        """

    @abstractmethod
    def format_default_value(self, value: Any, node: SchemaNode, namespace: str | None) -> str | None:
        """
        Format a field default for the target language.

        Args:
            value: The default from the schema (JSON value)
            node: The field type
            namespace: Generated namespace of the file

        Returns:
            Formatted default, or None when the default has no literal form
        """

    def _doc_lines(self, doc: str | None) -> list[str]:
        if not doc:
            return []
        return [line.rstrip() for line in doc.strip().splitlines()]

    def _default_branch(self, node: SchemaNode) -> SchemaNode:
        """Avro union defaults belong to the first branch."""
        if isinstance(node, UnionSchema) and node.branches:
            return node.branches[0]
        return node

    @staticmethod
    def _is_null(node: SchemaNode) -> bool:
        return isinstance(node, PrimitiveSchema) and node.name == "null"
