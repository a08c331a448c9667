"""
End-to-end pipeline: discover, resolve, generate, write.

Nothing is written until every schema file resolved and every type
generated; a failure anywhere leaves the output directory untouched.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .codegen import ArtifactWriter, CodeGenerator, GeneratedType
from .config import CodeGeneratorConfig
from .errors import SchemaError, SchemaIOError, SchemaParseError
from .resolver import FileCatalogue, ResolutionContext, ResolutionDriver
from .schema import SchemaNames, SchemaOracle, SchemaParser

logger = logging.getLogger(__name__)


class SchemaPipeline:
    """Generates code for a schema tree or a protocol file."""

    def __init__(
        self,
        config: CodeGeneratorConfig | None = None,
        oracle: SchemaOracle | None = None,
        generation_comment: list[str] | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Generation configuration (defaults to CodeGeneratorConfig())
            oracle: Schema parser (defaults to SchemaParser())
            generation_comment: Lines of the header comment in generated files
        """
        self.config = config or CodeGeneratorConfig()
        self.oracle = oracle or SchemaParser()
        self.context = ResolutionContext()
        self.driver = ResolutionDriver(self.oracle, self.context)
        self.generator = CodeGenerator(self.config, generation_comment)

    def resolve(self, schema_path: str | Path) -> SchemaNames:
        """Resolve every schema file under ``schema_path`` (a directory or one file)."""
        catalogue = FileCatalogue.from_path(schema_path, self.config.schema_extension)
        logger.debug("Found %d schema files under %s", len(catalogue), schema_path)
        return self.driver.resolve_all(catalogue)

    def generate(self, schema_path: str | Path) -> list[GeneratedType]:
        """Resolve and generate, without writing."""
        return self.generator.generate(self.resolve(schema_path))

    def generate_schemas(self, schema_path: str | Path, output_dir: str | Path) -> list[Path]:
        """
        Generate code for every schema under ``schema_path`` into ``output_dir``.

        Returns:
            Paths of the written files
        """
        artifacts = self.generate(schema_path)
        return ArtifactWriter(output_dir, self.config).write_all(artifacts)

    def generate_protocol(self, protocol_path: str | Path, output_dir: str | Path) -> list[Path]:
        """
        Generate code for an Avro protocol file into ``output_dir``.

        Returns:
            Paths of the written files
        """
        path = Path(protocol_path).resolve()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaIOError(path, e) from e

        try:
            protocol = SchemaParser().parse_protocol(text, str(path))
        except SchemaParseError as e:
            raise SchemaError(path, e) from e
        artifacts = self.generator.generate_protocol(protocol, path)
        return ArtifactWriter(output_dir, self.config).write_all(artifacts)
