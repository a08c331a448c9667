import json
import logging

import click

from . import __version__
from .cli_utils import reconstruct_command_line
from .config import CodeGeneratorConfig, OutputMode, parse_namespace_mapping
from .errors import CodeGenError
from .pipeline import SchemaPipeline


def _generation_comment(command: click.Command) -> list[str]:
    return [
        f"Generated by avsc_to_code {__version__}",
        f"Command: {reconstruct_command_line(command)}",
        "Changes to this file will be lost if the code is regenerated",
    ]


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", prog_name="avsc_to_code")
@click.option("--schema", "-s", "schema_path", default=None, type=click.Path(exists=True, resolve_path=True), help="Schema file, or directory searched recursively for schema files")
@click.option("--protocol", "-p", "protocol_path", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True), help="Protocol file")
@click.option(
    "--namespace",
    "namespaces",
    multiple=True,
    help='Map an Avro namespace to a generated namespace, as "my.avro.ns:my.csharp.ns". May be repeated.',
)
@click.option(
    "--skip-directories",
    is_flag=True,
    default=False,
    help="Write every file into the output directory instead of namespace directories",
)
@click.option("--language", "-l", default=None, type=click.Choice(["cs", "python"]))
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--force", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def avsc_to_code(schema_path, protocol_path, namespaces, skip_directories, language, config, force, verbose, output):
    """Generate code from Avro schemas (-s) or an Avro protocol (-p) into OUTPUT."""
    if (schema_path is None) == (protocol_path is None):
        raise click.UsageError("Must provide either '-p <protocolfile>' or '-s <schemafile>'")

    if config is not None:
        with open(config) as f:
            try:
                config = CodeGeneratorConfig.from_dict(json.load(f))
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="'--config'") from e
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    for value in namespaces:
        try:
            source, target = parse_namespace_mapping(value)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="'--namespace'") from e
        config.namespace_mapping[source] = target
    if skip_directories:
        config.skip_directories = True
    if language is not None:
        config.language = language
    if force:
        config.output.mode = OutputMode.FORCE

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    pipeline = SchemaPipeline(config, generation_comment=_generation_comment(click.get_current_context().command))
    try:
        if protocol_path is not None:
            written = pipeline.generate_protocol(protocol_path, output)
        else:
            written = pipeline.generate_schemas(schema_path, output)
    except (CodeGenError, OSError) as e:
        raise click.ClickException(f"Exception occurred. {e}") from e

    click.echo(f"Wrote {len(written)} files to {output}")

