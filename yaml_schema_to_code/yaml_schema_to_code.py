import logging
from pathlib import Path

import click

from .cli_utils import configure_logging, reconstruct_command_line
from .pipeline import CodeGeneratorConfig, OutputError, OutputSink, PipelineGenerator, SchemaCompileError
from .pipeline.config import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)


def find_schema_files(input_dir: str | Path, extension: str, exclude_files: list[str]) -> list[Path]:
    """Schema files under input_dir with the given extension, sorted by path."""
    suffix = f".{extension.lstrip('.')}"
    excluded = set(exclude_files)
    return sorted(path for path in Path(input_dir).rglob(f"*{suffix}") if path.is_file() and path.name not in excluded)


@click.command()
@click.option("--package", "-p", default=None, type=str, help="Package of the generated units")
@click.option("--language", "-l", default=None, type=click.Choice(SUPPORTED_LANGUAGES))
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--extension", "-e", default=None, type=str, help="Extension of schema files (default: yaml)")
@click.option("--exclude", "-x", multiple=True, help="Schema file name to skip, may be repeated")
@click.option("--no-overwrite", is_flag=True, default=False, help="Keep output files that already exist")
@click.option("--no-validations", is_flag=True, default=False, help="Omit constraint directives and validation units")
@click.option("--keep-going", is_flag=True, default=False, help="Report failed documents and continue")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("input_dir", type=click.Path(exists=True, file_okay=False, resolve_path=True))
@click.argument("output_dir", type=click.Path(file_okay=False, resolve_path=True))
def yaml_schema_to_code(package, language, config, extension, exclude, no_overwrite, no_validations, keep_going, verbose, input_dir, output_dir):
    if config is not None:
        try:
            config = CodeGeneratorConfig.from_file(config)
        except ValueError as e:
            raise click.ClickException(str(e)) from e
    else:
        config = CodeGeneratorConfig()

    # CLI flags override config file values
    if package is not None:
        config.package_name = package
    if language is not None:
        config.language = language
    if extension is not None:
        config.schema_file_extension = extension
    if exclude:
        config.exclude_files = [*config.exclude_files, *exclude]
    if no_overwrite:
        config.overwrite_existing_files = False
    if no_validations:
        config.generate_validations = False
    if verbose:
        config.verbose = True

    configure_logging(config.verbose)

    try:
        config.validate()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    paths = find_schema_files(input_dir, config.schema_file_extension, config.exclude_files)
    if not paths:
        logger.warning(f"No .{config.schema_file_extension} files found in {input_dir}")
        return

    generator = PipelineGenerator(config, reconstruct_command_line(yaml_schema_to_code))
    try:
        result = generator.generate_files(paths, keep_going=keep_going)
    except SchemaCompileError as e:
        raise click.ClickException(str(e)) from e

    sink = OutputSink(output_dir, generator.backend, config)
    try:
        written = sink.write(result.units)
    except OutputError as e:
        raise click.ClickException(str(e)) from e

    logger.info(f"Wrote {len(written)} files from {len(paths) - len(result.failures)} of {len(paths)} documents")
    if not result.ok:
        raise click.ClickException(f"{len(result.failures)} of {len(paths)} documents failed")
