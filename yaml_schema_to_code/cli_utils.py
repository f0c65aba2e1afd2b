"""
CLI utilities for command line reconstruction and logging setup.
"""

import logging
from pathlib import Path

import click

PROGRAM_NAME = "yaml_schema_to_code"


def _format_value(value) -> str:
    # Paths are shown by name only so generated files do not leak local directories
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.is_absolute() or path_obj.exists() else str(value)
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Flags are emitted only when set, repeated options once per value, and
    options left at their default are omitted.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    arguments = []
    options = []

    for param in click_command.params:
        if param.name not in cli_args:
            continue

        value = cli_args[param.name]
        if value is None or value == () or value is False:
            continue

        if isinstance(param, click.Argument):
            arguments.append(_format_value(value))
            continue

        if not isinstance(param, click.Option) or value == param.default:
            continue

        flag = param.opts[0] if param.opts else f"--{param.name}"
        if param.is_flag:
            options.append(flag)
        elif param.multiple:
            for item in value:
                options.extend([flag, _format_value(item)])
        else:
            options.extend([flag, _format_value(value)])

    return " ".join([PROGRAM_NAME, *arguments, *options])


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; debug records only when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
