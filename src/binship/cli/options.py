"""Options shared by the deploy, plan and preflight commands."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click
from pydantic import ValidationError as PydanticValidationError

from binship.cli.errors import CLIError, handle_file_not_found, handle_validation_error
from binship.config import DeployConfig
from binship.errors import ConfigurationError

F = TypeVar("F", bound=Callable[..., Any])


def config_option(func: F) -> F:
    """Add the -c/--config option."""
    return click.option(
        "-c",
        "--config",
        "config_path",
        type=click.Path(dir_okay=False),
        default=None,
        help="Path to binship.yaml [default: ./binship.yaml if present]",
    )(func)


def override_options(func: F) -> F:
    """Add options overriding individual configuration values."""
    options = [
        click.option("--host", default=None, help="SSH host alias to deploy to"),
        click.option("--target", default=None, help="Target triple to build for"),
        click.option("--binary", default=None, help="Name of the built executable"),
        click.option("--service-dir", default=None, help="Remote service directory"),
        click.option(
            "--backup",
            is_flag=True,
            default=False,
            help="Keep the previous service binary as <binary>.bak",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def format_option(func: F) -> F:
    """Add the --format option."""
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(["table", "json"]),
        default="table",
        help="Report format [default: table]",
    )(func)


def load_config(config_path: str | None, **overrides: Any) -> DeployConfig:
    """Resolve configuration from file, defaults and CLI overrides.

    Raises:
        CLIError: If the file is missing or invalid.
    """
    try:
        config = DeployConfig.load(config_path)
    except FileNotFoundError:
        handle_file_not_found(str(config_path))
    except ConfigurationError as e:
        raise CLIError(e.user_message) from None

    # A bare --backup flag can only switch backups on
    if overrides.get("backup") is False:
        overrides["backup"] = None

    try:
        return config.with_overrides(**overrides)
    except PydanticValidationError as e:
        handle_validation_error(e, "command line options")
