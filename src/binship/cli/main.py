"""CLI entry point for binship.

This module defines the main CLI group using the LazyGroup pattern so
``binship --help`` does not import the deployment machinery.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from binship import __version__
from binship.cli.output import set_no_color
from binship.observability import configure_logging

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Commands are only imported when actually invoked, not at import time.

    Attributes:
        lazy_subcommands: Mapping of command names to module paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"deploy": "binship.cli.commands.deploy.deploy"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "deploy": "binship.cli.commands.deploy.deploy",
    "plan": "binship.cli.commands.plan.plan",
    "init": "binship.cli.commands.init.init",
    "preflight": "binship.cli.commands.preflight.preflight",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="binship")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log each step's progress to stderr.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Emit logs as JSON lines.",
)
def cli(verbose: bool, log_json: bool) -> None:
    """binship - build a release binary and ship it to a remote host.

    Runs three steps in order and stops at the first failure:

    - **build**: `cargo build --target <triple> --release`
    - **transfer**: `scp` the binary to the host's home directory
    - **activate**: `ssh -t` and `sudo mv` it into the service directory

    **Getting Started:**

    - `binship init` - Write a binship.yaml with the defaults
    - `binship preflight` - Check tools and SSH access
    - `binship plan` - Show the commands a deploy would run
    - `binship deploy` - Build, transfer and activate
    """
    configure_logging(
        log_level="INFO" if verbose else "WARNING",
        json_format=log_json,
    )


if __name__ == "__main__":
    cli()
