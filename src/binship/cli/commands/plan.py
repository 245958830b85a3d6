"""binship plan command - Show the commands a deploy would run."""

from __future__ import annotations

import click

from binship.cli.options import config_option, format_option, load_config, override_options
from binship.cli.output import get_console


@click.command()
@config_option
@override_options
@format_option
def plan(
    config_path: str | None,
    host: str | None,
    target: str | None,
    binary: str | None,
    service_dir: str | None,
    backup: bool,
    output_format: str,
) -> None:
    """Show the build, transfer and activate commands without running them.

    Examples:

        binship plan

        binship plan --host staging --format json
    """
    config = load_config(
        config_path,
        host=host,
        target=target,
        binary=binary,
        service_dir=service_dir,
        backup=backup,
    )

    from binship.report import print_result
    from binship.runner import plan_deploy

    print_result(
        plan_deploy(config),
        output_format=output_format,
        console=get_console(),
        title="Deployment plan",
    )
