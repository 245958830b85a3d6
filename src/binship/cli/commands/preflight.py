"""binship preflight command - Check tools and SSH access before deploying."""

from __future__ import annotations

import click

from binship.cli.options import config_option, format_option, load_config
from binship.cli.output import error, get_console, success


@click.command()
@config_option
@click.option("--host", default=None, help="SSH host alias to check")
@click.option(
    "--ssh/--no-ssh",
    "check_ssh",
    default=True,
    help="Enable/disable the SSH login check",
)
@click.option(
    "--timeout",
    default=10,
    type=click.IntRange(1, 300),
    help="SSH connect timeout in seconds [default: 10]",
)
@click.option(
    "--fail-fast",
    is_flag=True,
    default=False,
    help="Stop on first failure",
)
@format_option
def preflight(
    config_path: str | None,
    host: str | None,
    check_ssh: bool,
    timeout: int,
    fail_fast: bool,
    output_format: str,
) -> None:
    """Run pre-deployment checks.

    Verifies that the build tool, scp and ssh are installed and that the
    host accepts a non-interactive SSH login.

    Examples:

        binship preflight

        binship preflight --no-ssh

        binship preflight --host staging --format json
    """
    config = load_config(config_path, host=host)

    from binship.preflight import run_preflight
    from binship.report import print_result

    result = run_preflight(
        config,
        ssh=check_ssh,
        timeout_seconds=timeout,
        fail_fast=fail_fast,
    )
    print_result(result, output_format=output_format, console=get_console(), title="Preflight")

    if result.passed:
        if output_format == "table":
            success("Preflight checks passed")
        raise SystemExit(0)
    if output_format == "table":
        error("Preflight checks failed")
    raise SystemExit(1)
