"""binship deploy command - Build, transfer and activate the binary."""

from __future__ import annotations

import click

from binship.cli.errors import EXIT_INTERRUPTED
from binship.cli.options import config_option, format_option, load_config, override_options
from binship.cli.output import error, get_console, success


@click.command()
@config_option
@override_options
@format_option
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Do not echo commands before running them",
)
def deploy(
    config_path: str | None,
    host: str | None,
    target: str | None,
    binary: str | None,
    service_dir: str | None,
    backup: bool,
    output_format: str,
    quiet: bool,
) -> None:
    """Build the binary, copy it to the host and move it into place.

    Stops at the first failing step and exits with that step's exit
    status. The binary previously in the service directory is
    overwritten; pass --backup to keep a copy next to it.

    Examples:

        binship deploy

        binship deploy --host staging --service-dir /srv/quotesbot-staging/

        binship deploy --config deploy/prod.yaml --backup
    """
    config = load_config(
        config_path,
        host=host,
        target=target,
        binary=binary,
        service_dir=service_dir,
        backup=backup,
    )
    if quiet:
        config = config.model_copy(update={"echo_commands": False})

    from binship.report import print_result
    from binship.runner import run_deploy

    try:
        result = run_deploy(config)
    except KeyboardInterrupt:
        error("Interrupted")
        raise SystemExit(EXIT_INTERRUPTED) from None

    print_result(result, output_format=output_format, console=get_console())

    if output_format == "table":
        if result.passed:
            success(
                f"Deployed {config.build.binary} to "
                f"{config.remote.host}:{config.remote.service_dir}"
            )
        else:
            error(f"Deployment failed with exit status {result.exit_code}")
    raise SystemExit(result.exit_code)
