"""binship init command - Write a binship.yaml with the defaults."""

from __future__ import annotations

from pathlib import Path

import click

from binship.cli.output import error, success, warning
from binship.config import DEFAULT_CONFIG_FILENAME, DeployConfig

CONFIG_TEMPLATE = """\
# binship deployment configuration
#
# binship deploy runs, in order, stopping at the first failure:
#   {{ build.tool }} build --target {{ build.target }} {{ profile_flags }}
#   {{ remote.scp }} {{ artifact }} {{ remote.host }}:{{ remote.upload_dir }}
#   {{ remote.ssh }}{{ " -t" if remote.tty }} {{ remote.host }} '{{ activate }}'

build:
  tool: {{ build.tool | tojson }}
  target: {{ build.target | tojson }}
  # release, dev, or a custom cargo profile name
  profile: {{ build.profile | tojson }}
  binary: {{ build.binary | tojson }}
  target_dir: {{ build.target_dir | tojson }}
  extra_args: {{ build.extra_args | tojson }}

remote:
  # SSH alias from ~/.ssh/config
  host: {{ remote.host | tojson }}
  upload_dir: {{ remote.upload_dir | tojson }}
  service_dir: {{ remote.service_dir | tojson }}
  ssh: {{ remote.ssh | tojson }}
  scp: {{ remote.scp | tojson }}
  elevate: {{ remote.elevate | tojson }}
  tty: {{ remote.tty | tojson }}
  # Copy the live binary to <binary>.bak before replacing it
  backup: {{ remote.backup | tojson }}

echo_commands: {{ echo_commands | tojson }}
"""


def render_config(config: DeployConfig) -> str:
    """Render a commented binship.yaml for a configuration."""
    from jinja2.sandbox import SandboxedEnvironment

    from binship.steps import ActivationStep

    env = SandboxedEnvironment(trim_blocks=True, lstrip_blocks=True)
    return env.from_string(CONFIG_TEMPLATE).render(
        build=config.build,
        remote=config.remote,
        echo_commands=config.echo_commands,
        artifact=str(config.build.artifact_path),
        profile_flags=" ".join(config.build.profile_args),
        activate=ActivationStep(config).remote_command(),
    )


@click.command()
@click.option("--host", default=None, help="SSH host alias to deploy to")
@click.option("--target", default=None, help="Target triple to build for")
@click.option("--binary", default=None, help="Name of the built executable")
@click.option("--service-dir", default=None, help="Remote service directory")
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Overwrite existing files",
)
def init(
    host: str | None,
    target: str | None,
    binary: str | None,
    service_dir: str | None,
    force: bool,
) -> None:
    """Write a binship.yaml in the current directory.

    The file holds the default deployment settings, with any options
    given here applied.

    Examples:

        binship init

        binship init --host staging --binary my-service

        binship init --force
    """
    config_path = Path(DEFAULT_CONFIG_FILENAME)
    if config_path.exists() and not force:
        error(f"{DEFAULT_CONFIG_FILENAME} already exists.")
        error("Use --force to overwrite.")
        raise SystemExit(1)

    from pydantic import ValidationError as PydanticValidationError

    from binship.cli.errors import handle_validation_error

    try:
        config = DeployConfig().with_overrides(
            host=host,
            target=target,
            binary=binary,
            service_dir=service_dir,
        )
    except PydanticValidationError as e:
        handle_validation_error(e, "command line options")

    overwriting = config_path.exists()
    try:
        config_path.write_text(render_config(config))
    except PermissionError:
        error(f"Cannot write to: {config_path}")
        raise SystemExit(2) from None

    if overwriting:
        warning(f"Overwrote existing {config_path}")
    success(f"Created {config_path}")
