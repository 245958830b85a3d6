"""Deployment configuration models.

The defaults reproduce the fixed parameters of the original upload script:
a musl release build of ``hellquotes-bot``, copied to the ``titanic`` SSH
alias and moved into ``/srv/quotesbot/``.

Configuration is read from ``binship.yaml`` when present; CLI options are
applied on top via :meth:`DeployConfig.with_overrides`.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from binship.errors import ConfigurationError

DEFAULT_CONFIG_FILENAME = "binship.yaml"

DEFAULT_TARGET = "x86_64-unknown-linux-musl"
DEFAULT_BINARY = "hellquotes-bot"
DEFAULT_HOST = "titanic"
DEFAULT_SERVICE_DIR = "/srv/quotesbot/"


class BuildConfig(BaseModel):
    """Configuration for the build step.

    Attributes:
        tool: Build tool executable
        target: Target triple passed to ``--target``
        profile: Build profile ("release", "dev" or a custom profile name)
        binary: Name of the produced executable
        target_dir: Build output root, relative to the working directory
        extra_args: Additional arguments appended to the build command
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tool: str = Field(default="cargo", min_length=1, description="Build tool executable")
    target: str = Field(default=DEFAULT_TARGET, min_length=1, description="Target triple")
    profile: str = Field(default="release", min_length=1, description="Build profile")
    binary: str = Field(default=DEFAULT_BINARY, min_length=1, description="Artifact file name")
    target_dir: str = Field(default="target", min_length=1, description="Build output root")
    extra_args: list[str] = Field(default_factory=list, description="Extra build arguments")

    @field_validator("binary")
    @classmethod
    def binary_must_be_file_name(cls, v: str) -> str:
        """Validate that binary is a bare file name."""
        if "/" in v or v in (".", ".."):
            msg = f"binary must be a file name, not a path: {v!r}"
            raise ValueError(msg)
        return v

    @property
    def profile_args(self) -> list[str]:
        """Arguments selecting the build profile."""
        if self.profile == "release":
            return ["--release"]
        if self.profile == "dev":
            return []
        return ["--profile", self.profile]

    @property
    def profile_dir(self) -> str:
        """Directory name the profile's output lands in."""
        return "debug" if self.profile == "dev" else self.profile

    @property
    def artifact_path(self) -> Path:
        """Local path of the built executable."""
        return Path(self.target_dir) / self.target / self.profile_dir / self.binary


class RemoteConfig(BaseModel):
    """Configuration for the transfer and activation steps.

    Attributes:
        host: SSH host alias, resolved by the user's SSH configuration
        upload_dir: Remote directory the artifact is copied into
        service_dir: Remote directory the live service runs from
        ssh: SSH client executable
        scp: SCP client executable
        elevate: Privilege escalation command used for the move
        tty: Force pseudo-terminal allocation so elevation can prompt
        backup: Keep the previous service binary as ``<binary>.bak``
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    host: str = Field(default=DEFAULT_HOST, min_length=1, description="SSH host alias")
    upload_dir: str = Field(default="~", min_length=1, description="Remote upload directory")
    service_dir: str = Field(
        default=DEFAULT_SERVICE_DIR, min_length=1, description="Remote service directory"
    )
    ssh: str = Field(default="ssh", min_length=1, description="SSH client executable")
    scp: str = Field(default="scp", min_length=1, description="SCP client executable")
    elevate: str = Field(default="sudo", description="Privilege escalation command")
    tty: bool = Field(default=True, description="Allocate a TTY for the remote session")
    backup: bool = Field(default=False, description="Back up the previous service binary")

    @field_validator("host")
    @classmethod
    def host_must_not_be_option(cls, v: str) -> str:
        """Validate that host cannot be mistaken for a command-line option."""
        if v.startswith("-"):
            msg = f"host must not start with '-': {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("service_dir")
    @classmethod
    def service_dir_is_directory(cls, v: str) -> str:
        """Ensure service_dir ends in a slash.

        `mv` then fails when the directory is missing instead of
        renaming the binary to the directory's path.
        """
        return v if v.endswith("/") else f"{v}/"

    def uploaded_path(self, binary: str) -> str:
        """Remote path of the artifact after transfer."""
        return posixpath.join(self.upload_dir, binary)

    def service_path(self, binary: str) -> str:
        """Remote path of the live service binary."""
        return posixpath.join(self.service_dir, binary)


class DeployConfig(BaseModel):
    """Complete deployment configuration.

    Attributes:
        build: Build step configuration
        remote: Transfer and activation configuration
        echo_commands: Print each command before it runs

    Example:
        >>> config = DeployConfig()
        >>> str(config.build.artifact_path)
        'target/x86_64-unknown-linux-musl/release/hellquotes-bot'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    build: BuildConfig = Field(default_factory=BuildConfig, description="Build config")
    remote: RemoteConfig = Field(default_factory=RemoteConfig, description="Remote config")
    echo_commands: bool = Field(default=True, description="Echo commands before running")

    @classmethod
    def from_yaml(cls, path: str | Path) -> DeployConfig:
        """Load and validate DeployConfig from a YAML file.

        An empty file yields the defaults.

        Args:
            path: Path to binship.yaml.

        Returns:
            Validated DeployConfig instance.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ConfigurationError: If YAML syntax or schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with path.open("r") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                "Invalid YAML",
                file_path=str(path),
                internal_details=str(e),
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a mapping",
                file_path=str(path),
            )

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            field_errors = [
                (".".join(str(x) for x in err["loc"]), err["msg"]) for err in e.errors()
            ]
            raise ConfigurationError(
                "Invalid configuration",
                file_path=str(path),
                field_errors=field_errors,
                internal_details=str(e),
            ) from e

    @classmethod
    def load(cls, path: str | Path | None = None) -> DeployConfig:
        """Load configuration, falling back to defaults.

        With no explicit path, ``./binship.yaml`` is used when it exists
        and the defaults otherwise. An explicit path must exist.

        Raises:
            FileNotFoundError: If an explicit path doesn't exist.
            ConfigurationError: If the file is invalid.
        """
        if path is not None:
            return cls.from_yaml(path)
        default_path = Path(DEFAULT_CONFIG_FILENAME)
        if default_path.exists():
            return cls.from_yaml(default_path)
        return cls()

    def with_overrides(self, **overrides: Any) -> DeployConfig:
        """Return a copy with non-None overrides applied.

        Recognised keys: host, target, binary, service_dir, backup.
        """
        build_updates = {
            key: overrides[key]
            for key in ("target", "binary")
            if overrides.get(key) is not None
        }
        remote_updates = {
            key: overrides[key]
            for key in ("host", "service_dir", "backup")
            if overrides.get(key) is not None
        }
        data = self.model_dump()
        data["build"].update(build_updates)
        data["remote"].update(remote_updates)
        return DeployConfig.model_validate(data)
