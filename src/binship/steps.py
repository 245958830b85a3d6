"""Deployment steps.

Each step knows the command it runs and the error it raises on failure:

- BuildStep: ``cargo build --target <triple> --release`` (BuildFailed)
- TransferStep: ``scp <artifact> <host>:<upload_dir>`` (TransferFailed)
- ActivationStep: ``ssh -t <host> '<elevate> mv ...'`` (ActivationFailed)
"""

from __future__ import annotations

import shlex
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

import structlog

from binship.errors import (
    ActivationFailed,
    BuildFailed,
    StepFailedError,
    TransferFailed,
)
from binship.models import StepResult, StepStatus

if TYPE_CHECKING:
    from binship.config import DeployConfig
    from binship.executor import CommandExecutor

logger = structlog.get_logger(__name__)


def remote_path_arg(path: str) -> str:
    """Quote a remote path for the remote shell, keeping a leading ``~`` live."""
    if path == "~":
        return path
    if path.startswith("~/"):
        return "~/" + shlex.quote(path[2:])
    return shlex.quote(path)


class BaseStep(ABC):
    """Base class for deployment steps.

    Provides timing, logging and failure signalling around a single
    external command.

    Attributes:
        name: Step name for identification
        failure: Exception class raised when the step fails
    """

    name: ClassVar[str]
    failure: ClassVar[type[StepFailedError]]

    def __init__(self, config: DeployConfig) -> None:
        self.config = config
        self._log = logger.bind(step=self.name)

    @abstractmethod
    def command(self) -> list[str]:
        """Return the argv this step runs."""

    def verify(self) -> None:
        """Check the step's postcondition after a zero exit.

        Raises:
            StepFailedError: If the postcondition does not hold.
        """

    def plan(self) -> StepResult:
        """Describe the step without running anything."""
        return StepResult(name=self.name, command=self.command(), status=StepStatus.PLANNED)

    def run(self, executor: CommandExecutor) -> StepResult:
        """Run the step's command.

        Returns:
            StepResult with status PASSED.

        Raises:
            StepFailedError: The step's ``failure`` class, carrying the
                command's exit status.
        """
        argv = self.command()
        start_time = time.monotonic()
        timestamp = datetime.now(UTC)

        self._log.info("step_started", argv=argv)

        returncode = executor.run(argv)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        if returncode != 0:
            self._log.error("step_failed", returncode=returncode, duration_ms=duration_ms)
            raise self.failure(self.name, returncode)

        self.verify()

        self._log.info("step_completed", duration_ms=duration_ms)
        return StepResult(
            name=self.name,
            command=argv,
            status=StepStatus.PASSED,
            exit_code=0,
            message=self.success_message(),
            duration_ms=duration_ms,
            timestamp=timestamp,
        )

    def success_message(self) -> str:
        return ""


class BuildStep(BaseStep):
    """Compile the project for the configured target triple and profile."""

    name = "build"
    failure = BuildFailed

    def command(self) -> list[str]:
        build = self.config.build
        return [
            build.tool,
            "build",
            "--target",
            build.target,
            *build.profile_args,
            *build.extra_args,
        ]

    def verify(self) -> None:
        artifact = self.config.build.artifact_path
        if not artifact.is_file():
            self._log.error("artifact_missing", path=str(artifact))
            raise BuildFailed(
                self.name,
                1,
                f"Build succeeded but no artifact was found at {artifact}",
            )

    def success_message(self) -> str:
        return f"Built {self.config.build.artifact_path}"


class TransferStep(BaseStep):
    """Copy the artifact into the remote upload directory."""

    name = "transfer"
    failure = TransferFailed

    def command(self) -> list[str]:
        remote = self.config.remote
        return [
            remote.scp,
            str(self.config.build.artifact_path),
            f"{remote.host}:{remote.upload_dir}",
        ]

    def success_message(self) -> str:
        remote = self.config.remote
        return f"Copied to {remote.host}:{remote.uploaded_path(self.config.build.binary)}"


class ActivationStep(BaseStep):
    """Move the uploaded artifact into the service directory, elevated.

    The file already at the service path is overwritten. With
    ``remote.backup`` it is first copied to ``<binary>.bak``.
    """

    name = "activate"
    failure = ActivationFailed

    def remote_command(self) -> str:
        """The command line executed by the remote shell."""
        remote = self.config.remote
        binary = self.config.build.binary
        elevate = f"{remote.elevate} " if remote.elevate else ""

        source = remote_path_arg(remote.uploaded_path(binary))
        move = f"{elevate}mv {source} {remote_path_arg(remote.service_dir)}"
        if not remote.backup:
            return move

        live = remote_path_arg(remote.service_path(binary))
        backup = remote_path_arg(remote.service_path(binary) + ".bak")
        return f"if [ -e {live} ]; then {elevate}cp -p {live} {backup}; fi && {move}"

    def command(self) -> list[str]:
        remote = self.config.remote
        argv = [remote.ssh]
        if remote.tty:
            argv.append("-t")
        argv += [remote.host, self.remote_command()]
        return argv

    def success_message(self) -> str:
        remote = self.config.remote
        return f"Activated {remote.host}:{remote.service_path(self.config.build.binary)}"


def build_steps(config: DeployConfig) -> list[BaseStep]:
    """Return the deployment steps in execution order."""
    return [BuildStep(config), TransferStep(config), ActivationStep(config)]
