"""Preflight checks.

Verifies that the local tools a deployment needs are installed and,
optionally, that the remote host accepts a non-interactive SSH login.
Each check is reported as a StepResult so the run report renders it like
a deployment step.
"""

from __future__ import annotations

import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from binship.models import DeployResult, StepResult, StepStatus

if TYPE_CHECKING:
    from binship.config import DeployConfig

logger = structlog.get_logger(__name__)

DEFAULT_SSH_TIMEOUT = 10


class BaseCheck(ABC):
    """Base class for preflight checks.

    Provides timing, logging and error handling around ``_execute``.
    Any exception raised by ``_execute`` becomes a FAILED result.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._log = logger.bind(check=name)

    def run(self) -> StepResult:
        start_time = time.monotonic()
        timestamp = datetime.now(UTC)
        self._log.info("check_started")

        try:
            status, message = self._execute()
        except (OSError, subprocess.SubprocessError) as e:
            status = StepStatus.FAILED
            message = f"Check failed with error: {type(e).__name__}: {e}"

        duration_ms = int((time.monotonic() - start_time) * 1000)
        self._log.info("check_completed", status=status.value, duration_ms=duration_ms)
        return StepResult(
            name=self.name,
            command=self.command(),
            status=status,
            message=message,
            duration_ms=duration_ms,
            timestamp=timestamp,
        )

    def command(self) -> list[str]:
        return []

    @abstractmethod
    def _execute(self) -> tuple[StepStatus, str]:
        """Perform the check and return its status and message."""


class ToolCheck(BaseCheck):
    """Passes when an executable resolves on PATH."""

    def __init__(self, executable: str) -> None:
        super().__init__(name=f"tool:{executable}")
        self.executable = executable

    def _execute(self) -> tuple[StepStatus, str]:
        resolved = shutil.which(self.executable)
        if resolved is None:
            return StepStatus.FAILED, f"{self.executable} not found on PATH"
        return StepStatus.PASSED, resolved


class SSHCheck(BaseCheck):
    """Passes when ``ssh <host> true`` succeeds without prompting."""

    def __init__(self, host: str, ssh: str = "ssh", timeout_seconds: int = DEFAULT_SSH_TIMEOUT):
        super().__init__(name=f"ssh:{host}")
        self.host = host
        self.ssh = ssh
        self.timeout_seconds = timeout_seconds

    def command(self) -> list[str]:
        return [
            self.ssh,
            "-o",
            "BatchMode=yes",
            "-o",
            f"ConnectTimeout={self.timeout_seconds}",
            self.host,
            "true",
        ]

    def _execute(self) -> tuple[StepStatus, str]:
        try:
            completed = subprocess.run(
                self.command(),
                capture_output=True,
                text=True,
                # ConnectTimeout covers the TCP connect only
                timeout=self.timeout_seconds * 2,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return StepStatus.FAILED, f"No answer from {self.host} within {self.timeout_seconds}s"

        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout).strip().splitlines()
            reason = detail[-1] if detail else f"exit status {completed.returncode}"
            return StepStatus.FAILED, f"Cannot log in to {self.host}: {reason}"
        return StepStatus.PASSED, f"Logged in to {self.host}"


def build_checks(
    config: DeployConfig,
    ssh: bool = True,
    timeout_seconds: int = DEFAULT_SSH_TIMEOUT,
) -> list[BaseCheck]:
    """Return the checks for a configuration, in execution order."""
    checks: list[BaseCheck] = [
        ToolCheck(config.build.tool),
        ToolCheck(config.remote.scp),
        ToolCheck(config.remote.ssh),
    ]
    if ssh:
        checks.append(
            SSHCheck(
                host=config.remote.host,
                ssh=config.remote.ssh,
                timeout_seconds=timeout_seconds,
            )
        )
    return checks


def run_preflight(
    config: DeployConfig,
    ssh: bool = True,
    timeout_seconds: int = DEFAULT_SSH_TIMEOUT,
    fail_fast: bool = False,
) -> DeployResult:
    """Run preflight checks for a configuration.

    Returns:
        DeployResult with one StepResult per check that ran.
    """
    log = logger.bind(component="preflight")
    start_time = time.monotonic()
    started_at = datetime.now(UTC)
    results: list[StepResult] = []

    for check in build_checks(config, ssh=ssh, timeout_seconds=timeout_seconds):
        result = check.run()
        results.append(result)
        if fail_fast and result.failed:
            log.warning("fail_fast_triggered", check=check.name)
            break

    overall = StepStatus.FAILED if any(r.failed for r in results) else StepStatus.PASSED
    log.info("preflight_completed", overall_status=overall.value)
    return DeployResult(
        steps=results,
        overall_status=overall,
        started_at=started_at,
        finished_at=datetime.now(UTC),
        total_duration_ms=int((time.monotonic() - start_time) * 1000),
    )
