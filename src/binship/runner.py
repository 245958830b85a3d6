"""Deployment runner.

Runs the build, transfer and activation steps in order and stops at the
first failure. Nothing is retried or rolled back.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from binship.errors import StepFailedError
from binship.executor import CommandExecutor
from binship.models import DeployResult, StepResult, StepStatus
from binship.steps import BaseStep, build_steps

if TYPE_CHECKING:
    from binship.config import DeployConfig

logger = structlog.get_logger(__name__)


class DeployRunner:
    """Orchestrates deployment step execution.

    Attributes:
        config: Deployment configuration
        executor: Runs each step's command

    Example:
        >>> runner = DeployRunner(DeployConfig())
        >>> result = runner.run()
        >>> result.exit_code
        0
    """

    def __init__(
        self,
        config: DeployConfig,
        executor: CommandExecutor | None = None,
    ) -> None:
        self.config = config
        self.executor = executor or CommandExecutor(echo=config.echo_commands)
        self._log = logger.bind(component="deploy_runner")

    def steps(self) -> list[BaseStep]:
        return build_steps(self.config)

    def run(self) -> DeployResult:
        """Run every step, short-circuiting on the first failure.

        Returns:
            DeployResult whose ``exit_code`` is 0 on success or the
            failing step's exit status.
        """
        start_time = time.monotonic()
        started_at = datetime.now(UTC)
        results: list[StepResult] = []

        steps = self.steps()
        self._log.info(
            "deploy_started",
            host=self.config.remote.host,
            artifact=str(self.config.build.artifact_path),
        )

        failed_at: int | None = None
        for index, step in enumerate(steps):
            step_started = time.monotonic()
            try:
                results.append(step.run(self.executor))
            except StepFailedError as e:
                results.append(
                    StepResult(
                        name=step.name,
                        command=step.command(),
                        status=StepStatus.FAILED,
                        exit_code=e.exit_code,
                        error_type=type(e).__name__,
                        message=e.user_message,
                        duration_ms=int((time.monotonic() - step_started) * 1000),
                    )
                )
                self._log.warning(
                    "fail_fast_triggered",
                    step=step.name,
                    error_type=type(e).__name__,
                    exit_code=e.exit_code,
                )
                failed_at = index
                break

        if failed_at is not None:
            for step in steps[failed_at + 1 :]:
                results.append(
                    StepResult(
                        name=step.name,
                        command=step.command(),
                        status=StepStatus.SKIPPED,
                        message="Not run: an earlier step failed",
                    )
                )

        finished_at = datetime.now(UTC)
        total_duration_ms = int((time.monotonic() - start_time) * 1000)
        overall_status = StepStatus.FAILED if failed_at is not None else StepStatus.PASSED

        self._log.info(
            "deploy_completed",
            overall_status=overall_status.value,
            total_duration_ms=total_duration_ms,
        )

        return DeployResult(
            steps=results,
            overall_status=overall_status,
            started_at=started_at,
            finished_at=finished_at,
            total_duration_ms=total_duration_ms,
        )

    def plan(self) -> DeployResult:
        """Describe every step without running any of them."""
        started_at = datetime.now(UTC)
        return DeployResult(
            steps=[step.plan() for step in self.steps()],
            overall_status=StepStatus.PLANNED,
            started_at=started_at,
            finished_at=started_at,
        )


def run_deploy(
    config: DeployConfig,
    executor: CommandExecutor | None = None,
) -> DeployResult:
    """Run a deployment with the given configuration.

    Example:
        >>> result = run_deploy(DeployConfig())
        >>> if not result.passed:
        ...     raise SystemExit(result.exit_code)
    """
    runner = DeployRunner(config, executor=executor)
    return runner.run()


def plan_deploy(config: DeployConfig) -> DeployResult:
    """Return the planned steps for a deployment without running anything."""
    return DeployRunner(config, executor=CommandExecutor(echo=False)).plan()
