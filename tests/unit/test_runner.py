"""Unit tests for the deployment runner.

Covers the fail-fast ordering of build, transfer and activate.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from binship.config import DeployConfig
from binship.models import StepStatus
from binship.runner import DeployRunner, plan_deploy, run_deploy


class TestDeployRunner:
    """Tests for DeployRunner."""

    def test_initialization_uses_config_echo(self) -> None:
        config = DeployConfig(echo_commands=False)
        runner = DeployRunner(config)

        assert runner.config == config
        assert runner.executor.echo is False

    def test_all_steps_pass(
        self, deploy_config: DeployConfig, built_artifact: Path, recording_executor
    ) -> None:
        result = DeployRunner(deploy_config, executor=recording_executor).run()

        assert result.passed is True
        assert result.exit_code == 0
        assert [s.status for s in result.steps] == [StepStatus.PASSED] * 3
        assert recording_executor.executables == ["cargo", "scp", "ssh"]
        assert result.finished_at is not None

    @pytest.mark.parametrize(
        ("failing", "exit_code", "ran", "error_type"),
        [
            ("cargo", 101, ["cargo"], "BuildFailed"),
            ("scp", 1, ["cargo", "scp"], "TransferFailed"),
            ("ssh", 255, ["cargo", "scp", "ssh"], "ActivationFailed"),
        ],
    )
    def test_failure_short_circuits(
        self,
        deploy_config: DeployConfig,
        built_artifact: Path,
        make_executor,
        failing: str,
        exit_code: int,
        ran: list[str],
        error_type: str,
    ) -> None:
        executor = make_executor({failing: exit_code})

        result = DeployRunner(deploy_config, executor=executor).run()

        assert executor.executables == ran
        assert result.failed is True
        assert result.exit_code == exit_code
        assert result.failed_step is not None
        assert result.failed_step.error_type == error_type
        skipped = [s for s in result.steps if s.status == StepStatus.SKIPPED]
        assert len(skipped) == 3 - len(ran)
        assert len(result.steps) == 3

    def test_missing_artifact_never_uploads(
        self, deploy_config: DeployConfig, recording_executor
    ) -> None:
        result = DeployRunner(deploy_config, executor=recording_executor).run()

        assert recording_executor.executables == ["cargo"]
        assert result.exit_code == 1
        assert result.steps[0].error_type == "BuildFailed"

    def test_rerun_issues_identical_commands(
        self, deploy_config: DeployConfig, built_artifact: Path, make_executor
    ) -> None:
        first = make_executor()
        second = make_executor()

        run_deploy(deploy_config, executor=first)
        run_deploy(deploy_config, executor=second)

        assert first.calls == second.calls

    def test_interrupt_propagates(self, deploy_config: DeployConfig) -> None:
        class InterruptingExecutor:
            echo = False

            def run(self, argv: list[str]) -> int:
                raise KeyboardInterrupt

        runner = DeployRunner(deploy_config, executor=InterruptingExecutor())  # type: ignore[arg-type]
        with pytest.raises(KeyboardInterrupt):
            runner.run()


class TestPlanDeploy:
    """Tests for plan_deploy."""

    def test_plan_lists_steps_without_running(self, deploy_config: DeployConfig) -> None:
        result = plan_deploy(deploy_config)

        assert [s.name for s in result.steps] == ["build", "transfer", "activate"]
        assert all(s.status == StepStatus.PLANNED for s in result.steps)
        assert result.overall_status == StepStatus.PLANNED
        assert result.exit_code == 0
