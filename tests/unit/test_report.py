"""Unit tests for binship.report."""

from __future__ import annotations

import io
import json

from rich.console import Console

from binship.models import DeployResult, StepResult, StepStatus
from binship.report import format_result_json, format_result_table, print_result


def _failed_result() -> DeployResult:
    return DeployResult(
        steps=[
            StepResult(name="build", command=["cargo", "build"], status=StepStatus.PASSED, exit_code=0),
            StepResult(
                name="transfer",
                command=["scp", "bot", "titanic:~"],
                status=StepStatus.FAILED,
                exit_code=1,
                error_type="TransferFailed",
                message="Step 'transfer' failed with exit status 1",
            ),
            StepResult(name="activate", command=["ssh"], status=StepStatus.SKIPPED),
        ],
        overall_status=StepStatus.FAILED,
    )


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, no_color=True, width=120), buffer


class TestFormatResultJson:
    """Tests for JSON output."""

    def test_json_fields(self) -> None:
        data = json.loads(format_result_json(_failed_result()))

        assert data["status"] == "failed"
        assert data["passed"] is False
        assert data["exit_code"] == 1
        assert [s["status"] for s in data["steps"]] == ["passed", "failed", "skipped"]
        assert data["steps"][1]["error_type"] == "TransferFailed"
        assert data["steps"][1]["command"] == ["scp", "bot", "titanic:~"]

    def test_compact_json(self) -> None:
        assert "\n" not in format_result_json(_failed_result(), pretty=False)


class TestFormatResultTable:
    """Tests for table output."""

    def test_table_shows_steps_and_failure(self) -> None:
        console, buffer = _console()

        format_result_table(_failed_result(), console)

        output = buffer.getvalue()
        assert "FAILED" in output
        assert "transfer" in output
        assert "scp bot titanic:~" in output
        assert "TransferFailed" in output

    def test_plan_has_no_exit_status(self) -> None:
        console, buffer = _console()
        result = DeployResult(
            steps=[StepResult(name="build", command=["cargo"], status=StepStatus.PLANNED)],
            overall_status=StepStatus.PLANNED,
        )

        format_result_table(result, console, title="Deployment plan")

        output = buffer.getvalue()
        assert "Deployment plan" in output
        assert "Exit status" not in output


class TestPrintResult:
    """Tests for print_result."""

    def test_json_is_written_raw(self) -> None:
        console, buffer = _console()

        print_result(_failed_result(), output_format="json", console=console)

        assert json.loads(buffer.getvalue())["status"] == "failed"
