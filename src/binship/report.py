"""Run report formatters.

Rich table and JSON output for deployment, plan and preflight results.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from binship.executor import format_command
from binship.models import DeployResult, StepResult, StepStatus


def _status_icon(status: StepStatus) -> str:
    """Get icon for step status."""
    icons = {
        StepStatus.PASSED: "✓",
        StepStatus.FAILED: "✗",
        StepStatus.SKIPPED: "-",
        StepStatus.PLANNED: "•",
    }
    return icons.get(status, "?")


def _status_color(status: StepStatus) -> str:
    """Get color for step status."""
    colors = {
        StepStatus.PASSED: "green",
        StepStatus.FAILED: "red",
        StepStatus.SKIPPED: "dim",
        StepStatus.PLANNED: "cyan",
    }
    return colors.get(status, "white")


def format_result_table(
    result: DeployResult,
    console: Console | None = None,
    title: str = "Deployment",
) -> None:
    """Format a result as a Rich panel and table.

    Args:
        result: DeployResult to display
        console: Optional Rich console (creates one if not provided)
        title: Panel title
    """
    if console is None:
        console = Console()

    overall_color = _status_color(result.overall_status)
    header_text = Text()
    header_text.append(f"Status: {_status_icon(result.overall_status)} ", style=overall_color)
    header_text.append(result.overall_status.value.upper(), style=f"bold {overall_color}")
    if result.overall_status != StepStatus.PLANNED:
        header_text.append(f"\nExit status: {result.exit_code}")
    if result.total_duration_ms > 0:
        header_text.append(f"\nDuration: {result.total_duration_ms}ms")

    console.print(Panel(header_text, title=f"[bold]{title}[/bold]"))

    table = Table(show_header=True, header_style="bold")
    table.add_column("", width=1, justify="center")
    table.add_column("Step", min_width=10)
    table.add_column("Command", min_width=30, overflow="fold")
    table.add_column("Exit", justify="right", width=5)
    table.add_column("Duration", justify="right", width=10)

    for step in result.steps:
        color = _status_color(step.status)
        table.add_row(
            _status_icon(step.status),
            Text(step.name, style=color),
            Text(format_command(step.command) or "-"),
            "-" if step.exit_code is None else str(step.exit_code),
            f"{step.duration_ms}ms" if step.duration_ms > 0 else "-",
        )

    console.print(table)

    failed = result.failed_step
    if failed is not None:
        console.print()
        label = failed.error_type or failed.name
        console.print(f"[bold red]{label}[/bold red]: {failed.message}")


def format_result_json(result: DeployResult, pretty: bool = True) -> str:
    """Format a result as JSON.

    Args:
        result: DeployResult to format
        pretty: Whether to use indentation

    Returns:
        JSON string representation
    """
    data = _result_to_dict(result)
    if pretty:
        return json.dumps(data, indent=2, default=str)
    return json.dumps(data, default=str)


def _result_to_dict(result: DeployResult) -> dict[str, Any]:
    """Convert DeployResult to dictionary for JSON serialization."""
    return {
        "status": result.overall_status.value,
        "passed": result.passed,
        "exit_code": result.exit_code,
        "duration_ms": result.total_duration_ms,
        "started_at": result.started_at.isoformat() if result.started_at else None,
        "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        "steps": [_step_to_dict(step) for step in result.steps],
    }


def _step_to_dict(step: StepResult) -> dict[str, Any]:
    """Convert StepResult to dictionary for JSON serialization."""
    return {
        "name": step.name,
        "status": step.status.value,
        "command": step.command,
        "exit_code": step.exit_code,
        "error_type": step.error_type,
        "message": step.message,
        "duration_ms": step.duration_ms,
        "timestamp": step.timestamp.isoformat() if step.timestamp else None,
    }


def print_result(
    result: DeployResult,
    output_format: str = "table",
    console: Console | None = None,
    title: str = "Deployment",
) -> None:
    """Print a result in the specified format ("table" or "json")."""
    if console is None:
        console = Console()

    if output_format == "json":
        # Raw JSON, no Rich markup, so the output stays parseable
        console.file.write(format_result_json(result, pretty=True) + "\n")
    else:
        format_result_table(result, console, title=title)
