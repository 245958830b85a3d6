"""Deployment result models.

Models for representing the outcome of each step and of a whole run.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
    """Status of a deployment step.

    Attributes:
        PASSED: Step ran and its command exited 0
        FAILED: Step ran and failed
        SKIPPED: Step never ran because an earlier step failed
        PLANNED: Step was only planned (nothing executed)
    """

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    PLANNED = "planned"


class StepResult(BaseModel):
    """Result of a single deployment step.

    Attributes:
        name: Step name ("build", "transfer", "activate")
        command: The argv the step runs
        status: Step status
        exit_code: Exit status of the command (None if it never ran)
        error_type: Failure class name (BuildFailed, TransferFailed, ActivationFailed)
        message: Human-readable result message
        duration_ms: Step duration in milliseconds
        timestamp: When the step started

    Example:
        >>> result = StepResult(
        ...     name="build",
        ...     command=["cargo", "build"],
        ...     status=StepStatus.PASSED,
        ...     exit_code=0,
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Step name")
    command: list[str] = Field(default_factory=list, description="Command argv")
    status: StepStatus = Field(..., description="Step status")
    exit_code: int | None = Field(default=None, description="Command exit status")
    error_type: str | None = Field(default=None, description="Failure class name")
    message: str = Field(default="", description="Result message")
    duration_ms: int = Field(default=0, ge=0, description="Duration in milliseconds")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Step timestamp"
    )

    @property
    def passed(self) -> bool:
        """Check if the step completed successfully."""
        return self.status == StepStatus.PASSED

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return self.status == StepStatus.FAILED


class DeployResult(BaseModel):
    """Aggregated result of a deployment run.

    Attributes:
        steps: Step results in execution order
        overall_status: Overall run status
        started_at: When the run started
        finished_at: When the run finished
        total_duration_ms: Total duration in milliseconds
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    steps: list[StepResult] = Field(default_factory=list, description="Step results")
    overall_status: StepStatus = Field(default=StepStatus.PASSED, description="Overall status")
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Start time"
    )
    finished_at: datetime | None = Field(default=None, description="End time")
    total_duration_ms: int = Field(default=0, ge=0, description="Total duration")

    @property
    def passed(self) -> bool:
        """Check if every step passed."""
        return self.overall_status == StepStatus.PASSED

    @property
    def failed(self) -> bool:
        """Check if a step failed."""
        return self.overall_status == StepStatus.FAILED

    @property
    def failed_step(self) -> StepResult | None:
        """The first failing step, if any."""
        return next((s for s in self.steps if s.failed), None)

    @property
    def exit_code(self) -> int:
        """Process exit status for the run.

        0 unless a step failed, in which case the failing step's status.
        """
        step = self.failed_step
        if step is None:
            return 0
        return step.exit_code or 1
