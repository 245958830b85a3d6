"""Shared pytest fixtures for binship tests.

Provides CliRunner fixtures, a recording command executor and
configurations whose artifact lives under tmp_path.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from binship.config import BuildConfig, DeployConfig


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> Generator[None, None, None]:
    """Configure structlog to output to stdout for test capture.

    Also restores the root logger afterwards, since CLI invocations
    reconfigure it against CliRunner's temporary streams.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class RecordingExecutor:
    """CommandExecutor stand-in that records argv instead of running it.

    Exit statuses are looked up by executable name; unknown ones exit 0.
    """

    def __init__(self, returncodes: dict[str, int] | None = None) -> None:
        self.returncodes = dict(returncodes or {})
        self.calls: list[list[str]] = []
        self.echo = False

    def run(self, argv: Sequence[str]) -> int:
        self.calls.append(list(argv))
        return self.returncodes.get(argv[0], 0)

    @property
    def executables(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    """Return an executor where every command succeeds."""
    return RecordingExecutor()


@pytest.fixture
def deploy_config(tmp_path: Path) -> DeployConfig:
    """Return the default configuration with its build output under tmp_path."""
    return DeployConfig(build=BuildConfig(target_dir=str(tmp_path / "target")))


@pytest.fixture
def built_artifact(deploy_config: DeployConfig) -> Path:
    """Create the artifact the build step is expected to leave behind."""
    artifact = deploy_config.build.artifact_path
    artifact.parent.mkdir(parents=True, exist_ok=True)
    artifact.write_bytes(b"\x7fELF binary")
    return artifact


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def make_executor() -> type[RecordingExecutor]:
    """Factory for executors with chosen exit statuses.

    Example:
        executor = make_executor({"scp": 1})
    """
    return RecordingExecutor
