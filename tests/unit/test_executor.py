"""Unit tests for binship.executor."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

from binship.executor import (
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    CommandExecutor,
    format_command,
)


class TestFormatCommand:
    """Tests for format_command."""

    def test_plain_arguments(self) -> None:
        assert format_command(["scp", "a", "titanic:~"]) == "scp a titanic:~"

    def test_remote_command_is_quoted(self) -> None:
        rendered = format_command(["ssh", "-t", "titanic", "sudo mv ~/bot /srv/bot/"])
        assert rendered == "ssh -t titanic 'sudo mv ~/bot /srv/bot/'"

    def test_home_relative_path_unquoted(self) -> None:
        assert format_command(["ssh", "titanic", "~/bot"]) == "ssh titanic ~/bot"

    def test_empty_argument_quoted(self) -> None:
        assert format_command(["scp", ""]) == "scp ''"


class TestCommandExecutor:
    """Tests for CommandExecutor.run."""

    def test_returns_zero_on_success(self) -> None:
        executor = CommandExecutor(echo=False)
        assert executor.run([sys.executable, "-c", "pass"]) == 0

    def test_returns_exit_status(self) -> None:
        executor = CommandExecutor(echo=False)
        assert executor.run([sys.executable, "-c", "raise SystemExit(3)"]) == 3

    def test_missing_executable_is_127(self) -> None:
        lines: list[str] = []
        executor = CommandExecutor(echo=False, writer=lines.append)

        assert executor.run(["binship-no-such-tool-xyz"]) == EXIT_NOT_FOUND
        assert "command not found" in lines[-1]

    def test_path_through_a_file_is_127(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("")
        executor = CommandExecutor(echo=False, writer=lambda line: None)

        assert executor.run([str(not_a_dir / "cargo")]) == EXIT_NOT_FOUND

    def test_file_without_exec_bit_is_126(self, tmp_path: Path) -> None:
        tool = tmp_path / "cargo"
        tool.write_text("#!/bin/sh\nexit 0\n")
        tool.chmod(stat.S_IRUSR | stat.S_IWUSR)
        lines: list[str] = []
        executor = CommandExecutor(echo=False, writer=lines.append)

        assert executor.run([str(tool)]) == EXIT_NOT_EXECUTABLE
        assert str(tool) in lines[-1]

    def test_unrecognised_executable_format_is_126(self, tmp_path: Path) -> None:
        tool = tmp_path / "cargo"
        tool.write_bytes(b"\x00\x01\x02 not a program\n")
        tool.chmod(0o755)
        executor = CommandExecutor(echo=False, writer=lambda line: None)

        assert executor.run([str(tool)]) == EXIT_NOT_EXECUTABLE

    def test_killed_by_signal_is_128_plus_signal(self) -> None:
        executor = CommandExecutor(echo=False)
        script = "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"

        assert executor.run([sys.executable, "-c", script]) == 143

    def test_echoes_command_before_running(self) -> None:
        lines: list[str] = []
        executor = CommandExecutor(echo=True, writer=lines.append)

        executor.run([sys.executable, "-c", "pass"])

        assert lines[0].startswith("+ ")
        assert lines[0].endswith("-c pass")

    def test_no_echo_when_disabled(self) -> None:
        lines: list[str] = []
        executor = CommandExecutor(echo=False, writer=lines.append)

        executor.run([sys.executable, "-c", "pass"])

        assert lines == []
