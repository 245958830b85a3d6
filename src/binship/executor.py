"""External command execution.

Commands run through the system tools (``cargo``, ``scp``, ``ssh``) so the
user's SSH config, agent and keys are reused as-is. Output is inherited,
never captured, so the tools' own messages reach the terminal verbatim.
"""

from __future__ import annotations

import errno
import re
import shlex
import subprocess
import sys
from collections.abc import Callable, Sequence

import structlog

logger = structlog.get_logger(__name__)

# Shell conventions for commands that cannot be started
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127

# Tokens a shell passes through unchanged, `~` included
_SAFE_TOKEN = re.compile(r"[\w@%+=:,./~-]+", re.ASCII)


def format_command(argv: Sequence[str]) -> str:
    """Render argv as a copy-pasteable shell command line."""
    return " ".join(arg if _SAFE_TOKEN.fullmatch(arg) else shlex.quote(arg) for arg in argv)


def _echo_to_stderr(line: str) -> None:
    print(line, file=sys.stderr, flush=True)


class CommandExecutor:
    """Run commands to completion and report their exit status.

    Attributes:
        echo: Print each command before it runs, prefixed with ``+``
    """

    def __init__(
        self,
        echo: bool = True,
        writer: Callable[[str], None] | None = None,
    ) -> None:
        self.echo = echo
        self._writer = writer or _echo_to_stderr
        self._log = logger.bind(component="executor")

    def run(self, argv: Sequence[str]) -> int:
        """Run argv, blocking until it exits.

        There is no timeout. KeyboardInterrupt propagates to the caller
        once the child has been interrupted.

        Returns:
            The command's exit status. 127 if the executable is missing,
            126 if it cannot be executed, 128+N if killed by signal N.
        """
        if self.echo:
            self._writer(f"+ {format_command(argv)}")

        self._log.debug("command_started", argv=list(argv))
        try:
            completed = subprocess.run(list(argv), check=False)
        except OSError as e:
            if e.errno in (errno.ENOENT, errno.ENOTDIR):
                self._log.error("command_not_found", executable=argv[0])
                self._writer(f"binship: {argv[0]}: command not found")
                return EXIT_NOT_FOUND
            self._log.error("command_not_executable", executable=argv[0], error=str(e))
            self._writer(f"binship: {argv[0]}: {e.strerror or e}")
            return EXIT_NOT_EXECUTABLE

        returncode = completed.returncode
        if returncode < 0:
            # Killed by signal N; report it the way a shell does
            returncode = 128 - returncode

        self._log.debug("command_finished", argv=list(argv), returncode=returncode)
        return returncode
