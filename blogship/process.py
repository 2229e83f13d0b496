"""Child-process invocation for Blogship.

Every stage of the pipeline is a blocking call to an external tool. The tool's
stdout and stderr are inherited so its messages reach the operator verbatim;
only the exit code is inspected here.

Key objects:
- CommandError: A command exited non-zero; carries the exit code.
- ExecutableNotFoundError: The executable could not be started.
- run_command: Run a command and return its exit code.
- check_command: Run a command and raise CommandError on failure.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path


class CommandError(Exception):
    """External command failure with its exit code.

    Attributes:
        command: The argument list that was executed.
        returncode: Exit code reported by the command.
    """

    def __init__(self, command: Sequence[str], returncode: int):
        self.command = list(command)
        self.returncode = returncode
        super().__init__(f"{' '.join(self.command)} exited with status {returncode}")


class ExecutableNotFoundError(CommandError):
    """Raised when an executable is missing; mirrors the shell's status 127."""

    def __init__(self, command: Sequence[str]):
        super().__init__(command, 127)

    def __str__(self) -> str:
        return f"{self.command[0]}: command not found"


def run_command(args: Sequence[str], cwd: Path) -> int:
    """Run a command in ``cwd`` and return its exit code.

    Output is not captured.

    Raises:
        ExecutableNotFoundError: If the executable does not exist.
    """
    try:
        result = subprocess.run(list(args), cwd=cwd, check=False)
    except FileNotFoundError:
        raise ExecutableNotFoundError(args) from None
    return result.returncode


def check_command(args: Sequence[str], cwd: Path) -> None:
    """Run a command in ``cwd`` and raise CommandError if it fails."""
    returncode = run_command(args, cwd)
    if returncode != 0:
        raise CommandError(args, returncode)
