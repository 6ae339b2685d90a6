"""Shell execution utilities.

Provides subprocess execution with a bounded timeout.
"""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Raw standard output from the command.
        stderr: Standard error from the command, decoded.
        returncode: Exit code of the command.
    """

    stdout: bytes
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
) -> CommandResult:
    """Execute a command and return its captured output.

    Standard output is returned as bytes; decoding is left to the parser.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        check=False,
        timeout=timeout,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr.decode("utf-8", errors="replace"),
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name or absolute path to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
