"""Safe command execution for version probes.

All executables are invoked with an argument list (never through a shell
string) and always with a timeout. Standard error is folded into the
captured output because many tools print their version banner there.
Bytes that are not valid in the locale encoding are replaced, not raised.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from .constants import TIMEOUT_COMMAND

logger = logging.getLogger(__name__)


class CommandNotFound(OSError):
    """Raised when the executable does not exist."""
    pass


class CommandFailed(RuntimeError):
    """Raised when an executable could not run to a successful exit."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    output: str


def run_command(cmd: list[str], timeout: Optional[float] = None) -> CommandResult:
    """Run a command and return its combined stdout and stderr.

    Args:
        cmd: Command and arguments as a list
        timeout: Timeout in seconds (defaults to TIMEOUT_COMMAND)

    Returns:
        CommandResult with the exit code and combined output

    Raises:
        CommandNotFound: If the executable is missing
        CommandFailed: On timeout, spawn error or non-zero exit code
    """
    timeout = TIMEOUT_COMMAND if timeout is None else timeout
    logger.debug("Running %s (timeout %ss)", cmd, timeout)

    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandNotFound(f"{cmd[0]} not found") from e
    except subprocess.TimeoutExpired as e:
        raise CommandFailed(f"{cmd[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise CommandFailed(f"{cmd[0]} could not be started: {e}") from e

    output = result.stdout or ""
    if result.returncode != 0:
        raise CommandFailed(
            f"{cmd[0]} exited with code {result.returncode}",
            output=output,
        )

    return CommandResult(returncode=result.returncode, output=output)
