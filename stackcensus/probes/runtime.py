"""Probe for the Java runtime version.

The first non-empty line of `java --version` names the runtime and its
version ("openjdk 17.0.9 2023-10-17"). The caller may pass the vendor
package name seen in the installed-program inventory as a note.
"""

from typing import Optional

from ..utils.commands import CommandFailed, CommandNotFound, run_command
from .base import ProbeResult, VersionRecord
from .extractors import first_line_tokens

PROBE = "runtime"
DEFAULT_COMMAND = ["java", "--version"]


def scan(
    note: Optional[str] = None,
    command: Optional[list[str]] = None,
    timeout: Optional[float] = None,
) -> ProbeResult:
    """Run the runtime's version command and normalize its banner.

    Args:
        note: Optional annotation carried onto the record
        command: Command to run (defaults to java --version)
        timeout: Timeout in seconds

    Returns:
        ProbeResult with name and version from the first output line
    """
    command = command or DEFAULT_COMMAND

    try:
        result = run_command(command, timeout=timeout)
    except CommandNotFound:
        return ProbeResult.absent(PROBE, f"{command[0]} not found")
    except CommandFailed as e:
        return ProbeResult.failed(PROBE, str(e))

    name, version = first_line_tokens(result.output)
    if name is None:
        return ProbeResult.failed(PROBE, f"{' '.join(command)} printed nothing")

    return ProbeResult.success(
        PROBE,
        VersionRecord(name, version, note=note, source=PROBE),
    )
