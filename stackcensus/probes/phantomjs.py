"""Probe for the PhantomJS headless browser version."""

from typing import Optional

from ..utils.commands import CommandFailed, CommandNotFound, run_command
from .base import ProbeResult, VersionRecord

PROBE = "phantomjs"
DISPLAY_NAME = "PhantomJS"
DEFAULT_COMMAND = ["phantomjs", "--version"]


def scan(command: Optional[list[str]] = None, timeout: Optional[float] = None) -> ProbeResult:
    # PhantomJS prints a bare version string, which is reported verbatim.
    command = command or DEFAULT_COMMAND

    try:
        result = run_command(command, timeout=timeout)
    except CommandNotFound:
        return ProbeResult.absent(PROBE, f"{command[0]} not found")
    except CommandFailed as e:
        return ProbeResult.failed(PROBE, str(e))

    version = result.output.strip() or None
    return ProbeResult.success(PROBE, VersionRecord(DISPLAY_NAME, version, source=PROBE))
