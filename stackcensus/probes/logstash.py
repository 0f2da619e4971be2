"""Probe for the Logstash pipeline version.

Runs the launcher under <base>/Logstash/bin with --version and parses the
"logstash X.Y.Z" banner. The banner may be preceded by JVM notices on
either stream, so stdout and stderr are searched together.
"""

import sys
from pathlib import Path
from typing import Optional

from ..utils.commands import CommandFailed, CommandNotFound, run_command
from ..utils.constants import LOGSTASH_DIR
from .base import ProbeResult, VersionRecord
from .extractors import extract

PROBE = "logstash"
DISPLAY_NAME = "Logstash"


def get_launcher(base_path: str, platform: str = sys.platform) -> Path:
    """Path of the logstash launcher for this platform."""
    launcher = "logstash.bat" if platform.startswith("win") else "logstash"
    return Path(base_path) / LOGSTASH_DIR / "bin" / launcher


def scan(base_path: str, timeout: Optional[float] = None) -> ProbeResult:
    launcher = get_launcher(base_path)

    try:
        result = run_command([str(launcher), "--version"], timeout=timeout)
    except CommandNotFound:
        return ProbeResult.absent(PROBE, f"{launcher} not found")
    except CommandFailed as e:
        return ProbeResult.failed(PROBE, str(e))

    version = extract("logstash_version", result.output)
    if version is None:
        return ProbeResult.failed(PROBE, f"No version in output of {launcher.name} --version")

    return ProbeResult.success(PROBE, VersionRecord(DISPLAY_NAME, version, source=PROBE))
