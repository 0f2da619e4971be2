"""Probe for the HolodeckB2B gateway version.

HolodeckB2B ships a plain-text version file at <base>/HolodeckB2B/ver.
"""

from pathlib import Path

from ..utils.constants import HOLODECK_DIR, HOLODECK_VERSION_FILE
from .base import ProbeResult, VersionRecord

PROBE = "holodeck"
DISPLAY_NAME = "HolodeckB2B"


def scan(base_path: str) -> ProbeResult:
    """Read the gateway version token from its version file."""
    version_file = Path(base_path) / HOLODECK_DIR / HOLODECK_VERSION_FILE

    try:
        content = version_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ProbeResult.absent(PROBE, f"{version_file} not found")
    except (OSError, UnicodeDecodeError) as e:
        return ProbeResult.failed(PROBE, f"Could not read {version_file}: {e}")

    version = content.strip() or None
    return ProbeResult.success(
        PROBE,
        VersionRecord(DISPLAY_NAME, version, source=PROBE),
    )
