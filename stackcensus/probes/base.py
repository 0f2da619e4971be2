"""Record and result types shared by every probe.

A probe never raises past its own boundary. It returns a ProbeResult that
tells the operator whether the component is simply not installed here
(ABSENT), whether the probe itself broke (FAILED), or carries the
discovered VersionRecord (SUCCESS).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

INVENTORY_SOURCE = "inventory"


@dataclass(frozen=True)
class VersionRecord:
    """Normalized version information for one component."""

    display_name: str
    display_version: Optional[str] = None
    note: Optional[str] = None
    install_date: Optional[str] = None
    source: str = INVENTORY_SOURCE


class ProbeStatus(Enum):
    SUCCESS = "success"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of running one probe."""

    probe: str
    status: ProbeStatus
    record: Optional[VersionRecord] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, probe: str, record: VersionRecord) -> "ProbeResult":
        return cls(probe=probe, status=ProbeStatus.SUCCESS, record=record)

    @classmethod
    def absent(cls, probe: str, message: str) -> "ProbeResult":
        return cls(probe=probe, status=ProbeStatus.ABSENT, message=message)

    @classmethod
    def failed(cls, probe: str, message: str) -> "ProbeResult":
        return cls(probe=probe, status=ProbeStatus.FAILED, message=message)

    @property
    def ok(self) -> bool:
        return self.status is ProbeStatus.SUCCESS
