"""Installed-program inventory and census aggregation.

Modules:
    installed_programs: Read the host's program registry / package database
    aggregate: Runtime swap, aggregation, allow-list filter, full census run
"""

from . import installed_programs
from .aggregate import (
    CensusReport,
    aggregate_records,
    filter_records,
    run_census,
    run_probes,
    split_runtime_entries,
)

__all__ = [
    "installed_programs",
    "CensusReport",
    "aggregate_records",
    "filter_records",
    "run_census",
    "run_probes",
    "split_runtime_entries",
]
