"""Output modules for displaying the census.

Modules:
    report: rich tables for versions, probe status and institution metadata
"""

from .report import (
    build_institution_table,
    build_probe_table,
    build_version_table,
    print_report,
)

__all__ = [
    "build_institution_table",
    "build_probe_table",
    "build_version_table",
    "print_report",
]
