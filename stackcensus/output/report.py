"""Console rendering of the census report.

Renders three tables with rich:
    - the filtered version report (inventory rows first, then probes)
    - one status line per probe, so "not installed" and "probe broke"
      can be told apart
    - the institution metadata, when a client configuration was found
"""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..inventory.aggregate import CensusReport
from ..probes.base import ProbeStatus

STATUS_STYLES = {
    ProbeStatus.SUCCESS: "green",
    ProbeStatus.ABSENT: "yellow",
    ProbeStatus.FAILED: "red",
}


def _cell(value: Optional[str]) -> Text:
    # Text keeps rich from reading brackets in names as markup
    return Text(value if value else "-")


def build_version_table(report: CensusReport) -> Table:
    table = Table(title="Installed component versions")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Note")
    table.add_column("Installed")
    table.add_column("Source", style="dim")

    for record in report.records:
        table.add_row(
            Text(record.display_name),
            _cell(record.display_version),
            _cell(record.note),
            _cell(record.install_date),
            Text(record.source),
        )
    return table


def build_probe_table(report: CensusReport) -> Table:
    table = Table(title="Probe status")
    table.add_column("Probe")
    table.add_column("Status")
    table.add_column("Detail")

    for result in report.results:
        style = STATUS_STYLES[result.status]
        detail = result.message or ""
        if result.record is not None:
            detail = f"{result.record.display_name} {result.record.display_version or '-'}"
        table.add_row(result.probe, Text(result.status.value, style=style), Text(detail))
    return table


def build_institution_table(report: CensusReport) -> Optional[Table]:
    info = report.institution
    if info is None:
        return None

    table = Table(title="Institution")
    for column in ("Identifier", "Country", "Name", "Email"):
        table.add_column(column)
    table.add_row(
        _cell(info.identifier),
        _cell(info.country_code),
        _cell(info.name),
        _cell(info.email),
    )
    return table


def print_report(report: CensusReport, console: Optional[Console] = None) -> None:
    """Print the census report to the console."""
    console = console or Console()

    console.print(build_version_table(report))
    console.print(build_probe_table(report))

    institution_table = build_institution_table(report)
    if institution_table is not None:
        console.print(institution_table)

    console.print(
        f"{len(report.records)} component(s) reported, "
        f"{report.inventory_count} installed program(s) scanned"
    )
