"""Aggregation and filtering of the version census.

The pipeline is strictly one-directional:
    installed-program inventory -> probes -> aggregate -> allow-list filter

Records are never changed in place. The only rewrite is the runtime swap:
inventory rows that look like the Java runtime are dropped and the first
one's name travels to the java --version row as its note, so the report
shows a single runtime line.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence

from ..probes import apache, elasticsearch, holodeck, institution, logstash, phantomjs, runtime
from ..probes.base import ProbeResult, ProbeStatus, VersionRecord
from ..probes.institution import InstitutionRecord
from ..utils.config import CensusConfig
from . import installed_programs

logger = logging.getLogger(__name__)


def _matches(name: str, fragments: Iterable[str]) -> bool:
    lowered = name.lower()
    return any(fragment.lower() in lowered for fragment in fragments if fragment)


def split_runtime_entries(
    records: Sequence[VersionRecord],
    patterns: Sequence[str],
) -> tuple[tuple[VersionRecord, ...], Optional[str]]:
    """Separate runtime-like inventory rows from the rest.

    Args:
        records: Installed-program inventory rows
        patterns: Name fragments identifying the runtime (case-insensitive)

    Returns:
        Tuple of (remaining rows, name of the first runtime row or None)
    """
    remaining = []
    runtime_names = []
    for record in records:
        if _matches(record.display_name, patterns):
            runtime_names.append(record.display_name)
        else:
            remaining.append(record)

    if len(runtime_names) > 1:
        logger.info("Several runtime entries in inventory, using %r: %s",
                    runtime_names[0], runtime_names)

    return tuple(remaining), runtime_names[0] if runtime_names else None


def aggregate_records(
    inventory: Sequence[VersionRecord],
    results: Sequence[ProbeResult],
) -> tuple[VersionRecord, ...]:
    """Concatenate inventory rows with the records of successful probes."""
    probe_records = tuple(r.record for r in results if r.ok and r.record is not None)
    return tuple(inventory) + probe_records


def filter_records(
    records: Iterable[VersionRecord],
    allow_list: Sequence[str],
    exclude: Sequence[str] = (),
) -> list[VersionRecord]:
    """Keep records whose name contains any allow-list fragment.

    Matching is case-insensitive and keeps the input order. Records that
    also contain an exclude fragment are dropped. Duplicates are not
    removed.
    """
    return [
        r for r in records
        if _matches(r.display_name, allow_list) and not _matches(r.display_name, exclude)
    ]


@dataclass
class CensusReport:
    """Everything a census run produced."""

    records: list[VersionRecord] = field(default_factory=list)
    results: list[ProbeResult] = field(default_factory=list)
    inventory_count: int = 0
    institution: Optional[InstitutionRecord] = None


def run_probes(
    base_path: str,
    config: CensusConfig,
    runtime_note: Optional[str] = None,
) -> list[ProbeResult]:
    """Run every probe once, in report order."""
    steps: list[tuple[str, Callable[[], ProbeResult]]] = [
        ("HolodeckB2B", lambda: holodeck.scan(base_path)),
        ("Apache HTTPD", lambda: apache.scan(config.apache_url, timeout=config.http_timeout)),
        ("Logstash", lambda: logstash.scan(base_path, timeout=config.command_timeout)),
        ("Elasticsearch", lambda: elasticsearch.scan(base_path, timeout=config.http_timeout)),
        ("Java runtime", lambda: runtime.scan(
            note=runtime_note,
            command=config.runtime_command,
            timeout=config.command_timeout,
        )),
        ("PhantomJS", lambda: phantomjs.scan(
            command=config.phantomjs_command,
            timeout=config.command_timeout,
        )),
    ]

    results = []
    for label, step in steps:
        logger.info("Probing %s...", label)
        result = step()
        if result.status is ProbeStatus.FAILED:
            logger.warning("%s: %s", result.probe, result.message)
        elif result.status is ProbeStatus.ABSENT:
            logger.info("%s: %s", result.probe, result.message)
        results.append(result)
    return results


def run_census(
    base_path: str,
    config: CensusConfig,
    read_inventory: Callable[[], list[VersionRecord]] = installed_programs.scan,
) -> CensusReport:
    """Run the complete census for one host.

    Args:
        base_path: Base installation path of the tracked stack
        config: Loaded census configuration
        read_inventory: Installed-program inventory reader

    Returns:
        CensusReport with the filtered records and every probe outcome
    """
    logger.info("Reading installed-program inventory...")
    inventory = read_inventory()
    inventory, runtime_note = split_runtime_entries(inventory, config.runtime_patterns)

    results = run_probes(base_path, config, runtime_note=runtime_note)
    combined = aggregate_records(inventory, results)

    logger.info("Reading institution metadata...")
    institution_record = institution.scan(base_path)

    return CensusReport(
        records=filter_records(combined, config.allow_list, config.exclude),
        results=results,
        inventory_count=len(inventory),
        institution=institution_record,
    )
