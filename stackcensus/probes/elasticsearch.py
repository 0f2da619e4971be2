"""Probe for the Elasticsearch version.

The search engine's address is not known on its own. It is discovered
through the Logstash pipeline configuration (the elasticsearch output's
hosts directive) and then queried on its root endpoint, which reports
the node name and version.
"""

from pathlib import Path
from typing import Optional

import requests

from ..utils import http
from ..utils.constants import LOGSTASH_CONFIG, LOGSTASH_DIR
from .base import ProbeResult, VersionRecord
from .extractors import extract, normalize_host_url, parse_search_engine_banner

PROBE = "elasticsearch"


def find_target_host(config_file: Path) -> Optional[str]:
    """Read the first elasticsearch host from a logstash config file.

    Raises:
        OSError: If the file cannot be read
    """
    text = config_file.read_text(encoding="utf-8", errors="replace")
    return extract("logstash_output_hosts", text)


def scan(base_path: str, timeout: Optional[float] = None) -> ProbeResult:
    """Discover the search engine through logstash.conf and query it.

    Args:
        base_path: Base installation path
        timeout: Request timeout in seconds

    Returns:
        ProbeResult whose record is named after the remote node
    """
    config_file = Path(base_path, LOGSTASH_DIR, *LOGSTASH_CONFIG)

    try:
        host = find_target_host(config_file)
    except FileNotFoundError:
        return ProbeResult.absent(PROBE, f"{config_file} not found")
    except OSError as e:
        return ProbeResult.failed(PROBE, f"Could not read {config_file}: {e}")

    if host is None:
        return ProbeResult.absent(PROBE, f"No hosts directive in {config_file}")

    url = normalize_host_url(host)
    try:
        payload = http.get_json(url, timeout=timeout)
        name, number = parse_search_engine_banner(payload)
    except requests.RequestException as e:
        return ProbeResult.failed(PROBE, f"GET {url} failed: {e}")
    except ValueError as e:
        return ProbeResult.failed(PROBE, f"Unexpected response from {url}: {e}")

    return ProbeResult.success(PROBE, VersionRecord(name, number, source=PROBE))
