"""Table-driven text extraction used by the probes.

Each entry maps an extractor name to a compiled pattern and the capture
group holding the value. Keeping the patterns here lets the parsing be
tested without processes or network access.
"""

import re
from typing import Any, Optional

EXTRACTORS: dict[str, tuple[re.Pattern, int]] = {
    # Server: Apache/2.4.58 (Win64) OpenSSL/3.1.3
    "apache_server_header": (re.compile(r"Apache/(\d+\.\d+\.\d+)"), 1),
    # logstash 8.11.0
    "logstash_version": (re.compile(r"logstash\s+(\d+(?:\.\d+)+)"), 1),
    # hosts => ["10.0.0.5:9200"]
    "logstash_output_hosts": (re.compile(r'hosts\s*=>\s*\[\s*"([^"]+)"'), 1),
}


def extract(name: str, text: Optional[str]) -> Optional[str]:
    """Apply a named extractor to text.

    Args:
        name: Key in EXTRACTORS
        text: Text to search (None is treated as no match)

    Returns:
        The captured value, or None if there is no match
    """
    pattern, group = EXTRACTORS[name]
    if not text:
        return None
    match = pattern.search(text)
    return match.group(group) if match else None


def first_line_tokens(output: str) -> tuple[Optional[str], Optional[str]]:
    """Split the first non-empty line into (name, version) tokens.

    "openjdk 17.0.9 2023-10-17" -> ("openjdk", "17.0.9")
    """
    for line in output.splitlines():
        tokens = line.split()
        if tokens:
            return tokens[0], tokens[1] if len(tokens) > 1 else None
    return None, None


def parse_search_engine_banner(payload: Any) -> tuple[str, str]:
    """Pull the node name and version number out of a root endpoint response.

    Raises:
        ValueError: If the payload lacks name or version.number
    """
    if not isinstance(payload, dict):
        raise ValueError("response is not a JSON object")
    name = payload.get("name")
    version = payload.get("version")
    number = version.get("number") if isinstance(version, dict) else None
    if not isinstance(name, str) or not name:
        raise ValueError("response has no 'name'")
    if not isinstance(number, str) or not number:
        raise ValueError("response has no 'version.number'")
    return name, number


def normalize_host_url(host: str) -> str:
    """Turn a logstash hosts entry into a root URL.

    "10.0.0.5:9200" -> "http://10.0.0.5:9200/"
    """
    host = host.strip()
    if "://" not in host:
        host = f"http://{host}"
    return host.rstrip("/") + "/"
