"""Probe for the Apache HTTPD version.

Issues a HEAD request against the local web server and reads the version
from the Server header, which avoids needing authenticated access to the
server itself.
"""

from typing import Optional

import requests

from ..utils import http
from .base import ProbeResult, VersionRecord
from .extractors import extract

PROBE = "apache"
DISPLAY_NAME = "Apache HTTPD"


def scan(url: str = "http://localhost/", timeout: Optional[float] = None) -> ProbeResult:
    """Read the Apache version from the Server response header.

    Args:
        url: URL of a resource served by the local web server
        timeout: Request timeout in seconds

    Returns:
        ProbeResult: ABSENT when nothing listens, FAILED on any other error
    """
    try:
        server = http.head_header(url, "Server", timeout=timeout)
    except requests.Timeout as e:
        return ProbeResult.failed(PROBE, f"HEAD {url} timed out: {e}")
    except requests.ConnectionError as e:
        return ProbeResult.absent(PROBE, f"No web server reachable at {url}: {e}")
    except requests.RequestException as e:
        return ProbeResult.failed(PROBE, f"HEAD {url} failed: {e}")

    if server is None:
        return ProbeResult.failed(PROBE, f"HEAD {url} returned no Server header")

    version = extract("apache_server_header", server)
    if version is None:
        return ProbeResult.failed(PROBE, f"Server header not recognised: {server!r}")

    return ProbeResult.success(PROBE, VersionRecord(DISPLAY_NAME, version, source=PROBE))
