"""HTTP helpers for the local service probes.

Thin wrappers around requests that always pass a timeout. Errors are left
to propagate as requests exceptions so each probe can decide whether a
failure means "not installed" or "probe broke".
"""

import logging
from typing import Any, Optional

import requests

from .constants import TIMEOUT_HTTP

logger = logging.getLogger(__name__)


def head_header(url: str, header: str, timeout: Optional[float] = None) -> Optional[str]:
    """Issue a HEAD request and return one response header.

    Args:
        url: Target URL
        header: Header name (case-insensitive)
        timeout: Timeout in seconds (defaults to TIMEOUT_HTTP)

    Returns:
        The header value, or None if the response does not carry it
    """
    timeout = TIMEOUT_HTTP if timeout is None else timeout
    logger.debug("HEAD %s", url)
    response = requests.head(url, timeout=timeout, allow_redirects=False)
    return response.headers.get(header)


def get_json(url: str, timeout: Optional[float] = None) -> Any:
    """Issue a GET request and decode the JSON body.

    Raises:
        requests.RequestException: On network errors or non-2xx status
        ValueError: If the body is not valid JSON
    """
    timeout = TIMEOUT_HTTP if timeout is None else timeout
    logger.debug("GET %s", url)
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()
