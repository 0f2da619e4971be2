"""Probe modules for discovering component versions.

Modules:
    holodeck: Read <base>/HolodeckB2B/ver
    apache: HEAD the local web server, parse the Server header
    logstash: Run <base>/Logstash/bin/logstash --version
    elasticsearch: Find the host in logstash.conf, GET its root endpoint
    runtime: Run java --version
    phantomjs: Run phantomjs --version
    institution: Read the newest access point client configuration
"""

from . import holodeck
from . import apache
from . import logstash
from . import elasticsearch
from . import runtime
from . import phantomjs
from . import institution
from .base import ProbeResult, ProbeStatus, VersionRecord

__all__ = [
    "holodeck",
    "apache",
    "logstash",
    "elasticsearch",
    "runtime",
    "phantomjs",
    "institution",
    "ProbeResult",
    "ProbeStatus",
    "VersionRecord",
]
