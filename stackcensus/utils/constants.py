"""Centralized constants for stackcensus.

Provides the default timeouts, environment variable names and fixed
installation layout used throughout the codebase. Every subprocess and
HTTP call made by a probe takes its timeout from here unless the census
configuration overrides it.
"""

# =============================================================================
# TIMEOUTS (in seconds)
# =============================================================================

# Version checks on local executables
# Used for: logstash --version, java --version, phantomjs --version
TIMEOUT_COMMAND = 60

# Registry / package database queries
# Used for: dpkg-query, rpm -qa
TIMEOUT_PACKAGE_LIST = 60

# Local HTTP probes
# Used for: HEAD on the web server, GET on the search engine root
TIMEOUT_HTTP = 10

# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_BASE_PATH = "STACKCENSUS_BASE_PATH"
ENV_CONFIG = "STACKCENSUS_CONFIG"
ENV_LOG_LEVEL = "STACKCENSUS_LOG_LEVEL"

# =============================================================================
# INSTALLATION LAYOUT (relative to the base path)
# =============================================================================

HOLODECK_DIR = "HolodeckB2B"
HOLODECK_VERSION_FILE = "ver"

LOGSTASH_DIR = "Logstash"
LOGSTASH_CONFIG = ("config", "logstash.conf")

SHARE_CONF_DIR = ("Share", "conf")
INSTITUTION_CONFIG_GLOB = "generatedApClientConfiguration-*.json"
