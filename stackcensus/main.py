"""stackcensus main entry point.

Usage:
    stackcensus [BASE_PATH]
    python -m stackcensus [BASE_PATH]

The base installation path comes from the argument, then the
STACKCENSUS_BASE_PATH environment variable, then an interactive prompt.

This script:
    1. Resolves the base path and loads census.yaml
    2. Reads the installed-program inventory
    3. Runs every component probe once (HolodeckB2B, Apache, Logstash,
       Elasticsearch, Java runtime, PhantomJS)
    4. Merges and filters the results against the allow-list
    5. Prints the report tables
"""

import argparse
import logging
import os
import sys
from typing import Optional

from .inventory.aggregate import run_census
from .output.report import print_report
from .utils.config import CensusError, load_census_config, resolve_base_path
from .utils.constants import ENV_BASE_PATH, ENV_LOG_LEVEL

logger = logging.getLogger("stackcensus")


def setup_logging(level: Optional[str] = None) -> None:
    """Send stackcensus log messages to stderr.

    Args:
        level: Level name; defaults to STACKCENSUS_LOG_LEVEL or WARNING
    """
    level_name = (level or os.environ.get(ENV_LOG_LEVEL) or "WARNING").upper()

    # Clear any existing handlers to prevent accumulation on repeated calls
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level_name, logging.WARNING))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackcensus",
        description="Report installed versions of the tracked server stack",
    )
    parser.add_argument(
        "base_path",
        nargs="?",
        help=f"Base installation path (default: ${ENV_BASE_PATH}, else prompt)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for stackcensus."""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        base_path = resolve_base_path(args.base_path)
        config = load_census_config()
    except CensusError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    report = run_census(base_path, config)
    print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
