"""Run configuration: base installation path and census settings.

The base path is resolved from, in order:
    1. The explicit command-line argument
    2. The STACKCENSUS_BASE_PATH environment variable
    3. An interactive prompt (only when stdin is a terminal)

The census settings (allow-list, runtime patterns, probe endpoints and
timeouts) live in a reviewed YAML file. The packaged default is
data/census.yaml; STACKCENSUS_CONFIG points at an alternative.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, TextIO

from .constants import ENV_BASE_PATH, ENV_CONFIG, TIMEOUT_COMMAND, TIMEOUT_HTTP


class CensusError(Exception):
    """Base class for errors that abort a census run."""
    pass


class BasePathError(CensusError):
    """Raised when no base installation path can be determined."""
    pass


class ConfigError(CensusError):
    """Raised when the census configuration file is missing or invalid."""
    pass


def resolve_base_path(
    argument: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    prompt: Callable[[str], str] = input,
    stdin: Optional[TextIO] = None,
    echo: Callable[[str], None] = print,
) -> str:
    """Determine the base installation path for this run.

    Args:
        argument: Path given on the command line, if any
        environ: Environment mapping (defaults to os.environ)
        prompt: Function used to ask the operator
        stdin: Stream checked for interactivity (defaults to sys.stdin)
        echo: Function used to echo the resolved path

    Returns:
        Non-empty base path string

    Raises:
        BasePathError: If no path was given and prompting is impossible
    """
    environ = os.environ if environ is None else environ
    stdin = sys.stdin if stdin is None else stdin

    base_path = (argument or "").strip()
    if not base_path:
        base_path = environ.get(ENV_BASE_PATH, "").strip()

    if not base_path:
        if stdin is None or not stdin.isatty():
            raise BasePathError(
                f"No base path given: pass it as an argument or set {ENV_BASE_PATH} "
                "(no console available for prompting)"
            )
        base_path = prompt("Base installation path: ").strip()
        if not base_path:
            raise BasePathError("Base installation path must not be empty")

    echo(f"Base path: {base_path}")
    return base_path


@dataclass
class CensusConfig:
    """Settings that drive probing and report filtering."""

    allow_list: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    runtime_patterns: list[str] = field(default_factory=list)
    apache_url: str = "http://localhost/"
    runtime_command: list[str] = field(default_factory=lambda: ["java", "--version"])
    phantomjs_command: list[str] = field(default_factory=lambda: ["phantomjs", "--version"])
    http_timeout: float = TIMEOUT_HTTP
    command_timeout: float = TIMEOUT_COMMAND


def get_default_config_path() -> Path:
    """Get the default path to census.yaml relative to this module."""
    # Navigate from utils/ up to the package, then to data/
    return Path(__file__).parent.parent / "data" / "census.yaml"


def _string_list(data: dict[str, Any], key: str, default: list[str]) -> list[str]:
    value = data.get(key, default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return list(value)


def _number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number")
    return float(value)


def load_census_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CensusConfig:
    """Load and validate the census configuration.

    Args:
        config_path: Explicit path to a YAML file
        environ: Environment mapping consulted for STACKCENSUS_CONFIG

    Returns:
        Validated CensusConfig

    Raises:
        ConfigError: If the file is missing, malformed or has wrong types
    """
    import yaml

    environ = os.environ if environ is None else environ
    if config_path is None:
        override = environ.get(ENV_CONFIG, "").strip()
        config_path = Path(override).expanduser() if override else get_default_config_path()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Census configuration not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    defaults = CensusConfig()
    apache_url = data.get("apache_url", defaults.apache_url)
    if not isinstance(apache_url, str) or not apache_url:
        raise ConfigError("'apache_url' must be a non-empty string")

    config = CensusConfig(
        allow_list=_string_list(data, "allow_list", defaults.allow_list),
        exclude=_string_list(data, "exclude", defaults.exclude),
        runtime_patterns=_string_list(data, "runtime_patterns", defaults.runtime_patterns),
        apache_url=apache_url,
        runtime_command=_string_list(data, "runtime_command", defaults.runtime_command),
        phantomjs_command=_string_list(data, "phantomjs_command", defaults.phantomjs_command),
        http_timeout=_number(data, "http_timeout", defaults.http_timeout),
        command_timeout=_number(data, "command_timeout", defaults.command_timeout),
    )

    if not config.runtime_command or not config.phantomjs_command:
        raise ConfigError("Probe commands must not be empty")

    return config
