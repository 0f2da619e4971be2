"""Utility modules for common operations.

Modules:
    constants: Timeouts, environment variable names, installation layout
    commands: Safe command execution with timeouts
    http: HTTP HEAD/GET helpers with timeouts
    config: Base path resolution and census.yaml loading
"""

from .commands import (
    CommandFailed,
    CommandNotFound,
    CommandResult,
    run_command,
)

from .config import (
    BasePathError,
    CensusConfig,
    CensusError,
    ConfigError,
    load_census_config,
    resolve_base_path,
)

__all__ = [
    # commands
    'CommandFailed',
    'CommandNotFound',
    'CommandResult',
    'run_command',
    # config
    'BasePathError',
    'CensusConfig',
    'CensusError',
    'ConfigError',
    'load_census_config',
    'resolve_base_path',
]
