"""
Configuration Module for tincconf.

Provides the directive store and everything that fills or queries it:
- ConfigStore / ConfigEntry: ordered, multi-valued, case-insensitive store
- read_config_file / read_server_config / read_host_config: directive parser
- get_config_*: typed accessors with located diagnostics
- make_names: per-network file locations
- ConfigLinter: validation of a configuration directory
"""

from .errors import (
    ConfigError,
    ConfigIOError,
    ConfigSyntaxError,
    TypeMismatchError,
    ValidationError,
    KeyFileError,
)
from .store import ConfigEntry, ConfigStore
from .parser import (
    read_config_file,
    read_server_config,
    read_host_config,
    host_config_path,
    check_id,
)
from .accessors import (
    get_config_bool,
    get_config_int,
    get_config_string,
    get_config_address,
    get_config_subnet,
    get_process_priority,
)
from .names import Names, make_names
from .linter import ConfigLinter, LintFinding, LintResult, LintSeverity, lint_config

__all__ = [
    'ConfigError',
    'ConfigIOError',
    'ConfigSyntaxError',
    'TypeMismatchError',
    'ValidationError',
    'KeyFileError',
    'ConfigEntry',
    'ConfigStore',
    'read_config_file',
    'read_server_config',
    'read_host_config',
    'host_config_path',
    'check_id',
    'get_config_bool',
    'get_config_int',
    'get_config_string',
    'get_config_address',
    'get_config_subnet',
    'get_process_priority',
    'Names',
    'make_names',
    'ConfigLinter',
    'LintFinding',
    'LintResult',
    'LintSeverity',
    'lint_config',
]
