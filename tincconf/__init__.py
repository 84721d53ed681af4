"""
tincconf - Configuration subsystem for the tinc VPN daemon
"""

# Installs the logger class before any module-level logger is created
from . import logging_config

from .constants import (
    Permissions,
    Paths,
    KeyMarkers,
    Limits,
)

from .config import (
    ConfigEntry,
    ConfigStore,
    ConfigError,
    ConfigIOError,
    ConfigSyntaxError,
    TypeMismatchError,
    ValidationError,
    KeyFileError,
    read_config_file,
    read_server_config,
    read_host_config,
    get_config_bool,
    get_config_int,
    get_config_string,
    get_config_address,
    get_config_subnet,
    get_process_priority,
    Names,
    make_names,
)
from .netutil import Subnet, SubnetType
from .keys import (
    DefaultPath,
    InteractivePrompt,
    select_strategy,
    ask_and_open,
    disable_old_keys,
    generate_rsa_keys,
)

__version__ = "1.0.0"

__all__ = [
    'Permissions',
    'Paths',
    'KeyMarkers',
    'Limits',
    'ConfigEntry',
    'ConfigStore',
    'ConfigError',
    'ConfigIOError',
    'ConfigSyntaxError',
    'TypeMismatchError',
    'ValidationError',
    'KeyFileError',
    'read_config_file',
    'read_server_config',
    'read_host_config',
    'get_config_bool',
    'get_config_int',
    'get_config_string',
    'get_config_address',
    'get_config_subnet',
    'get_process_priority',
    'Names',
    'make_names',
    'Subnet',
    'SubnetType',
    'DefaultPath',
    'InteractivePrompt',
    'select_strategy',
    'ask_and_open',
    'disable_old_keys',
    'generate_rsa_keys',
]
