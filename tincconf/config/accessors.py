"""
Typed accessors for configuration entries.

Each accessor takes the entry returned by a store lookup. A missing entry
(``None``) means the variable is not set: the accessor returns ``None`` and
reports nothing. A value that does not convert is logged with its variable,
file and line and then raised, so callers choose how severe it is:

    try:
        port = get_config_int(store.lookup_first("Port"))
    except TypeMismatchError:
        return False
"""

import logging
import re
import socket
from typing import List, Optional

from ..netutil import AddrInfo, Subnet, SubnetType, maskcheck, str2addrinfo, str2net
from ..utils.error_handling import ErrorCategory, handle_error
from .errors import ConfigError, TypeMismatchError, ValidationError
from .store import ConfigEntry, ConfigStore

logger = logging.getLogger(__name__)

_int_re = re.compile(r'^[+-]?[0-9]+$')

PROCESS_PRIORITIES = {
    'normal': 0,
    'low': 10,
    'high': -10,
}


def _report(error_class, message: str, cfg: ConfigEntry,
            category: ErrorCategory = ErrorCategory.CONFIG) -> ConfigError:
    error = error_class(
        f"{message} for configuration variable {cfg.variable} in {cfg.file} line {cfg.line}",
        variable=cfg.variable,
        file=cfg.file,
        line=cfg.line,
    )
    handle_error(
        error,
        "config lookup",
        category,
        additional_context={'variable': cfg.variable, 'file': cfg.file, 'line': cfg.line},
        log=logger,
    )
    return error


def get_config_bool(cfg: Optional[ConfigEntry]) -> Optional[bool]:
    """Convert "yes"/"no" (any case) to a bool."""
    if cfg is None:
        return None

    value = cfg.value.lower()
    if value == "yes":
        return True
    if value == "no":
        return False

    raise _report(TypeMismatchError, '"yes" or "no" expected', cfg)


def get_config_int(cfg: Optional[ConfigEntry]) -> Optional[int]:
    """Convert a base-10 signed integer."""
    if cfg is None:
        return None

    if _int_re.match(cfg.value):
        try:
            return int(cfg.value, 10)
        except ValueError as e:
            # More digits than the interpreter will convert
            raise _report(TypeMismatchError, "Integer expected", cfg) from e

    raise _report(TypeMismatchError, "Integer expected", cfg)


def get_config_string(cfg: Optional[ConfigEntry]) -> Optional[str]:
    if cfg is None:
        return None
    return cfg.value


def get_config_address(cfg: Optional[ConfigEntry]) -> Optional[List[AddrInfo]]:
    """Resolve a hostname or literal address. May block on the resolver."""
    if cfg is None:
        return None

    try:
        return str2addrinfo(cfg.value)
    except (socket.gaierror, socket.herror) as e:
        logger.debug(f"Resolving {cfg.value!r} failed: {e}")
        raise _report(TypeMismatchError, "Hostname or IP address expected", cfg,
                      ErrorCategory.NETWORK) from e


def get_config_subnet(cfg: Optional[ConfigEntry]) -> Optional[Subnet]:
    """
    Parse a subnet literal and check it against its prefix length.

    Raises:
        TypeMismatchError: the literal is malformed
        ValidationError: host bits are set beyond the prefix length
    """
    if cfg is None:
        return None

    try:
        subnet = str2net(cfg.value)
    except ValueError as e:
        logger.debug(f"Parsing subnet {cfg.value!r} failed: {e}")
        raise _report(TypeMismatchError, "Subnet expected", cfg) from e

    if subnet.type is not SubnetType.MAC and not maskcheck(subnet.address, subnet.prefixlength):
        raise _report(ValidationError, "Network address and prefix length do not match", cfg)

    return subnet


def get_process_priority(store: ConfigStore) -> Optional[int]:
    """Map ProcessPriority (Normal, Low, High) to a nice increment."""
    cfg = store.lookup_first("ProcessPriority")
    priority = get_config_string(cfg)
    if priority is None:
        return None

    try:
        return PROCESS_PRIORITIES[priority.lower()]
    except KeyError:
        raise _report(ValidationError, f"Invalid priority `{priority}'", cfg) from None


__all__ = [
    'get_config_bool',
    'get_config_int',
    'get_config_string',
    'get_config_address',
    'get_config_subnet',
    'get_process_priority',
    'PROCESS_PRIORITIES',
]
