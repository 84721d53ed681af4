"""
Directive file parser.

A directive file holds one ``Variable = value`` statement per line; the ``=``
is optional and whitespace alone may separate name from value. Blank lines and
lines whose first non-blank character is ``#`` are ignored, and so is anything
between a ``-----BEGIN`` line and the next ``-----END`` line, which lets host
files carry their public key inline.
"""

import os
import re
from typing import Iterator, Tuple

from ..constants import KeyMarkers, Limits, Paths
from ..logging_config import get_logger
from ..utils.error_handling import ErrorCategory, handle_error
from .errors import ConfigError, ConfigIOError, ConfigSyntaxError
from .store import ConfigEntry, ConfigStore

logger = get_logger(__name__)

_SEPARATORS = "\t ="
_BLANKS = "\t "

_node_name_re = re.compile(Limits.NODE_NAME_PATTERN)


def _read_lines(fname: str) -> Iterator[Tuple[int, str]]:
    """Yield (lineno, line) with the line feed and a preceding CR removed."""
    with open(fname, 'rb') as fp:
        for lineno, raw in enumerate(fp, start=1):
            if raw.endswith(b'\n'):
                raw = raw[:-1]
                if raw.endswith(b'\r'):
                    raw = raw[:-1]
            yield lineno, raw.decode('utf-8', errors='replace')


def split_directive(line: str) -> Tuple[str, str]:
    """Split a directive line into (variable, value).

    Trailing tabs and spaces are dropped first. The value is empty when the
    line holds a bare variable name.
    """
    line = line.lstrip(_BLANKS).rstrip(_BLANKS)

    length = 0
    while length < len(line) and line[length] not in _SEPARATORS:
        length += 1

    variable = line[:length]
    value = line[length:].lstrip(_BLANKS)
    if value.startswith('='):
        value = value[1:].lstrip(_BLANKS)

    return variable, value


def _fail(error: ConfigError) -> ConfigError:
    handle_error(
        error,
        "read_config_file",
        ErrorCategory.CONFIG,
        additional_context={'file': error.file, 'line': error.line},
        log=logger,
    )
    return error


def read_config_file(store: ConfigStore, fname: str) -> int:
    """
    Parse a configuration file and insert its directives into store.

    Args:
        store: Store receiving the entries
        fname: Path of the file to read

    Returns:
        Number of entries inserted

    Raises:
        ConfigIOError: the file cannot be opened or read
        ConfigSyntaxError: a directive has no value; entries from earlier
            lines stay in the store
    """
    armored = False
    count = 0
    lineno = 0

    try:
        for lineno, line in _read_lines(fname):
            if armored:
                if line.startswith(KeyMarkers.ARMOR_END):
                    armored = False
                continue

            if line.startswith(KeyMarkers.ARMOR_BEGIN):
                armored = True
                continue

            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue

            variable, value = split_directive(line)

            if not variable:
                raise _fail(ConfigSyntaxError(
                    f"No variable name on line {lineno} while reading config file {fname}",
                    file=fname,
                    line=lineno,
                ))

            if not value:
                raise _fail(ConfigSyntaxError(
                    f"No value for variable `{variable}' on line {lineno} "
                    f"while reading config file {fname}",
                    variable=variable,
                    file=fname,
                    line=lineno,
                ))

            logger.trace(f"{fname} line {lineno}: {variable} = {value}")
            store.insert(ConfigEntry(variable, value, fname, lineno))
            count += 1

    except OSError as e:
        action = "read" if lineno else "open"
        raise _fail(ConfigIOError(
            f"Cannot {action} config file {fname}: {e.strerror or e}",
            file=fname,
        )) from e

    if armored:
        logger.debug(f"Armored block in {fname} not terminated before end of file")

    logger.debug(f"Read {count} directives from {fname}")
    return count


def read_server_config(store: ConfigStore, confbase: str) -> int:
    """Read <confbase>/tinc.conf into store."""
    fname = os.path.join(confbase, Paths.SERVER_CONFIG)
    try:
        return read_config_file(store, fname)
    except ConfigError as e:
        logger.error(f"Failed to read `{fname}': {e}")
        raise


def check_id(name: str) -> bool:
    """Return whether name is usable as a node name."""
    return bool(name) and _node_name_re.fullmatch(name) is not None


def host_config_path(confbase: str, name: str) -> str:
    if not check_id(name):
        raise ConfigError(f"Invalid name for node: {name!r}", variable="Name")
    return os.path.join(confbase, Paths.HOSTS_DIR, name)


def read_host_config(store: ConfigStore, confbase: str, name: str) -> int:
    """Read <confbase>/hosts/<name> into store."""
    return read_config_file(store, host_config_path(confbase, name))


__all__ = [
    'split_directive',
    'read_config_file',
    'read_server_config',
    'read_host_config',
    'host_config_path',
    'check_id',
]
