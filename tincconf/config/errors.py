"""
Exceptions raised by the configuration subsystem.

Every exception carries the variable name, file and line it concerns when
those are known, so callers can report an actionable diagnostic without
access to parser state.
"""

from typing import Optional


class ConfigError(Exception):
    """Base class for configuration errors."""

    def __init__(
        self,
        message: str,
        variable: Optional[str] = None,
        file: Optional[str] = None,
        line: Optional[int] = None,
    ):
        super().__init__(message)
        self.variable = variable
        self.file = file
        self.line = line


class ConfigIOError(ConfigError):
    """A file could not be opened, read or written."""


class ConfigSyntaxError(ConfigError):
    """A directive line has no derivable value."""


class TypeMismatchError(ConfigError):
    """A value does not convert to the requested type."""


class ValidationError(ConfigError):
    """A well-formed value violates a domain invariant."""


class KeyFileError(ConfigIOError):
    """A key file could not be acquired or rewritten."""


__all__ = [
    'ConfigError',
    'ConfigIOError',
    'ConfigSyntaxError',
    'TypeMismatchError',
    'ValidationError',
    'KeyFileError',
]
