"""
Centralized Constants Module for tincconf.

Consolidates the file names, permission modes, marker strings and limits
used by the configuration subsystem so the security-relevant values live
in one auditable place.

Usage:
    from tincconf.constants import Permissions, Paths, KeyMarkers

    os.umask(Permissions.SECURE_UMASK)
    path = os.path.join(confbase, Paths.SERVER_CONFIG)
"""

import os
import logging
from enum import IntEnum
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)


# =============================================================================
# ENVIRONMENT VARIABLE OVERRIDE UTILITIES
# =============================================================================

T = TypeVar('T')

ENV_PREFIX = "TINC_"


def _env_override(
    env_var: str,
    default: T,
    converter: Callable[[str], T] = str,
    validator: Optional[Callable[[T], bool]] = None,
) -> T:
    """Get a value with environment variable override.

    Args:
        env_var: Environment variable name (will be prefixed with TINC_)
        default: Default value if env var not set
        converter: Function to convert string to target type
        validator: Optional validation function

    Returns:
        Configured value (from env var if valid, otherwise default)
    """
    full_env_var = f"{ENV_PREFIX}{env_var}"
    env_value = os.environ.get(full_env_var)

    if env_value is None:
        return default

    try:
        converted = converter(env_value)

        if validator is not None and not validator(converted):
            logger.warning(f"{full_env_var}={env_value} failed validation, using default")
            return default

        logger.debug(f"Using {full_env_var}={converted} (override)")
        return converted

    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid value for {full_env_var}: {e}, using default")
        return default


def _is_absolute(path: str) -> bool:
    return os.path.isabs(path)


# =============================================================================
# FILE PERMISSIONS
# =============================================================================

class Permissions(IntEnum):
    """
    File permission modes used for configuration and key material.

    SECURITY: Private keys must never be readable by group or other.
    """
    SECURE_FILE = 0o600                 # rw------- (private keys)
    SECURE_DIR = 0o700                  # rwx------
    STANDARD_FILE = 0o644               # rw-r--r-- (public host files)
    STANDARD_DIR = 0o755                # rwxr-xr-x

    # umask that strips every group/other bit from newly created files
    SECURE_UMASK = 0o077

    GROUP_OTHER_MASK = 0o077


# =============================================================================
# FILESYSTEM PATHS
# =============================================================================

class Paths:
    """
    Default directories and file names.

    CONFDIR and LOCALSTATEDIR can be overridden with TINC_CONFDIR and
    TINC_LOCALSTATEDIR; use confdir()/localstatedir() to read them so the
    override is honoured at call time.
    """
    CONFDIR: str = "/etc"
    LOCALSTATEDIR: str = "/var"

    PROGRAM_NAME: str = "tinc"

    SERVER_CONFIG: str = "tinc.conf"
    HOSTS_DIR: str = "hosts"
    PRIVATE_KEY: str = "rsa_key.priv"
    PUBLIC_KEY: str = "rsa_key.pub"

    @classmethod
    def confdir(cls) -> str:
        return _env_override("CONFDIR", cls.CONFDIR, validator=_is_absolute)

    @classmethod
    def localstatedir(cls) -> str:
        return _env_override("LOCALSTATEDIR", cls.LOCALSTATEDIR, validator=_is_absolute)


# =============================================================================
# ARMOR AND KEY MARKERS
# =============================================================================

class KeyMarkers:
    """
    Marker prefixes for PEM-armored blocks.

    ARMOR_BEGIN/ARMOR_END delimit any block the directive parser skips.
    RSA_BEGIN/RSA_END identify key blocks that key rotation disables by
    overwriting the three bytes at the given offset with OBSOLETE.
    """
    ARMOR_BEGIN = "-----BEGIN"
    ARMOR_END = "-----END"

    RSA_BEGIN = b"-----BEGIN RSA"
    RSA_BEGIN_OFFSET = 11
    RSA_END = b"-----END RSA"
    RSA_END_OFFSET = 9

    ACTIVE = b"RSA"
    OBSOLETE = b"OLD"


# =============================================================================
# LIMITS
# =============================================================================

class Limits:
    """Size limits for keys and names."""
    RSA_MIN_BITS = 1024
    RSA_DEFAULT_BITS = 2048
    RSA_PUBLIC_EXPONENT = 65537

    # tinc node names are restricted to [A-Za-z0-9_]
    NODE_NAME_PATTERN = r"^[A-Za-z0-9_]+$"


__all__ = [
    'ENV_PREFIX',
    'Permissions',
    'Paths',
    'KeyMarkers',
    'Limits',
]
