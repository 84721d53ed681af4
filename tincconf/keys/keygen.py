"""
RSA key pair generation.

The private key goes to <confbase>/rsa_key.priv. The public key goes to this
node's host file, <confbase>/hosts/<Name>, when Name is configured, and to
<confbase>/rsa_key.pub otherwise. Keys already present in either file are
disabled, and the new PEM block is appended after them.
"""

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..config.accessors import get_config_string
from ..config.names import Names
from ..config.parser import host_config_path
from ..config.store import ConfigStore
from ..constants import Limits, Permissions
from .acquisition import AcquisitionStrategy, ask_and_open, disable_old_keys

logger = logging.getLogger(__name__)


@dataclass
class KeyPairFiles:
    """Where a generated key pair was written."""
    private_key: str
    public_key: str
    disabled_old_private: bool = False
    disabled_old_public: bool = False


def _append_key(handle: BinaryIO, pem: bytes) -> bool:
    """Disable old keys in handle and append pem. Returns whether any were disabled."""
    disabled = disable_old_keys(handle)
    if disabled:
        logger.warning(f"Warning: old key(s) found in {handle.name} and disabled.")

    if handle.tell() > 0:
        handle.seek(-1, os.SEEK_END)
        if handle.read(1) != b"\n":
            handle.write(b"\n")

    handle.write(pem)
    handle.flush()
    return disabled


def generate_rsa_keys(
    names: Names,
    store: Optional[ConfigStore] = None,
    bits: int = Limits.RSA_DEFAULT_BITS,
    strategy: Optional[AcquisitionStrategy] = None,
) -> KeyPairFiles:
    """
    Generate a public/private RSA key pair and store it.

    Args:
        names: File locations for this network
        store: Parsed server configuration, consulted for Name
        bits: Key size
        strategy: How to pick the file names (see ask_and_open)

    Raises:
        ValueError: bits is below the minimum key size
        KeyFileError: a key file could not be opened or rewritten
    """
    if bits < Limits.RSA_MIN_BITS:
        raise ValueError(f"RSA keys must be at least {Limits.RSA_MIN_BITS} bits, got {bits}")

    logger.info(f"Generating {bits} bits keys")
    key = rsa.generate_private_key(
        public_exponent=Limits.RSA_PUBLIC_EXPONENT,
        key_size=bits,
    )

    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.PKCS1,
    )

    with ask_and_open(names.private_key, "private RSA key", strategy) as f:
        if hasattr(os, 'fchmod'):
            os.fchmod(f.fileno(), Permissions.SECURE_FILE)
        disabled_private = _append_key(f, private_pem)
        private_path = f.name

    name = get_config_string(store.lookup_first("Name")) if store is not None else None
    default_public = host_config_path(names.confbase, name) if name else names.public_key

    with ask_and_open(default_public, "public RSA key", strategy) as f:
        disabled_public = _append_key(f, public_pem)
        public_path = f.name

    logger.info(f"Done generating keys: {private_path}, {public_path}")

    return KeyPairFiles(
        private_key=private_path,
        public_key=public_path,
        disabled_old_private=disabled_private,
        disabled_old_public=disabled_public,
    )


__all__ = ['KeyPairFiles', 'generate_rsa_keys']
