"""
Key file handling: acquisition under owner-only permissions, in-place
disabling of superseded keys, and RSA key pair generation.
"""

from .acquisition import (
    AcquisitionStrategy,
    DefaultPath,
    InteractivePrompt,
    select_strategy,
    ask_and_open,
    disable_old_keys,
    patch_bytes,
)
from .keygen import KeyPairFiles, generate_rsa_keys

__all__ = [
    'AcquisitionStrategy',
    'DefaultPath',
    'InteractivePrompt',
    'select_strategy',
    'ask_and_open',
    'disable_old_keys',
    'patch_bytes',
    'KeyPairFiles',
    'generate_rsa_keys',
]
