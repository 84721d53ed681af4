"""
CLI Module for tincconf

Usage:
    python -m tincconf.cli.tincconfctl -n myvpn check
"""

from .tincconfctl import TincConfCLI, main as tincconfctl_main

__all__ = [
    'TincConfCLI',
    'tincconfctl_main',
]
