"""
Derive the per-network file locations from an optional network name.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from ..constants import Paths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Names:
    netname: Optional[str]
    identname: str
    confbase: str
    logfilename: str
    pidfilename: str

    @property
    def server_config(self) -> str:
        return os.path.join(self.confbase, Paths.SERVER_CONFIG)

    @property
    def hosts_dir(self) -> str:
        return os.path.join(self.confbase, Paths.HOSTS_DIR)

    @property
    def private_key(self) -> str:
        return os.path.join(self.confbase, Paths.PRIVATE_KEY)

    @property
    def public_key(self) -> str:
        return os.path.join(self.confbase, Paths.PUBLIC_KEY)


def make_names(
    netname: Optional[str] = None,
    confbase: Optional[str] = None,
    logfilename: Optional[str] = None,
) -> Names:
    """
    Set all files and paths according to netname.

    An explicit confbase wins over the one derived from netname.
    """
    identname = f"{Paths.PROGRAM_NAME}.{netname}" if netname else Paths.PROGRAM_NAME
    confdir = Paths.confdir()
    statedir = Paths.localstatedir()

    if not logfilename:
        logfilename = os.path.join(statedir, "log", f"{identname}.log")

    if netname:
        if not confbase:
            confbase = os.path.join(confdir, Paths.PROGRAM_NAME, netname)
        else:
            logger.info("Both netname and configuration directory given, using the latter...")
    elif not confbase:
        confbase = os.path.join(confdir, Paths.PROGRAM_NAME)

    return Names(
        netname=netname,
        identname=identname,
        confbase=confbase,
        logfilename=logfilename,
        pidfilename=os.path.join(statedir, "run", f"{identname}.pid"),
    )


__all__ = ['Names', 'make_names']
