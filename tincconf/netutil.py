"""
Address and subnet helpers.

Converts configuration text into resolved socket addresses and subnet
objects. Subnets come in three kinds: IPv4 and IPv6 networks with a prefix
length, and single MAC addresses for switch mode.
"""

import ipaddress
import logging
import re
import socket
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
AddrInfo = Tuple[int, int, int, str, tuple]

_mac_re = re.compile(r'^[0-9A-Fa-f]{1,2}(?::[0-9A-Fa-f]{1,2}){5}$')
_prefix_re = re.compile(r'^[0-9]+$')


class SubnetType(Enum):
    MAC = "mac"
    IPV4 = "ipv4"
    IPV6 = "ipv6"


@dataclass(frozen=True)
class Subnet:
    """A parsed subnet literal."""
    type: SubnetType
    address: Union[IPAddress, str]
    prefixlength: Optional[int] = None

    @property
    def network(self) -> Union[ipaddress.IPv4Network, ipaddress.IPv6Network]:
        """The subnet as an ipaddress network (IP subnets only)."""
        if self.type is SubnetType.MAC:
            raise TypeError("MAC subnets have no network form")
        return ipaddress.ip_network((self.address, self.prefixlength), strict=False)

    def __str__(self) -> str:
        if self.type is SubnetType.MAC:
            return str(self.address)
        return f"{self.address}/{self.prefixlength}"


def str2addrinfo(address: str, service: Optional[str] = None,
                 socktype: int = socket.SOCK_STREAM) -> List[AddrInfo]:
    """
    Resolve a hostname or literal address.

    May query the system resolver and therefore block.

    Raises:
        socket.gaierror: resolution failed
    """
    try:
        return socket.getaddrinfo(address, service, socket.AF_UNSPEC, socktype)
    except UnicodeError as e:
        # Labels that cannot be IDNA-encoded never reach the resolver
        raise socket.gaierror(socket.EAI_NONAME, str(e)) from e


def maskcheck(address: IPAddress, prefixlength: int) -> bool:
    """Return whether every bit of address past prefixlength is zero."""
    hostbits = address.max_prefixlen - prefixlength
    return int(address) & ((1 << hostbits) - 1) == 0


def str2net(text: str) -> Subnet:
    """
    Parse a subnet literal.

    Accepted forms: ``a.b.c.d[/len]``, ``x:x::x[/len]`` and
    ``xx:xx:xx:xx:xx:xx``. A missing prefix length means a single host.
    Host bits are not checked here; see maskcheck().

    Raises:
        ValueError: the literal is malformed
    """
    text = text.strip()
    if '/' in text:
        addr, prefix = text.split('/', 1)
        if not _prefix_re.match(prefix):
            raise ValueError(f"invalid prefix length {prefix!r}")
        prefixlength: Optional[int] = int(prefix)
    else:
        addr, prefixlength = text, None

    if prefixlength is None and _mac_re.match(addr):
        mac = ':'.join(f"{int(octet, 16):02x}" for octet in addr.split(':'))
        return Subnet(SubnetType.MAC, mac)

    address = ipaddress.ip_address(addr)
    if getattr(address, "scope_id", None):
        raise ValueError(f"zone index not allowed in subnet {text!r}")
    if prefixlength is None:
        prefixlength = address.max_prefixlen
    elif prefixlength > address.max_prefixlen:
        raise ValueError(f"prefix length {prefixlength} too long for {address}")

    kind = SubnetType.IPV4 if address.version == 4 else SubnetType.IPV6
    return Subnet(kind, address, prefixlength)


__all__ = [
    'SubnetType',
    'Subnet',
    'str2addrinfo',
    'str2net',
    'maskcheck',
]
