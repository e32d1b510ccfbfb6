"""Address range expansion for CIDR blocks.

Pure functions, no I/O. Both IPv4 and IPv6 blocks are accepted; host bits in
the input are masked away, so ``10.0.0.5/30`` expands like ``10.0.0.0/30``.
"""

from __future__ import annotations

import ipaddress
from typing import NamedTuple

from smartdns_web.core.exceptions import InvalidRangeError

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


class HostRange(NamedTuple):
    """Usable host addresses of a block, in ascending order."""

    addresses: list[str]
    usable_count: int


def parse_cidr(cidr: str) -> IPNetwork:
    """Parse ``cidr`` into a network, masking host bits.

    Raises:
        InvalidRangeError: If ``cidr`` is not an address/prefix pair.
    """
    value = (cidr or "").strip()
    if "/" not in value:
        raise InvalidRangeError(cidr, "expected address/prefix")
    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError as e:
        raise InvalidRangeError(cidr, str(e)) from e


def canonical_cidr(cidr: str) -> str:
    """Return the masked network form, e.g. ``10.0.0.5/24`` -> ``10.0.0.0/24``."""
    return str(parse_cidr(cidr))


def usable_count(cidr: str) -> int:
    """Number of addresses ``expand`` would return, without building the list."""
    network = parse_cidr(cidr)
    total = network.num_addresses
    return total if total <= 2 else total - 2


def expand(cidr: str) -> HostRange:
    """Expand a CIDR block into its usable host addresses.

    Blocks of one or two addresses (/31, /32, /127, /128) are returned whole;
    larger blocks drop the network and broadcast addresses.

    Args:
        cidr: Block in address/prefix notation.

    Returns:
        HostRange with the ascending address list and its length.

    Raises:
        InvalidRangeError: If ``cidr`` does not parse.

    Example:
        >>> expand("10.0.0.0/30")
        HostRange(addresses=['10.0.0.1', '10.0.0.2'], usable_count=2)
    """
    network = parse_cidr(cidr)

    first = int(network.network_address)
    last = int(network.broadcast_address)
    if network.num_addresses > 2:
        first += 1
        last -= 1

    address_cls = type(network.network_address)
    addresses = [str(address_cls(value)) for value in range(first, last + 1)]
    return HostRange(addresses=addresses, usable_count=len(addresses))


def parse_host(ip: str) -> str:
    """Validate a single host address and return its canonical text form.

    Raises:
        InvalidRangeError: If ``ip`` is not an IPv4 or IPv6 address.
    """
    try:
        return str(ipaddress.ip_address((ip or "").strip()))
    except ValueError as e:
        raise InvalidRangeError(ip, str(e)) from e
