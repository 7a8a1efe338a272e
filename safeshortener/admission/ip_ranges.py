"""Blocked IP range classification

Static, data-driven table of the address ranges a short link must never
point to. Classification is plain CIDR containment via `ipaddress`, which
keeps IPv6 handling correct (no string prefix matching).

Functions:
    parse_ip_literal(host) -> IPv4Address | IPv6Address | None
        Parse a URL host as an IP literal, None if it is a name.
    is_blocked_address(address) -> bool
        True if the address falls in any blocked range.

Example:
    >>> is_blocked_address('169.254.169.254')
    True
    >>> is_blocked_address('93.184.216.34')
    False
    >>> is_blocked_address('::ffff:127.0.0.1')
    True
"""

import ipaddress

from safeshortener.types import IPAddress


# fmt: off
BLOCKED_NETWORKS = (
    ipaddress.ip_network('127.0.0.0/8'),     # IPv4 loopback
    ipaddress.ip_network('10.0.0.0/8'),      # IPv4 private
    ipaddress.ip_network('172.16.0.0/12'),   # IPv4 private
    ipaddress.ip_network('192.168.0.0/16'),  # IPv4 private
    ipaddress.ip_network('169.254.0.0/16'),  # IPv4 link-local (cloud metadata services)
    ipaddress.ip_network('::1/128'),         # IPv6 loopback
    ipaddress.ip_network('fc00::/7'),        # IPv6 unique-local
    ipaddress.ip_network('fe80::/10'),       # IPv6 link-local
)
# fmt: on


def parse_ip_literal(host: str) -> IPAddress | None:
    """Parse a URL host as an IPv4/IPv6 literal

    Args:
        host (str): hostname as returned by urllib (IPv6 brackets already stripped)

    Returns:
        IPv4Address | IPv6Address | None: the address, None if host is a name
    """
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        return None


def is_blocked_address(address: str | IPAddress) -> bool:
    """Check an address against BLOCKED_NETWORKS

    IPv4-mapped IPv6 addresses (::ffff:a.b.c.d) are classified by the IPv4
    address they carry, since that is where a connection would end up.

    Args:
        address (str | IPv4Address | IPv6Address): address to classify

    Returns:
        bool: True if the address falls in any blocked range

    Raises:
        ValueError: if `address` is not a valid IP address
    """
    if isinstance(address, str):
        address = ipaddress.ip_address(address)

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped

    return any(address.version == network.version and address in network for network in BLOCKED_NETWORKS)
