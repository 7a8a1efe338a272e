"""Unit tests for blocked IP range classification.

Test coverage includes:
    1. Blocked IPv4 ranges (loopback, private, link-local)
    2. Blocked IPv6 ranges (loopback, unique-local, link-local)
    3. IPv4-mapped IPv6 addresses
    4. Public addresses and range boundaries
    5. IP literal parsing
"""

import ipaddress

import pytest

from safeshortener.admission.ip_ranges import BLOCKED_NETWORKS, is_blocked_address, parse_ip_literal


# -------------------------------
# 1. Blocked IPv4 ranges
# -------------------------------


@pytest.mark.parametrize(
    'address',
    ['127.0.0.1', '127.255.255.254', '10.0.0.1', '10.255.255.255', '172.16.0.1', '172.31.255.255', '192.168.1.1', '169.254.169.254'],
)
def test_blocked_ipv4(address):
    assert is_blocked_address(address)


# -------------------------------
# 2. Blocked IPv6 ranges
# -------------------------------


@pytest.mark.parametrize('address', ['::1', 'fc00::1', 'fd12:3456:789a::1', 'fe80::1', 'febf:ffff::1'])
def test_blocked_ipv6(address):
    assert is_blocked_address(address)


# -------------------------------
# 3. IPv4-mapped IPv6 addresses
# -------------------------------


@pytest.mark.parametrize(
    'address, blocked',
    [
        ('::ffff:127.0.0.1', True),
        ('::ffff:169.254.169.254', True),
        ('::ffff:10.1.2.3', True),
        ('::ffff:93.184.216.34', False),
    ],
)
def test_ipv4_mapped_ipv6(address, blocked):
    assert is_blocked_address(address) is blocked


# -------------------------------
# 4. Public addresses and boundaries
# -------------------------------


@pytest.mark.parametrize(
    'address',
    ['93.184.216.34', '8.8.8.8', '172.15.255.255', '172.32.0.0', '11.0.0.0', '169.253.255.255', '2606:2800:220:1::1', 'fec0::1'],
)
def test_public_addresses_not_blocked(address):
    assert not is_blocked_address(address)


def test_accepts_address_objects():
    assert is_blocked_address(ipaddress.ip_address('10.0.0.1'))
    assert not is_blocked_address(ipaddress.ip_address('1.1.1.1'))


def test_invalid_address_raises():
    with pytest.raises(ValueError):
        is_blocked_address('not-an-ip')


def test_blocked_networks_table():
    assert {str(network) for network in BLOCKED_NETWORKS} == {
        '127.0.0.0/8',
        '10.0.0.0/8',
        '172.16.0.0/12',
        '192.168.0.0/16',
        '169.254.0.0/16',
        '::1/128',
        'fc00::/7',
        'fe80::/10',
    }


# -------------------------------
# 5. IP literal parsing
# -------------------------------


@pytest.mark.parametrize(
    'host, expected',
    [
        ('127.0.0.1', ipaddress.ip_address('127.0.0.1')),
        ('::1', ipaddress.ip_address('::1')),
        ('example.com', None),
        ('256.1.1.1', None),
    ],
)
def test_parse_ip_literal(host, expected):
    assert parse_ip_literal(host) == expected
