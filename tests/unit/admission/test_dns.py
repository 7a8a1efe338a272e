"""Unit tests for SocketDNSResolver.

Test coverage includes:
    1. Successful resolution (A + AAAA, duplicates dropped, order kept)
    2. Resolution failures raise DNSResolutionError
    3. Timeouts raise DNSResolutionError without waiting for the lookup
    4. Lookup pool: shared per size, a saturated pool fails lookups closed
"""

import socket
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from safeshortener.admission.dns import SocketDNSResolver, dns_executor
from safeshortener.exceptions import DNSResolutionError


def addrinfo(family, address):
    sockaddr = (address, 0) if family == socket.AF_INET else (address, 0, 0, 0)
    return (family, socket.SOCK_STREAM, socket.IPPROTO_TCP, '', sockaddr)


# -------------------------------
# 1. Successful resolution
# -------------------------------


def test_resolve_returns_all_addresses(monkeypatch):
    calls = []

    def fake_getaddrinfo(host, port, proto=0):
        calls.append((host, port, proto))
        return [
            addrinfo(socket.AF_INET, '93.184.216.34'),
            addrinfo(socket.AF_INET6, '2606:2800:220:1::1'),
            addrinfo(socket.AF_INET, '93.184.216.34'),
            addrinfo(socket.AF_INET, '10.0.0.5'),
        ]

    monkeypatch.setattr('safeshortener.admission.dns.socket.getaddrinfo', fake_getaddrinfo)

    addresses = SocketDNSResolver().resolve('example.com', timeout=1.0)

    assert addresses == ['93.184.216.34', '2606:2800:220:1::1', '10.0.0.5']
    assert calls == [('example.com', None, socket.IPPROTO_TCP)]


# -------------------------------
# 2. Resolution failures
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [
        socket.gaierror(socket.EAI_NONAME, 'Name or service not known'),
        UnicodeError('label too long'),
        OSError('network unreachable'),
    ],
)
def test_resolve_failure(monkeypatch, error):
    def fake_getaddrinfo(*args, **kwargs):
        raise error

    monkeypatch.setattr('safeshortener.admission.dns.socket.getaddrinfo', fake_getaddrinfo)

    with pytest.raises(DNSResolutionError):
        SocketDNSResolver().resolve('does-not-exist.invalid', timeout=1.0)


# -------------------------------
# 3. Timeouts
# -------------------------------


def test_resolve_timeout(monkeypatch):
    release = threading.Event()

    def slow_getaddrinfo(*args, **kwargs):
        release.wait(5)
        return [addrinfo(socket.AF_INET, '93.184.216.34')]

    monkeypatch.setattr('safeshortener.admission.dns.socket.getaddrinfo', slow_getaddrinfo)

    with ThreadPoolExecutor(max_workers=1) as executor:
        try:
            with pytest.raises(DNSResolutionError, match='timed out'):
                SocketDNSResolver(executor=executor).resolve('slow.example.com', timeout=0.05)
        finally:
            release.set()


# -------------------------------
# 4. Lookup pool
# -------------------------------


def test_dns_executor_shared_per_size():
    assert dns_executor(3) is dns_executor(3)
    assert dns_executor(3) is not dns_executor(4)
    assert dns_executor(3)._max_workers == 3


def test_default_resolver_uses_shared_pool():
    assert SocketDNSResolver().executor is dns_executor(8)


def test_saturated_pool_times_out_queued_lookups(monkeypatch):
    release = threading.Event()
    running = threading.Event()
    started = []

    def slow_getaddrinfo(host, *args, **kwargs):
        started.append(host)
        running.set()
        release.wait(5)
        return [addrinfo(socket.AF_INET, '93.184.216.34')]

    monkeypatch.setattr('safeshortener.admission.dns.socket.getaddrinfo', slow_getaddrinfo)

    with ThreadPoolExecutor(max_workers=1) as executor:
        try:
            # An earlier lookup that outlived its caller holds the only worker
            executor.submit(slow_getaddrinfo, 'slow.example.com')
            assert running.wait(1)

            with pytest.raises(DNSResolutionError, match='timed out'):
                SocketDNSResolver(executor=executor).resolve('queued.example.com', timeout=0.05)
        finally:
            release.set()

    # The queued lookup was cancelled before it ever ran
    assert started == ['slow.example.com']
