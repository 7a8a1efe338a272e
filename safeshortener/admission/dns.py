"""DNS resolution for the URL safety validator

socket.getaddrinfo() has no timeout parameter, so lookups run on a shared
thread pool and the caller waits at most `timeout` seconds. A timed out or
failed lookup raises DNSResolutionError and is never retried: repeated
lookups would let a rebinding attacker race TTLs against the check.

A timed out lookup cannot be interrupted: it keeps its worker until
getaddrinfo returns on its own (bounded by the system resolver settings).
Time spent queued for a worker counts against the caller's timeout, so a
pool saturated by slow lookups makes new lookups time out (the URL is
rejected) rather than pile up. Size the pool with dns.workers.

Classes:
    DNSResolver:
        Interface: resolve(hostname, timeout) -> list[str]
    SocketDNSResolver:
        System resolver via getaddrinfo (A and AAAA answers).

Functions:
    dns_executor(workers) -> ThreadPoolExecutor
        Process-wide lookup pool with `workers` threads.
"""

import socket
import logging
import functools
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError

from safeshortener.constants import DEFAULT_DNS_TIMEOUT, DEFAULT_DNS_WORKERS
from safeshortener.exceptions import DNSResolutionError


logger = logging.getLogger(__name__)


@functools.cache
def dns_executor(workers: int) -> ThreadPoolExecutor:
    """Return the process-wide lookup pool with `workers` threads, created on first use"""
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix='dns')


class DNSResolver(ABC):
    """Interface for hostname resolution used by the URL safety validator."""

    @abstractmethod
    def resolve(self, hostname: str, timeout: float = DEFAULT_DNS_TIMEOUT) -> list[str]:
        """Resolve a hostname to every address it maps to.

        Args:
            hostname (str):
                Hostname to resolve.
            timeout (float):
                Maximum seconds to wait for an answer.

        Returns:
            list[str]: All resolved IPv4/IPv6 addresses (may be empty).

        Raises:
            DNSResolutionError:
                If resolution fails or times out.
        """
        pass


class SocketDNSResolver(DNSResolver):
    """Resolve hostnames through the system resolver (getaddrinfo)."""

    def __init__(self, executor: ThreadPoolExecutor | None = None):
        self.executor = executor or dns_executor(DEFAULT_DNS_WORKERS)

    def resolve(self, hostname: str, timeout: float = DEFAULT_DNS_TIMEOUT) -> list[str]:
        future = self.executor.submit(socket.getaddrinfo, hostname, None, proto=socket.IPPROTO_TCP)
        try:
            infos = future.result(timeout=timeout)
        except FuturesTimeoutError as e:
            # No-op once the lookup started; it holds its worker until getaddrinfo returns
            future.cancel()
            logger.info('DNS resolution timed out.', extra={'hostname': hostname, 'timeout': timeout})
            raise DNSResolutionError(f'DNS resolution timed out for {hostname}') from e
        except (socket.gaierror, UnicodeError, OSError) as e:
            logger.info('DNS resolution failed.', extra={'hostname': hostname, 'error': str(e)})
            raise DNSResolutionError(f'DNS resolution failed for {hostname}') from e

        # Keep answer order, drop duplicates (one entry per socket type/proto)
        addresses = []
        for family, _socktype, _proto, _canonname, sockaddr in infos:
            if family not in (socket.AF_INET, socket.AF_INET6):
                continue
            if sockaddr[0] not in addresses:
                addresses.append(sockaddr[0])
        return addresses
