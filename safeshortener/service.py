"""Short link service: the admission and naming layer

Every request passes through the admission checks before touching the link
store:

    create_link:  rate limit (owner) -> quota -> URL safety -> insert -> encode id -> attach code
    resolve_link: rate limit (caller IP) -> decode code -> lookup by code

All checks run synchronously and a failure ends the request. Nothing is
retried inside the service. Store or counter outages surface as
DependencyUnavailableError (fail closed).

Classes:
    ShortLinkService
        create_link(), resolve_link(), list_links(), admit_login_attempt()

Functions:
    build_service(app_config) -> ShortLinkService
        Wire DAOs and admission checks from a lambda's configuration.

Example:
    >>> service = build_service({'active_backend': 'memory'})
    >>> link = service.create_link('user-1', 'https://codesubmit.io/library/react')
    >>> service.resolve_link(link.shortcode, client_ip='203.0.113.7')
    'https://codesubmit.io/library/react'
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from safeshortener.admission import QuotaEnforcer, RateLimiter, RateLimitScope, SocketDNSResolver, UrlSafetyValidator
from safeshortener.admission.dns import dns_executor
from safeshortener.constants import ANONYMOUS_IDENTITY
from safeshortener.dao.base import CounterBaseDAO, ShortLinkBaseDAO
from safeshortener.dao.exceptions import DataStoreError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from safeshortener.exceptions import (
    DependencyUnavailableError,
    InvalidShortCodeError,
    LinkNotFoundError,
    SafeShortenerError,
    URLValidationError,
)
from safeshortener.models import ShortLinkModel
from safeshortener.utils.config import ServiceSettings
from safeshortener.utils.helpers import running_locally
from safeshortener.utils.shortener import ShortCodeAllocator


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Short link not found.'


class ShortLinkService:
    """Create and resolve short links behind the admission checks.

    Attributes:
        link_dao (ShortLinkBaseDAO): durable link store
        rate_limiter (RateLimiter): per identity/scope throughput limits
        quota (QuotaEnforcer): per owner link quota
        validator (UrlSafetyValidator): SSRF guard for submitted URLs
        allocator (ShortCodeAllocator): id <-> short code mapping
    """

    def __init__(
        self,
        link_dao: ShortLinkBaseDAO,
        rate_limiter: RateLimiter,
        quota: QuotaEnforcer,
        validator: UrlSafetyValidator,
        allocator: ShortCodeAllocator,
    ):
        self.link_dao = link_dao
        self.rate_limiter = rate_limiter
        self.quota = quota
        self.validator = validator
        self.allocator = allocator

    def create_link(self, owner_id: str, raw_url: str) -> ShortLinkModel:
        """Validate a URL and store it under a new short code

        Args:
            owner_id (str): authenticated owner identity
            raw_url (str): untrusted URL submitted by the owner

        Returns:
            ShortLinkModel: the stored, visible link

        Raises:
            RateLimitedError: owner exceeded the creation rate
            QuotaExceededError: owner holds the maximum number of links
            URLValidationError: URL failed a safety check (see `reason`)
            DependencyUnavailableError: link store or counter store unreachable
        """
        # 1- Rate limit per owner
        self.rate_limiter.enforce(owner_id, RateLimitScope.CREATE)

        with _store_guard():
            # 2- Quota, read right before the create (soft limit)
            self.quota.enforce(owner_id)

            # 3- URL safety
            try:
                original_url = self.validator.enforce(raw_url)
            except URLValidationError as e:
                logger.info(
                    'Rejected URL.',
                    extra={'ownerId': owner_id, 'url': raw_url, 'reason': str(e.reason), 'event': 'URL_REJECTED'},
                )
                raise

            # 4- Two-phase create: the id comes from the store, the code from the id
            link = self.link_dao.insert(owner_id=owner_id, original_url=original_url)
            shortcode = self.allocator.encode(link.id)
            try:
                link = self.link_dao.attach_shortcode(link_id=link.id, shortcode=shortcode)
            except (ShortLinkAlreadyExistsError, ShortLinkNotFoundError) as e:
                self.link_dao.discard(link_id=link.id)
                raise SafeShortenerError(f'Could not attach short code to link {link.id}.') from e
            except DataStoreError:
                self._discard_unpublished(link.id)
                raise

        logger.info('Created short link.', extra={'ownerId': owner_id, 'shortcode': shortcode, 'event': 'LINK_CREATED'})
        return link

    def resolve_link(self, code: str, client_ip: str | None = None) -> str:
        """Return the original URL behind a short code

        Args:
            code (str): short code, matched exactly
            client_ip (str | None): caller IP used as rate limit identity

        Raises:
            RateLimitedError: caller exceeded the resolution rate
            LinkNotFoundError: unknown or malformed code (no detail given)
            DependencyUnavailableError: link store or counter store unreachable
        """
        self.rate_limiter.enforce(client_ip or ANONYMOUS_IDENTITY, RateLimitScope.RESOLVE)

        # Malformed codes never reach the store
        try:
            self.allocator.decode(code)
        except (InvalidShortCodeError, TypeError) as e:
            logger.debug('Malformed short code.', extra={'shortcode': str(code)[:64]})
            raise LinkNotFoundError(NOT_FOUND_MESSAGE) from e

        with _store_guard():
            try:
                link = self.link_dao.get(shortcode=code)
            except ShortLinkNotFoundError as e:
                raise LinkNotFoundError(NOT_FOUND_MESSAGE) from e

        return link.original_url

    def list_links(self, owner_id: str) -> list[ShortLinkModel]:
        with _store_guard():
            return self.link_dao.list_by_owner(owner_id=owner_id)

    def admit_login_attempt(self, email: str) -> None:
        """Throttle login attempts per submitted email address

        Counts every attempt, whether or not the password turns out correct.

        Raises:
            RateLimitedError: too many attempts for this email in the window
        """
        self.rate_limiter.enforce(email.strip().casefold(), RateLimitScope.LOGIN)

    def _discard_unpublished(self, link_id: int) -> None:
        # The store already failed once; the attach error is what the caller sees
        try:
            self.link_dao.discard(link_id=link_id)
        except DataStoreError:
            logger.warning('Could not discard unpublished link.', extra={'linkId': link_id, 'event': 'LINK_DISCARD_FAILED'})


class _store_guard:
    """Context manager: surface DataStoreError as DependencyUnavailableError"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None and issubclass(exc_type, DataStoreError):
            logger.error('Link store unavailable.', extra={'event': 'LINK_STORE_UNAVAILABLE'})
            raise DependencyUnavailableError('Link store is unavailable.') from exc
        return False


def build_service(
    app_config: Mapping[str, Any],
    prefix: str | None = None,
    link_dao: ShortLinkBaseDAO | None = None,
    counter_dao: CounterBaseDAO | None = None,
    validator: UrlSafetyValidator | None = None,
) -> ShortLinkService:
    """Build a ShortLinkService from a lambda's configuration section

    Args:
        app_config (Mapping): output of load_config()
        prefix (str | None): Redis key prefix (see app_prefix())
        link_dao, counter_dao, validator: optional pre-built collaborators

    Raises:
        BadConfigurationError: invalid configuration values
        DependencyUnavailableError: Redis healthcheck failed
    """
    settings = ServiceSettings.from_config(app_config)

    try:
        if settings.backend == 'redis':
            from safeshortener.dao.redis import ShortLinkRedisDAO, CounterRedisDAO

            redis_config = {f'redis_{k}': v for k, v in settings.redis.items()}
            if link_dao is None:
                link_dao = ShortLinkRedisDAO(**redis_config, prefix=prefix)
                # Share one connection pool between the link and counter DAOs
                counter_dao = counter_dao or CounterRedisDAO(redis_client=link_dao.redis, prefix=prefix)
            counter_dao = counter_dao or CounterRedisDAO(**redis_config, prefix=prefix)
        else:
            shared_link_dao, shared_counter_dao = _memory_stores(prefix)
            link_dao = link_dao or shared_link_dao
            counter_dao = counter_dao or shared_counter_dao
    except DataStoreError as e:
        raise DependencyUnavailableError(str(e)) from e

    if validator is None:
        resolver = SocketDNSResolver(executor=dns_executor(settings.dns_workers))
        validator = UrlSafetyValidator(resolver=resolver, dns_timeout=settings.dns_timeout)

    return ShortLinkService(
        link_dao=link_dao,
        rate_limiter=RateLimiter(counter_dao, policies=settings.rate_limits),
        quota=QuotaEnforcer(link_dao, limit=settings.quota_limit),
        validator=validator,
        allocator=ShortCodeAllocator(salt=settings.shortcode_salt, length=settings.shortcode_length),
    )


# In-memory stores live as long as the process, one pair per key prefix
_MEMORY_STORES: dict[str | None, tuple[ShortLinkBaseDAO, CounterBaseDAO]] = {}
_MEMORY_STORES_LOCK = threading.Lock()


def _memory_stores(prefix: str | None) -> tuple[ShortLinkBaseDAO, CounterBaseDAO]:
    """Return the process-wide memory link and counter stores for `prefix`

    Services are rebuilt on every lambda invocation. Handing them the same
    stores keeps links and rate limit counters across invocations of a warm
    process. Separate processes (lambda containers) never share them.
    """
    from safeshortener.dao.memory import ShortLinkMemoryDAO, CounterMemoryDAO

    with _MEMORY_STORES_LOCK:
        if prefix not in _MEMORY_STORES:
            if not running_locally():
                logger.warning(
                    'Using the in-memory backend outside a local run. Links and rate limits are per process.',
                    extra={'event': 'MEMORY_BACKEND_IN_USE'},
                )
            _MEMORY_STORES[prefix] = (ShortLinkMemoryDAO(), CounterMemoryDAO())
        return _MEMORY_STORES[prefix]
