"""Fixed window rate limiter backed by a shared counter store

Each (identity, scope) pair gets one counter per fixed window. The window
index is part of the counter key, so a new window starts from zero without
any reset step, and the counter key expires on its own after `window`
seconds.

The counter store must provide an atomic "increment, then read the new
value" primitive (Redis INCR). Reading the count first and incrementing
afterwards would let concurrent callers sharing a key both see a stale
under-limit count.

If the counter store is unreachable the limiter fails closed and raises
DependencyUnavailableError instead of admitting unlimited traffic.

Example:
    >>> from safeshortener.dao.memory import CounterMemoryDAO
    >>> limiter = RateLimiter(CounterMemoryDAO())
    >>> limiter.admit('user-1', RateLimitScope.CREATE, limit=1, window=60).accepted
    True
    >>> limiter.admit('user-1', RateLimitScope.CREATE, limit=1, window=60).reason
    <RejectionReason.RATE_LIMITED: 'rate_limited'>
"""

import math
import time
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from safeshortener.constants import TTL, DefaultRateLimit
from safeshortener.dao.base import CounterBaseDAO
from safeshortener.dao.exceptions import DataStoreError
from safeshortener.exceptions import DependencyUnavailableError, RateLimitedError
from safeshortener.models import AdmissionOutcome, RejectionReason


logger = logging.getLogger(__name__)


class RateLimitScope(StrEnum):
    CREATE = 'create'  # link creation, keyed by authenticated owner
    RESOLVE = 'resolve'  # link resolution, keyed by caller IP
    LOGIN = 'login'  # login attempts, keyed by submitted email address


@dataclass(frozen=True)
class RateLimitPolicy:
    limit: int  # requests admitted per window
    window: int = TTL.RATE_WINDOW  # window length in seconds

    def __post_init__(self):
        if self.limit < 0:
            raise ValueError(f'Rate limit must be a non-negative integer (given value: {self.limit}).')
        if self.window <= 0:
            raise ValueError(f'Rate limit window must be a positive number of seconds (given value: {self.window}).')


DEFAULT_RATE_LIMITS: Mapping[str, RateLimitPolicy] = {
    RateLimitScope.CREATE: RateLimitPolicy(limit=DefaultRateLimit.CREATE),
    RateLimitScope.RESOLVE: RateLimitPolicy(limit=DefaultRateLimit.RESOLVE),
    RateLimitScope.LOGIN: RateLimitPolicy(limit=DefaultRateLimit.LOGIN),
}


class RateLimiter:
    """Admit or reject requests per (identity, scope) in fixed counting windows.

    Attributes:
        counter_dao (CounterBaseDAO):
            Shared counter store with atomic increment and expiry.
        policies (Mapping[str, RateLimitPolicy]):
            Default limit and window per scope.
        clock (Callable[[], float]):
            Source of the current UNIX time.

    Methods:
        admit(identity_key, scope, limit=None, window=None) -> AdmissionOutcome:
            Count the request and decide. Raises DependencyUnavailableError
            when the counter store is unreachable.
        enforce(identity_key, scope, limit=None, window=None) -> None:
            Same as admit(), raises RateLimitedError when rejected.
        reset(identity_key, scope, window=None) -> None:
            Clear the current window's counter.
    """

    def __init__(
        self,
        counter_dao: CounterBaseDAO,
        policies: Mapping[str, RateLimitPolicy] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.counter_dao = counter_dao
        self.policies = {**DEFAULT_RATE_LIMITS, **(policies or {})}
        self.clock = clock

    def admit(self, identity_key: str, scope: str, limit: int | None = None, window: int | None = None) -> AdmissionOutcome:
        limit, window = self._resolve_policy(scope, limit, window)
        now = self.clock()
        window_index = int(now // window)
        key = self.key(identity_key, scope, window_index)

        try:
            count = self.counter_dao.increment_and_get(key, ttl=math.ceil(window))
        except DataStoreError as e:
            logger.error(
                'Counter store unavailable. Rejecting request.',
                extra={'scope': str(scope), 'event': 'RATE_LIMITER_UNAVAILABLE'},
            )
            raise DependencyUnavailableError('Rate limit counter store is unavailable.') from e

        if count > limit:
            retry_after = max(1, math.ceil((window_index + 1) * window - now))
            logger.info(
                'Rate limit exceeded.',
                extra={'scope': str(scope), 'identity': identity_key, 'count': count, 'limit': limit, 'event': 'RATE_LIMITED'},
            )
            return AdmissionOutcome.reject(
                RejectionReason.RATE_LIMITED,
                detail=f'{limit} requests per {window}s exceeded',
                retry_after=retry_after,
            )

        logger.debug('Request admitted (%s/%s).', count, limit, extra={'scope': str(scope)})
        return AdmissionOutcome.accept()

    def enforce(self, identity_key: str, scope: str, limit: int | None = None, window: int | None = None) -> None:
        outcome = self.admit(identity_key, scope, limit=limit, window=window)
        if not outcome.accepted:
            raise RateLimitedError(str(scope), identity_key, outcome.retry_after)

    def reset(self, identity_key: str, scope: str, window: int | None = None) -> None:
        """Clear the current window's counter, `window` as passed to admit()"""
        # The limit plays no part in the key
        _, window = self._resolve_policy(scope, 0, window)
        window_index = int(self.clock() // window)
        try:
            self.counter_dao.clear(self.key(identity_key, scope, window_index))
        except DataStoreError as e:
            raise DependencyUnavailableError('Rate limit counter store is unavailable.') from e

    @staticmethod
    def key(identity_key: str, scope: str, window_index: int) -> str:
        return f'ratelimit:{scope}:{identity_key}:{window_index}'

    def _resolve_policy(self, scope: str, limit: int | None, window: int | None) -> tuple[int, int]:
        policy = self.policies.get(scope)
        if policy is None and (limit is None or window is None):
            raise ValueError(f"No rate limit policy for scope '{scope}' (pass both limit and window).")
        limit = policy.limit if limit is None else limit
        window = policy.window if window is None else window
        if window <= 0:
            raise ValueError(f'Rate limit window must be a positive number of seconds (given value: {window}).')
        return limit, window
