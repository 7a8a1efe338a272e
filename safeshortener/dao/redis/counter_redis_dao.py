"""Redis-based shared counters for rate limiting

Example:
    >>> dao = CounterRedisDAO(prefix='app:dev')
    >>> dao.increment_and_get('ratelimit:create:user-1:29000000', ttl=60)
    1
"""

from beartype import beartype

from safeshortener.dao.base import CounterBaseDAO
from safeshortener.dao.redis.mixins import RedisClientMixin
from safeshortener.dao.redis.helpers import handle_redis_connection_error


class CounterRedisDAO(RedisClientMixin, CounterBaseDAO):
    @handle_redis_connection_error
    @beartype
    def increment_and_get(self, key: str, ttl: int, **kwargs) -> int:
        """Atomically increment a counter, creating it with a TTL on first use

        NOTE: SET NX and INCR run in one MULTI/EXEC transaction. The SET only
              takes effect for a new key, so the TTL is fixed by the first
              request of a window and later increments don't extend it.
              INCR returns the value this caller produced, so two concurrent
              callers never observe the same count:

              (lambda 1): SET <app>:counters:<key> 0 NX EX <ttl>; INCR => 1
              (lambda 2): SET <app>:counters:<key> 0 NX EX <ttl>; INCR => 2

        Args:
            key (str): counter name
            ttl (int): seconds until a new counter expires

        Returns:
            int: counter value after this increment

        Raises:
            DataStoreError: if Redis connectivity issues occur.
        """
        counter_key = self.keys.counter_key(key)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(counter_key, 0, nx=True, ex=ttl)
            pipe.incr(counter_key)
            _, count = pipe.execute()
        return int(count)

    @handle_redis_connection_error
    @beartype
    def clear(self, key: str, **kwargs) -> None:
        self.redis.delete(self.keys.counter_key(key))
