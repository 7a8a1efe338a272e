"""Shared Redis client for the link and counter DAOs

Both DAOs of a service talk to the same Redis deployment. The first one is
built from connection parameters; the second reuses its client (and
connection pool) through `redis_client`.

Commands run with a bounded socket timeout so that an unreachable Redis fails
the request quickly (fail closed) instead of hanging the lambda.

Example:
    >>> links = ShortLinkRedisDAO(redis_host='redis', prefix='safeshortener:dev')
    >>> counters = CounterRedisDAO(redis_client=links.redis, prefix='safeshortener:dev')
"""

import redis

from safeshortener.constants import RedisDefaults
from safeshortener.dao.redis.redis_key_schema import RedisKeySchema
from safeshortener.dao.redis.helpers import describe_connection
from safeshortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Redis client setup and PING healthcheck for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis): client used by every command of the DAO
        keys (RedisKeySchema): namespaced key builder
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = RedisDefaults.SOCKET_TIMEOUT,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Reuse `redis_client` when given, otherwise connect with the redis_* parameters

        Raises:
            DataStoreError: Redis didn't answer the initial PING
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis

        Returns False instead of raising DataStoreError when raise_error is False.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {describe_connection(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
