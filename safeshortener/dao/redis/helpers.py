import functools
from typing import Any
from collections.abc import Callable

import redis

from safeshortener.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error', 'describe_connection']


def describe_connection(client: redis.Redis) -> str:
    """Return 'host:port/db' of a Redis client, for error messages"""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Timeouts are treated like connection errors: the caller can't tell whether
    the command ran, and every admission check must fail closed.

    Example:
        >>> @handle_redis_connection_error
        ... def count_by_owner(self, owner_id):
        ...     return self.redis.scard(self.keys.owner_links_key(owner_id))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_connection(self.redis)}.") from e

    return wrapper
