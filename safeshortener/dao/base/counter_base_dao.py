"""Abstract base class for shared counter data access objects (DAOs).

The counter store backs the rate limiter. It must be shared by every service
instance and must increment atomically: two concurrent increments of the
same key are never lost, and each caller sees the value its own increment
produced.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from safeshortener.dao.redis import CounterRedisDAO
        >>> dao = CounterRedisDAO(...)

        >>> dao.increment_and_get('ratelimit:create:user-1:29000000', ttl=60)
        1
        >>> dao.increment_and_get('ratelimit:create:user-1:29000000', ttl=60)
        2
"""

from abc import ABC, abstractmethod


class CounterBaseDAO(ABC):
    """Interface for expiring atomic counters.

    Methods:
        increment_and_get(key: str, ttl: int, **kwargs) -> int:
            Atomically increment a counter and return the new value.
            Raises DataStoreError on connection or write failure.

        clear(key: str, **kwargs) -> None:
            Delete a counter.
            Raises DataStoreError on connection or write failure.
    """

    @abstractmethod
    def increment_and_get(self, key: str, ttl: int, **kwargs) -> int:
        """Atomically increment a counter and return its new value.

        NOTE: Implementations must set the expiry only when the counter is
              created, so a busy key still expires `ttl` seconds after its
              first increment.

        Args:
            key (str):
                Counter name.

            ttl (int):
                Seconds until a newly created counter expires.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: The counter value after the increment.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def clear(self, key: str, **kwargs) -> None:
        """Delete a counter, so its next increment starts at 1.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
