"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO.

Key layout (see RedisKeySchema):
    <prefix>:links:counter           INCR sequence handing out link ids
    <prefix>:links:<id>              HASH owner_id, original_url, created_at, shortcode
    <prefix>:codes:<shortcode>       STRING link id (unique code, claimed under WATCH)
    <prefix>:users:<owner_id>:links  SET of visible link ids

Responsibilities:
    - Assign unique, monotonically increasing link ids (INCR never reuses a value);
    - Enforce short code uniqueness;
    - Resolve links by exact short code;
    - Count and list an owner's links;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Example:
    >>> from safeshortener.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="app:dev")
    >>> link = dao.insert(owner_id='user-1', original_url='https://example.com/page')
    >>> link.id
    1
    >>> dao.attach_shortcode(link_id=1, shortcode='Gh71WPT').shortcode
    'Gh71WPT'
    >>> dao.get('Gh71WPT').original_url
    'https://example.com/page'
"""

from datetime import datetime, UTC

import redis
from beartype import beartype

from safeshortener.models import ShortLinkModel
from safeshortener.dao.base import ShortLinkBaseDAO
from safeshortener.dao.redis.mixins import RedisClientMixin
from safeshortener.dao.redis.helpers import handle_redis_connection_error
from safeshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, owner_id: str, original_url: str, **kwargs) -> ShortLinkModel:
        """Store a new link under a freshly assigned id

        The link hash is written without a short code. It can't be found by
        readers until attach_shortcode() creates the code -> id mapping.

        Example:
            >>> dao.insert(owner_id='user-1', original_url='https://example.com')
            ShortLinkModel(id=1, owner_id='user-1', original_url='https://example.com', shortcode=None, ...)
        """
        link_id = int(self.redis.incr(self.keys.link_id_counter_key()))
        created_at = datetime.now(UTC)

        # fmt: off
        self.redis.hset(self.keys.link_key(link_id), mapping={
            'owner_id': owner_id,
            'original_url': original_url,
            'created_at': created_at.isoformat(),
        })
        # fmt: on
        return ShortLinkModel(id=link_id, owner_id=owner_id, original_url=original_url, created_at=created_at)

    @handle_redis_connection_error
    @beartype
    def attach_shortcode(self, link_id: int, shortcode: str, **kwargs) -> ShortLinkModel:
        """Attach a short code to a stored link

        The code key, the link hash and the owner's link set are written in
        one MULTI/EXEC transaction, so a link is either fully published or
        not at all. WATCH on the code and link keys turns a concurrent claim
        of the same code into ShortLinkAlreadyExistsError:

            (lambda 1): WATCH codes:<c> links:<id1>; EXISTS codes:<c> => 0; MULTI; SET ...; EXEC => OK
            (lambda 2): WATCH codes:<c> links:<id2>; EXISTS codes:<c> => 0; MULTI; SET ...; EXEC => WatchError

        Raises:
            ShortLinkNotFoundError:
                If no link with `link_id` exists.
            ShortLinkAlreadyExistsError:
                If another link already holds `shortcode`.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(link_id)
        code_key = self.keys.shortcode_key(shortcode)

        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(code_key, link_key)

                owner_id = pipe.hget(link_key, 'owner_id')
                if owner_id is None:
                    raise ShortLinkNotFoundError(f"Short link with id '{link_id}' not found.")
                if pipe.exists(code_key):
                    raise ShortLinkAlreadyExistsError(f"Short link with code '{shortcode}' already exists.")

                pipe.multi()
                pipe.set(code_key, link_id)
                pipe.hset(link_key, 'shortcode', shortcode)
                pipe.sadd(self.keys.owner_links_key(owner_id), link_id)
                pipe.hgetall(link_key)
                *_, fields = pipe.execute()
            except redis.exceptions.WatchError as e:
                raise ShortLinkAlreadyExistsError(f"Short link with code '{shortcode}' already exists.") from e

        return self._to_model(link_id, fields)

    @handle_redis_connection_error
    @beartype
    def discard(self, link_id: int, **kwargs) -> None:
        """Delete a link hash that never got a short code

        Published links are left alone: the code key and the hash's
        `shortcode` field are only ever written together.
        """
        link_key = self.keys.link_key(link_id)
        if self.redis.hexists(link_key, 'shortcode'):
            return
        self.redis.delete(link_key)

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a visible link by exact short code

        Raises:
            ShortLinkNotFoundError:
                If no link holds the code.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('Gh71WPT')
            ShortLinkModel(id=12345, owner_id='user-1', original_url='https://example.com', shortcode='Gh71WPT', ...)
        """
        link_id = self.redis.get(self.keys.shortcode_key(shortcode))
        if link_id is None:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")

        fields = self.redis.hgetall(self.keys.link_key(link_id))
        if not fields:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")

        return self._to_model(int(link_id), {**fields, 'shortcode': shortcode})

    @handle_redis_connection_error
    @beartype
    def count_by_owner(self, owner_id: str, **kwargs) -> int:
        return int(self.redis.scard(self.keys.owner_links_key(owner_id)))

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner_id: str, **kwargs) -> list[ShortLinkModel]:
        link_ids = sorted(int(link_id) for link_id in self.redis.smembers(self.keys.owner_links_key(owner_id)))
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.hgetall(self.keys.link_key(link_id))
            rows = pipe.execute()

        return [self._to_model(link_id, fields) for link_id, fields in zip(link_ids, rows) if fields]

    @staticmethod
    def _to_model(link_id: int, fields: dict) -> ShortLinkModel:
        created_at = fields.get('created_at')
        return ShortLinkModel(
            id=link_id,
            owner_id=fields['owner_id'],
            original_url=fields['original_url'],
            shortcode=fields.get('shortcode'),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
