"""In-process short link store

Mirrors the Redis layout with plain dicts: an id sequence, link rows, a
code -> id index acting as the unique constraint, and per-owner id sets.
Every operation holds one lock.
"""

import threading
from datetime import datetime, UTC

from safeshortener.models import ShortLinkModel
from safeshortener.dao.base import ShortLinkBaseDAO
from safeshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkMemoryDAO(ShortLinkBaseDAO):
    def __init__(self):
        self._lock = threading.Lock()
        self._last_id = 0
        self._links: dict[int, ShortLinkModel] = {}
        self._codes: dict[str, int] = {}
        self._owners: dict[str, set[int]] = {}

    def insert(self, owner_id: str, original_url: str, **kwargs) -> ShortLinkModel:
        with self._lock:
            self._last_id += 1
            link = ShortLinkModel(
                id=self._last_id,
                owner_id=owner_id,
                original_url=original_url,
                created_at=datetime.now(UTC),
            )
            self._links[link.id] = link
            return link

    def attach_shortcode(self, link_id: int, shortcode: str, **kwargs) -> ShortLinkModel:
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                raise ShortLinkNotFoundError(f"Short link with id '{link_id}' not found.")
            if shortcode in self._codes:
                raise ShortLinkAlreadyExistsError(f"Short link with code '{shortcode}' already exists.")

            link = link.with_shortcode(shortcode)
            self._codes[shortcode] = link_id
            self._links[link_id] = link
            self._owners.setdefault(link.owner_id, set()).add(link_id)
            return link

    def discard(self, link_id: int, **kwargs) -> None:
        with self._lock:
            link = self._links.get(link_id)
            if link is not None and not link.visible:
                del self._links[link_id]

    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        with self._lock:
            link_id = self._codes.get(shortcode)
            if link_id is None:
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
            return self._links[link_id]

    def count_by_owner(self, owner_id: str, **kwargs) -> int:
        with self._lock:
            return len(self._owners.get(owner_id, ()))

    def list_by_owner(self, owner_id: str, **kwargs) -> list[ShortLinkModel]:
        with self._lock:
            return [self._links[link_id] for link_id in sorted(self._owners.get(owner_id, ()))]
