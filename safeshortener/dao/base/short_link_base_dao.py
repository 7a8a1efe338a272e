"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all ShortLink DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-memory, PostgreSQL).

Links are created in two phases:
    1. insert() stores the link and assigns a fresh, never reused id.
    2. attach_shortcode() stores the code derived from that id and makes
       the link visible to readers.

Readers only ever find links by short code, so a link whose second phase
never ran stays invisible.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from safeshortener.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)

        >>> link = dao.insert(owner_id='user-1', original_url='https://example.com/blog/article-123')
        >>> link.id
        1
        >>> dao.attach_shortcode(link_id=link.id, shortcode='a1b2c3d')

        >>> retrieved = dao.get('a1b2c3d')
        >>> print(retrieved.original_url)
        https://example.com/blog/article-123

        >>> dao.count_by_owner('user-1')
        1
"""

from abc import ABC, abstractmethod

from safeshortener.models import ShortLinkModel


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        insert(owner_id: str, original_url: str, **kwargs) -> ShortLinkModel:
            Store a new link and assign its id. The link is not yet visible.
            Raises DataStoreError on connection or write failure.

        attach_shortcode(link_id: int, shortcode: str, **kwargs) -> ShortLinkModel:
            Attach the unique short code to a link and make it visible.
            Raises ShortLinkAlreadyExistsError if the code is taken.
            Raises ShortLinkNotFoundError if the link does not exist.
            Raises DataStoreError on connection or write failure.

        discard(link_id: int, **kwargs) -> None:
            Remove a link that never got a short code.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a visible link by exact short code.
            Raises ShortLinkNotFoundError if no link holds the code.
            Raises DataStoreError on connection or read failure.

        count_by_owner(owner_id: str, **kwargs) -> int:
            Number of visible links held by an owner.

        list_by_owner(owner_id: str, **kwargs) -> list[ShortLinkModel]:
            Visible links held by an owner, ordered by id.

    Subclassing:
        Datastore-specific implementations (e.g., ShortLinkRedisDAO or
        ShortLinkMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Links are never deleted by this core once visible.
    """

    @abstractmethod
    def insert(self, owner_id: str, original_url: str, **kwargs) -> ShortLinkModel:
        """Store a new link and assign it a unique, monotonically increasing id.

        Args:
            owner_id (str):
                Identity of the link's owner.

            original_url (str):
                Validated URL the link points to.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The stored link, with `shortcode` still None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def attach_shortcode(self, link_id: int, shortcode: str, **kwargs) -> ShortLinkModel:
        """Attach a short code to a stored link.

        Args:
            link_id (int):
                Id assigned by insert().

            shortcode (str):
                Short code derived from `link_id`.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The now visible link.

        Raises:
            ShortLinkAlreadyExistsError:
                If another link already holds `shortcode`.

            ShortLinkNotFoundError:
                If no link with `link_id` exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def discard(self, link_id: int, **kwargs) -> None:
        """Remove a link that never got a short code (no-op if it is unknown)."""
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a visible link by its short code.

        Args:
            shortcode (str):
                Short code, matched exactly (case-sensitive).

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The link holding the code.

        Raises:
            ShortLinkNotFoundError:
                If no link holds the code.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str, **kwargs) -> int:
        """Return the number of visible links held by an owner."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str, **kwargs) -> list[ShortLinkModel]:
        """Return the visible links held by an owner, ordered by id."""
        pass
