from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a short link owned by a user.

    A link is created in two phases: the store assigns `id` on insert and the
    short code derived from that id is attached right after. Until then
    `shortcode` is None and the link can't be resolved by anyone.

    Attributes:
        id (int):
            Unique, monotonically increasing identifier assigned by the store.
            Never reused.
        owner_id (str):
            Identity of the user who created the link.
        original_url (str):
            Validated absolute HTTPS URL the short code points to.
        shortcode (Optional[str]):
            Public short code. Unique across all links, assigned exactly once.
        created_at (Optional[datetime]):
            Creation time in UTC.

    Example:
        >>> link = ShortLinkModel(
        ...     id=12345,
        ...     owner_id='user-1',
        ...     original_url='https://codesubmit.io/library/react',
        ... )
        >>> link.visible
        False
        >>> link.with_shortcode('Gh71WPT').visible
        True
    """

    id: int
    owner_id: str
    original_url: str
    shortcode: str | None = None
    created_at: datetime | None = None

    @property
    def visible(self) -> bool:
        return self.shortcode is not None

    def with_shortcode(self, shortcode: str) -> 'ShortLinkModel':
        return replace(self, shortcode=shortcode)
