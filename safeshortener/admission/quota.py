"""Per-owner short link quota

Functions:
    check_quota(owner_id, current_count, limit) -> AdmissionOutcome
        Pure policy check: an owner may hold at most `limit` links.

Classes:
    QuotaEnforcer:
        Reads the owner's current link count from the link store right before
        a create and applies check_quota().

NOTE:
    Count-then-insert is not a single transaction. Two concurrent creates for
    an owner at `limit - 1` links may both pass and leave the owner with
    `limit + 1` links. This is an accepted soft limit.
"""

import logging

from safeshortener.constants import DefaultQuota
from safeshortener.dao.base import ShortLinkBaseDAO
from safeshortener.exceptions import QuotaExceededError
from safeshortener.models import AdmissionOutcome, RejectionReason


logger = logging.getLogger(__name__)


def check_quota(owner_id: str, current_count: int, limit: int) -> AdmissionOutcome:
    """Decide whether an owner holding `current_count` links may create one more

    Args:
        owner_id (str): owner identity (used for diagnostics only)
        current_count (int): links currently held by the owner
        limit (int): maximum number of links per owner

    Returns:
        AdmissionOutcome: accepted, or rejected with LIMIT_EXCEEDED

    Example:
        >>> check_quota('user-1', 2, 3).accepted
        True
        >>> check_quota('user-1', 3, 3).reason
        <RejectionReason.LIMIT_EXCEEDED: 'limit_exceeded'>
    """
    if limit < 0:
        raise ValueError(f'Quota limit must be a non-negative integer (given value: {limit}).')

    if current_count >= limit:
        return AdmissionOutcome.reject(
            RejectionReason.LIMIT_EXCEEDED,
            detail=f"owner '{owner_id}' holds {current_count} of {limit} links",
        )
    return AdmissionOutcome.accept()


class QuotaEnforcer:
    def __init__(self, link_dao: ShortLinkBaseDAO, limit: int = DefaultQuota.LINKS_PER_OWNER):
        self.link_dao = link_dao
        self.limit = limit

    def check(self, owner_id: str) -> AdmissionOutcome:
        current_count = self.link_dao.count_by_owner(owner_id=owner_id)
        return check_quota(owner_id, current_count, self.limit)

    def enforce(self, owner_id: str) -> None:
        outcome = self.check(owner_id)
        if not outcome.accepted:
            logger.info(
                'Owner reached the short link quota.',
                extra={'ownerId': owner_id, 'limit': self.limit, 'event': 'QUOTA_EXCEEDED'},
            )
            raise QuotaExceededError(owner_id, self.limit)
