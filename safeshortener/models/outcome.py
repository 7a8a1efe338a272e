"""Admission check results

Every admission check (URL safety, quota, rate limit) returns an
AdmissionOutcome instead of raising, so callers can decide whether to
surface, log or aggregate the result. The service layer turns rejected
outcomes into the matching AdmissionError subclass.

Example:
    >>> AdmissionOutcome.accept()
    AdmissionOutcome(accepted=True, reason=None, detail=None, retry_after=None)
    >>> outcome = AdmissionOutcome.reject(RejectionReason.WRONG_SCHEME, detail='http')
    >>> bool(outcome)
    False
    >>> outcome.reason
    <RejectionReason.WRONG_SCHEME: 'wrong_scheme'>
"""

from dataclasses import dataclass
from enum import StrEnum


class RejectionReason(StrEnum):
    # URL safety validator
    INVALID_FORMAT = 'invalid_format'
    WRONG_SCHEME = 'wrong_scheme'
    HAS_CREDENTIALS = 'has_credentials'
    MISSING_HOST = 'missing_host'
    BLOCKED_HOST = 'blocked_host'
    DNS_RESOLUTION_FAILED = 'dns_resolution_failed'
    RESOLVED_TO_BLOCKED_ADDRESS = 'resolved_to_blocked_address'
    # Quota enforcer
    LIMIT_EXCEEDED = 'limit_exceeded'
    # Rate limiter
    RATE_LIMITED = 'rate_limited'


@dataclass(frozen=True)
class AdmissionOutcome:
    accepted: bool
    reason: RejectionReason | None = None
    detail: str | None = None
    retry_after: int | None = None  # only set for RATE_LIMITED

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def accept(cls) -> 'AdmissionOutcome':
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str | None = None, retry_after: int | None = None) -> 'AdmissionOutcome':
        return cls(accepted=False, reason=reason, detail=detail, retry_after=retry_after)
