"""URL safety validator (SSRF guard)

Decide whether an untrusted URL may be stored and handed out behind a short
code. Checks run in a fixed order and short-circuit on the first failure, so
obviously malformed input never triggers network I/O:

    1. parseability        -> INVALID_FORMAT
    2. scheme is https     -> WRONG_SCHEME
    3. no user-info        -> HAS_CREDENTIALS
    4. host present        -> MISSING_HOST
    5. host not localhost  -> BLOCKED_HOST
    6. IP literal host     -> RESOLVED_TO_BLOCKED_ADDRESS
    7. DNS resolution      -> DNS_RESOLUTION_FAILED / RESOLVED_TO_BLOCKED_ADDRESS

Every resolved address is checked, not just the first one, so a name with
mixed public/private answers is rejected.

NOTE:
    Validation happens once, at creation time. A name that resolved to public
    addresses may later be rebound to an internal one. Anything that fetches
    a stored URL must re-validate it at fetch time.

Example:
    >>> validator = UrlSafetyValidator()
    >>> validator.validate('https://example.com')
    AdmissionOutcome(accepted=True, reason=None, detail=None, retry_after=None)
    >>> validator.validate('http://example.com').reason
    <RejectionReason.WRONG_SCHEME: 'wrong_scheme'>
"""

import logging
from urllib.parse import urlsplit, SplitResult

from safeshortener.admission.dns import DNSResolver, SocketDNSResolver
from safeshortener.admission.ip_ranges import is_blocked_address, parse_ip_literal
from safeshortener.constants import DEFAULT_DNS_TIMEOUT, MAX_URL_LENGTH
from safeshortener.exceptions import DNSResolutionError, URLValidationError
from safeshortener.models import AdmissionOutcome, RejectionReason
from safeshortener.types import ValidationOutcome


logger = logging.getLogger(__name__)

ALLOWED_SCHEME = 'https'
BLOCKED_HOSTNAMES = frozenset({'localhost'})


class UrlSafetyValidator:
    """Validate candidate URLs against scheme, credential, host and IP range rules.

    Attributes:
        resolver (DNSResolver):
            Resolver used for hostnames that aren't IP literals.
        dns_timeout (float):
            Seconds to wait for a DNS answer. A timeout rejects the URL.

    Methods:
        validate(raw_url) -> AdmissionOutcome:
            Accepted outcome, or rejected with the first failing reason.
        enforce(raw_url) -> str:
            Normalized URL, raises URLValidationError when rejected.
    """

    def __init__(self, resolver: DNSResolver | None = None, dns_timeout: float = DEFAULT_DNS_TIMEOUT):
        self.resolver = resolver or SocketDNSResolver()
        self.dns_timeout = dns_timeout

    def validate(self, raw_url: str | None) -> ValidationOutcome:
        """Validate a raw URL string

        Args:
            raw_url (str | None): untrusted URL as submitted by the client

        Returns:
            AdmissionOutcome: accepted, or rejected with a RejectionReason
        """
        url = normalize_url(raw_url)

        # 1- Parseability
        parts = _split(url)
        if parts is None:
            return AdmissionOutcome.reject(RejectionReason.INVALID_FORMAT, detail='not a parseable absolute URL')

        # 2- Scheme
        if parts.scheme != ALLOWED_SCHEME:
            return AdmissionOutcome.reject(RejectionReason.WRONG_SCHEME, detail=f'scheme must be {ALLOWED_SCHEME}')

        # 3- Embedded credentials
        if '@' in parts.netloc or parts.username or parts.password:
            return AdmissionOutcome.reject(RejectionReason.HAS_CREDENTIALS, detail='user info is not allowed')

        # 4- Host presence
        host = (parts.hostname or '').rstrip('.')
        if not host:
            return AdmissionOutcome.reject(RejectionReason.MISSING_HOST, detail='host is required')

        # 5- Literal localhost
        if host in BLOCKED_HOSTNAMES:
            return AdmissionOutcome.reject(RejectionReason.BLOCKED_HOST, detail=f'{host} is not allowed')

        # 6- IP literal host: classify directly, no DNS round trip
        address = parse_ip_literal(host)
        if address is not None:
            if is_blocked_address(address):
                return AdmissionOutcome.reject(RejectionReason.RESOLVED_TO_BLOCKED_ADDRESS, detail=f'{address} is in a blocked range')
            return AdmissionOutcome.accept()

        # 7- DNS resolution: every answer must be outside the blocked ranges
        return self._check_resolution(host)

    def enforce(self, raw_url: str | None) -> str:
        """Validate a raw URL and return its normalized form

        Raises:
            URLValidationError: if the URL is rejected
        """
        outcome = self.validate(raw_url)
        if not outcome.accepted:
            raise URLValidationError(raw_url, outcome.reason, detail=outcome.detail)
        return normalize_url(raw_url)

    def _check_resolution(self, host: str) -> ValidationOutcome:
        try:
            addresses = self.resolver.resolve(host, timeout=self.dns_timeout)
        except DNSResolutionError as e:
            return AdmissionOutcome.reject(RejectionReason.DNS_RESOLUTION_FAILED, detail=str(e))

        if not addresses:
            return AdmissionOutcome.reject(RejectionReason.DNS_RESOLUTION_FAILED, detail=f'{host} has no addresses')

        for resolved in addresses:
            try:
                blocked = is_blocked_address(resolved)
            except ValueError:
                return AdmissionOutcome.reject(RejectionReason.DNS_RESOLUTION_FAILED, detail=f'unparseable answer for {host}')
            if blocked:
                logger.debug('Hostname resolved to a blocked address.', extra={'hostname': host, 'address': resolved})
                return AdmissionOutcome.reject(RejectionReason.RESOLVED_TO_BLOCKED_ADDRESS, detail=f'{host} resolves to a blocked range')

        return AdmissionOutcome.accept()


def normalize_url(raw_url: str | None) -> str | None:
    """Strip surrounding whitespace, leave anything else untouched."""
    return raw_url.strip() if isinstance(raw_url, str) else None


def _split(url: str | None) -> SplitResult | None:
    if not url or len(url) > MAX_URL_LENGTH:
        return None
    # Embedded whitespace and control characters are never valid in a URL
    if any(c.isspace() or ord(c) < 0x20 or ord(c) == 0x7F for c in url):
        return None
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a non-numeric or out of range port
    except ValueError:
        return None
    return parts


def validate_url(raw_url: str | None, resolver: DNSResolver | None = None, dns_timeout: float = DEFAULT_DNS_TIMEOUT) -> ValidationOutcome:
    """Validate a URL with a one-off UrlSafetyValidator. See UrlSafetyValidator.validate()."""
    return UrlSafetyValidator(resolver=resolver, dns_timeout=dns_timeout).validate(raw_url)
