from safeshortener.admission.ip_ranges import BLOCKED_NETWORKS, is_blocked_address, parse_ip_literal
from safeshortener.admission.dns import DNSResolver, SocketDNSResolver
from safeshortener.admission.url_validator import UrlSafetyValidator, validate_url
from safeshortener.admission.quota import QuotaEnforcer, check_quota
from safeshortener.admission.rate_limiter import RateLimiter, RateLimitPolicy, RateLimitScope, DEFAULT_RATE_LIMITS


__all__ = [
    'BLOCKED_NETWORKS',
    'is_blocked_address',
    'parse_ip_literal',
    'DNSResolver',
    'SocketDNSResolver',
    'UrlSafetyValidator',
    'validate_url',
    'QuotaEnforcer',
    'check_quota',
    'RateLimiter',
    'RateLimitPolicy',
    'RateLimitScope',
    'DEFAULT_RATE_LIMITS',
]
