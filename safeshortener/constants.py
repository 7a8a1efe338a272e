from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    ONE_MINUTE = 60
    # Default rate limiting window
    RATE_WINDOW = ONE_MINUTE


class DefaultQuota:
    """Default quota values."""

    LINKS_PER_OWNER = 100  # Default number of short links one owner may hold


class DefaultRateLimit:
    """Default request throughput per scope (requests per RATE_WINDOW)."""

    CREATE = 40  # per authenticated owner
    RESOLVE = 30  # per caller IP
    LOGIN = 5  # per submitted email address


class ShortCode:
    """Short code generation defaults."""

    LENGTH = 7
    MULTIPLIER = 1_315_423_911
    MAX_LENGTH = 32  # longest code accepted on resolve


class RedisDefaults:
    """Redis client defaults."""

    SOCKET_TIMEOUT = 1.0  # seconds per command and per connect attempt


# Longest URL accepted for shortening (RFC 7230 recommendation)
MAX_URL_LENGTH = 2048

# DNS lookups are bounded by this timeout (seconds)
DEFAULT_DNS_TIMEOUT = 2.0

# Threads available for DNS lookups per process
DEFAULT_DNS_WORKERS = 8

# Identity used for rate limiting callers with an unknown address
ANONYMOUS_IDENTITY = 'anonymous'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
