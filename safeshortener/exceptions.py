class SafeShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:safeshortener_error'


class ConfigurationError(SafeShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class AdmissionError(SafeShortenerError):
    """Base exception for requests refused by an admission check."""

    error_code = 'admission:admission_error'


class URLValidationError(AdmissionError):
    """Raised when a URL is rejected by the URL safety validator.

    Attributes:
        url (str | None): The rejected URL as submitted.
        reason (RejectionReason): Which check rejected the URL.
    """

    error_code = 'admission:url_validation_error'

    def __init__(self, url, reason, detail: str | None = None):
        self.url = url
        self.reason = reason
        self.detail = detail
        super().__init__(f'URL rejected ({reason}){f": {detail}" if detail else ""}')


class QuotaExceededError(AdmissionError):
    """Raised when an owner already holds the maximum number of short links."""

    error_code = 'admission:quota_exceeded_error'

    def __init__(self, owner_id: str, limit: int):
        self.owner_id = owner_id
        self.limit = limit
        super().__init__(f"Owner '{owner_id}' reached the short link quota ({limit}).")


class RateLimitedError(AdmissionError):
    """Raised when a caller exceeds the request rate of a scope.

    Attributes:
        retry_after (int): Seconds until the current window rolls over.
    """

    error_code = 'admission:rate_limited_error'

    def __init__(self, scope: str, identity: str, retry_after: int):
        self.scope = scope
        self.identity = identity
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded for scope '{scope}'. Retry after {retry_after}s.")


class LinkNotFoundError(SafeShortenerError):
    """Raised when a short code does not resolve to a visible link."""

    error_code = 'app:link_not_found_error'


class InvalidShortCodeError(LinkNotFoundError):
    """Raised when a short code is malformed or outside the code space."""

    error_code = 'app:invalid_short_code_error'


class DependencyUnavailableError(SafeShortenerError):
    """Raised when a backing store can't be reached. Requests fail closed."""

    error_code = 'infra:dependency_unavailable_error'


class DNSResolutionError(SafeShortenerError):
    """Raised when a hostname can't be resolved (error, timeout or no answers)."""

    error_code = 'infra:dns_resolution_error'
