# Log events / error codes of the shorten_url lambda
MISSING_OWNER = 'MISSING_OWNER'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
URL_REJECTED = 'URL_REJECTED'
QUOTA_EXCEEDED = 'QUOTA_EXCEEDED'
RATE_LIMITED = 'RATE_LIMITED'
DEPENDENCY_UNAVAILABLE = 'DEPENDENCY_UNAVAILABLE'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
