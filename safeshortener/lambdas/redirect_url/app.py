import logging
from typing import Any

from safeshortener.exceptions import DependencyUnavailableError, LinkNotFoundError, RateLimitedError
from safeshortener.service import build_service
from safeshortener.utils import load_config, get_short_url, app_prefix, client_ip, guarantee_500_response
from safeshortener.utils.responses import response_302, response_400, response_404, response_429, response_503
from safeshortener.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    RATE_LIMITED,
    DEPENDENCY_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to redirect URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Build the short link service from AppConfig
    - Step 3: Resolve the shortcode (rate limit per caller IP, lookup)
    - Step 4: Redirect client to the original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Missing shortcode in path parameters
        404: Unknown or malformed shortcode
        429: Too many requests from the caller's IP
            headers:
                Retry-After: seconds until the rate window rolls over
        503: Link store or counter store unreachable
        500: Internal server error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71WPT'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Build the service from the lambda's configuration
    app_config = load_config('redirect_url')

    # 3- Resolve the shortcode
    caller_ip = client_ip(event)
    try:
        service = build_service(app_config, prefix=app_prefix())
        original_url = service.resolve_link(shortcode, client_ip=caller_ip)
    except LinkNotFoundError:
        logger.info('Short URL not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=f"short url {get_short_url(shortcode, event)} doesn't exist", error_code=SHORT_URL_NOT_FOUND)
    except RateLimitedError as e:
        logger.info('Resolution rate exceeded. Responding with 429.', extra={'clientIp': caller_ip, 'event': RATE_LIMITED})
        return response_429(retry_after=e.retry_after, error_code=RATE_LIMITED)
    except DependencyUnavailableError:
        logger.exception('Backing store unavailable. Responding with 503.', extra={'event': DEPENDENCY_UNAVAILABLE})
        return response_503(error_code=DEPENDENCY_UNAVAILABLE)

    # 4- Redirect client to original URL
    logger.info('Redirecting client to original URL. Responding with 302.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_302(location=original_url)
