import json
import logging
from typing import Any

from safeshortener.exceptions import DependencyUnavailableError, QuotaExceededError, RateLimitedError, URLValidationError
from safeshortener.service import build_service
from safeshortener.utils import load_config, get_short_url, app_prefix, owner_id, guarantee_500_response
from safeshortener.utils.responses import response_200, response_400, response_401, response_422, response_429, response_503
from safeshortener.lambdas.shorten_url.constants import (
    MISSING_OWNER,
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    URL_REJECTED,
    QUOTA_EXCEEDED,
    RATE_LIMITED,
    DEPENDENCY_UNAVAILABLE,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract Amazon Cognito user id from Lambda event
    - Step 2: Extract original URL from request body
    - Step 3: Build the short link service from AppConfig
    - Step 4: Create the link (rate limit, quota, URL safety, code allocation)
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: original url (as stored)
            short_url: newly generated short url
            shortcode: newly generated shortcode
        400: Bad client request
            message: invalid JSON or missing target_url
        401: Unauthorized
            message: missing Cognito user id
        422: URL rejected by the safety validator
            errorCode: rejection reason (e.g. 'wrong_scheme')
        429: Link quota reached or creation rate exceeded
            headers: Retry-After (rate limit only)
        503: Link store or counter store unreachable
        500: Internal server error

    Args:
        event (dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.

    Example:
        >>> event = {'body': '{"target_url": "https://example.com"}', 'requestContext': {...}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    # 1- Extract user id from Cognito
    user_id = owner_id(event)
    if user_id is None:
        logger.info("Missing 'sub' in JWT claims. Responding with 401.", extra={'event': MISSING_OWNER})
        return response_401(message="missing 'sub' in JWT claims", error_code=MISSING_OWNER)

    # 2- Extract original URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    target_url = request_body.get('target_url') if isinstance(request_body, dict) else None
    if not target_url or not isinstance(target_url, str):
        logger.info("Missing 'target_url' in JSON body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    # 3- Build the service from the lambda's configuration
    app_config = load_config('shorten_url')

    # 4- Create the link behind the admission checks
    try:
        service = build_service(app_config, prefix=app_prefix())
        link = service.create_link(user_id, target_url)
    except URLValidationError as e:
        logger.info(
            'Target URL rejected. Responding with 422.',
            extra={'ownerId': user_id, 'reason': str(e.reason), 'event': URL_REJECTED},
        )
        return response_422(message=e.detail or 'URL rejected', error_code=str(e.reason))
    except QuotaExceededError as e:
        logger.info('Link quota reached. Responding with 429.', extra={'ownerId': user_id, 'event': QUOTA_EXCEEDED})
        return response_429(message=f'Link quota reached ({e.limit} links).', error_code=QUOTA_EXCEEDED)
    except RateLimitedError as e:
        logger.info('Creation rate exceeded. Responding with 429.', extra={'ownerId': user_id, 'event': RATE_LIMITED})
        return response_429(retry_after=e.retry_after, message='Too many link creation requests.', error_code=RATE_LIMITED)
    except DependencyUnavailableError:
        logger.exception('Backing store unavailable. Responding with 503.', extra={'event': DEPENDENCY_UNAVAILABLE})
        return response_503(error_code=DEPENDENCY_UNAVAILABLE)

    # 5- Return successful response to user
    short_url = get_short_url(link.shortcode, event)
    logger.info('Shortened URL. Responding with 200.', extra={'ownerId': user_id, 'shortcode': link.shortcode, 'event': SHORTEN_SUCCESS})
    return response_200(
        f'Successfully shortened {link.original_url} to {short_url}',
        target_url=link.original_url,
        short_url=short_url,
        shortcode=link.shortcode,
    )
