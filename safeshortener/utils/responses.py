"""API Gateway (Lambda proxy) response builders"""

import json


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def _response(status_code: int, body: dict, headers: dict | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error_body(base: str, message: str | None, error_code: str | None) -> dict:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return body


def response_200(message: str, **data) -> dict:
    return _response(200, {'message': message, **data})


def response_302(*, location: str) -> dict:
    return _response(302, {}, headers={'Location': location})


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(400, _error_body('Bad Request', message, error_code))


def response_401(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(401, _error_body('Unauthorized', message, error_code))


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(404, _error_body('Not Found', message, error_code))


def response_422(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(422, _error_body('Unprocessable Entity', message, error_code))


def response_429(*, retry_after: int | None = None, message: str | None = None, error_code: str | None = None) -> dict:
    body = {'message': message or 'Too Many Requests'}
    if error_code:
        body['errorCode'] = error_code
    headers = {'Retry-After': str(retry_after)} if retry_after is not None else None
    return _response(429, body, headers=headers)


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(500, _error_body('Internal Server Error', message, error_code))


def response_503(message: str | None = None, error_code: str | None = None) -> dict:
    return _response(503, _error_body('Service Unavailable', message, error_code))
