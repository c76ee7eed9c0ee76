import json
import uuid
import logging

from shortlinks.dao import build_daos
from shortlinks.exceptions import CodeGenerationExhaustedError, ConfigurationError
from shortlinks.services import ShortLinkService
from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.utils import load_config, get_short_url, get_header, get_cookie, app_prefix, LifecycleConfig
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.constants import USER_ID_HEADER, USER_ID_COOKIE, USER_ID_COOKIE_MAX_AGE
from shortlinks.lambdas.shorten_url.constants import (
    LAMBDA_NAME,
    INVALID_JSON_BODY,
    MISSING_ORIGINAL_URL,
    INVALID_MAX_CLICKS,
    CODE_GENERATION_EXHAUSTED,
    CONFIGURATION_ERROR,
    USER_ID_ISSUED,
    LINK_SHORTENED,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_503(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Service Unavailable'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 503,
        'body': json.dumps(body),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
        'body': json.dumps(body),
    }


def response_200(*, body: dict, set_cookie: str | None = None) -> LambdaResponse:
    headers = {'Content-Type': 'application/json'}
    if set_cookie:
        headers['Set-Cookie'] = set_cookie
    return {
        'statusCode': 200,
        'headers': headers,
        'body': json.dumps(body),
    }


def user_id_cookie(user_id: str) -> str:
    return f'{USER_ID_COOKIE}={user_id}; Path=/; Max-Age={USER_ID_COOKIE_MAX_AGE}'


def resolve_user_id(event: LambdaEvent) -> tuple[str, bool]:
    """Identify the caller

    The X-User-ID header wins over the identity cookie. Without either, a
    fresh id is issued.

    Returns:
        tuple[str, bool]: user id, and whether it was freshly issued.
    """
    user_id = get_header(event, USER_ID_HEADER) or get_cookie(event, USER_ID_COOKIE)
    if user_id:
        return user_id, False
    return str(uuid.uuid4()), True


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Identify the user (header, cookie, or a freshly issued id)
    - Step 2: Extract original URL and click quota from request body
    - Step 3: Create the link (code allocation + storage)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            short_code: newly generated shortcode
            short_url: newly generated short url
            user_id: owner of the link
            expires_at: ISO 8601 expiry timestamp
            max_clicks: click quota (0 = unlimited)
            headers:
                Set-Cookie: identity cookie, only when a new user id was issued
        400: Bad client request
            message: invalid JSON, missing original_url or invalid max_clicks
        500: Internal server error
            message: server experienced an internal error
        503: Service unavailable
            message: no free shortcode could be allocated, retry later

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy
            output format. Includes status code, headers, and response body.

    Example:
        >>> event = {'headers': {'X-User-ID': 'user-1'}, 'body': '{"original_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'http://localhost:3000/aB3xY9'
    """
    # 0- Get application's config
    try:
        app_config = load_config(LAMBDA_NAME)
        lifecycle = LifecycleConfig.from_dict(app_config.get('lifecycle'))
    except (FileNotFoundError, ConfigurationError):
        logger.exception(
            'Failed to load AppConfig for shorten URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR},
        )
        return response_500()

    # 1- Identify the user
    user_id, issued = resolve_user_id(event)
    if issued:
        logger.info('Issued a new user id.', extra={'user_id': user_id, 'event': USER_ID_ISSUED})

    # 2- Extract original URL and click quota from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='JSON body must be an object', error_code=INVALID_JSON_BODY)

    original_url = request_body.get('original_url')
    if not original_url or not isinstance(original_url, str):
        logger.info('Missing "original_url" in body. Responding with 400.', extra={'event': MISSING_ORIGINAL_URL})
        return response_400(message="missing 'original_url' in JSON body", error_code=MISSING_ORIGINAL_URL)

    max_clicks = request_body.get('max_clicks', 0)
    if isinstance(max_clicks, bool) or not isinstance(max_clicks, int) or max_clicks < 0:
        logger.info(
            'Invalid "max_clicks" in body. Responding with 400.',
            extra={'max_clicks': max_clicks, 'event': INVALID_MAX_CLICKS},
        )
        return response_400(message="'max_clicks' must be a non-negative integer", error_code=INVALID_MAX_CLICKS)

    # 3- Create the link
    link_dao, notification_dao = build_daos(app_config, prefix=app_prefix())
    service = ShortLinkService.from_config(link_dao, notification_dao, lifecycle)
    try:
        link = service.create_link(user_id, original_url, max_clicks)
    except CodeGenerationExhaustedError:
        logger.warning(
            'Could not allocate a shortcode. Responding with 503.',
            extra={'user_id': user_id, 'event': CODE_GENERATION_EXHAUSTED},
        )
        return response_503(message='could not allocate a short code, retry later', error_code=CODE_GENERATION_EXHAUSTED)

    # 4- Return successful response to user
    short_url = get_short_url(link.code, event)
    logger.info(
        'Shortened URL. Responding with 200.',
        extra={'code': link.code, 'user_id': user_id, 'event': LINK_SHORTENED},
    )
    return response_200(
        body={
            'short_code': link.code,
            'short_url': short_url,
            'user_id': user_id,
            'expires_at': link.expires_at.isoformat(),
            'max_clicks': link.max_clicks,
        },
        set_cookie=user_id_cookie(user_id) if issued else None,
    )
