import json
import logging

from shortlinks.dao import build_daos
from shortlinks.exceptions import ConfigurationError
from shortlinks.services import ShortLinkService
from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.utils import load_config, get_short_url, app_prefix, LifecycleConfig
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.lambdas.redirect_url.constants import (
    LAMBDA_NAME,
    MISSING_SHORTCODE,
    LINK_NOT_AVAILABLE,
    CONFIGURATION_ERROR,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_500(message: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 500,
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


def response_404(message: str | None = None) -> LambdaResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})'}
    return {
        'statusCode': 404,
        'body': json.dumps(body),
    }


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
        },
        'body': json.dumps({}),  # no body needed for redirects
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to follow short links

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the link (expiry and click quota are enforced by the service)
    - Step 3: Redirect client to the original URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: original URL
        400: Bad client request
            message: missing shortcode in path parameters
        404: Link not available
            message: unknown, inactive, expired or exhausted link (not distinguished)
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': 'aB3xY9'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    try:
        app_config = load_config(LAMBDA_NAME)
        lifecycle = LifecycleConfig.from_dict(app_config.get('lifecycle'))
    except (FileNotFoundError, ConfigurationError):
        logger.exception(
            'Failed to load AppConfig for redirect URL function. Responding with 500.',
            extra={'event': CONFIGURATION_ERROR},
        )
        return response_500()

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if not shortcode:
        logger.info(
            'Missing "shortcode" in path. Responding with 400.',
            extra={'event': MISSING_SHORTCODE},
        )
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)
    logger.debug('Client requested short URL %s.', get_short_url(shortcode, event))

    # 2- Resolve the link
    link_dao, notification_dao = build_daos(app_config, prefix=app_prefix())
    service = ShortLinkService.from_config(link_dao, notification_dao, lifecycle)
    original_url = service.handle_redirect(shortcode)
    if original_url is None:
        logger.info(
            'Link not available. Responding with 404.',
            extra={'code': shortcode, 'event': LINK_NOT_AVAILABLE},
        )
        return response_404(message='link not available')

    # 3- Redirect client to the original URL
    logger.info(
        'Redirecting client to original URL. Responding with 302.',
        extra={'code': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=original_url)
