import json
import logging

from shortlinks.dao import build_daos
from shortlinks.dao.exceptions import DAOError
from shortlinks.exceptions import ConfigurationError
from shortlinks.services import CleanupSweeper, SweepReport
from shortlinks.types import LambdaEvent, LambdaContext
from shortlinks.utils import load_config, app_prefix, LifecycleConfig
from shortlinks.lambdas.cleanup_links.constants import LAMBDA_NAME, SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, report: SweepReport) -> str:
    return json.dumps(
        {
            'status': SUCCESS,
            **report.to_dict(),
            'message': f'Purged {report.deleted} expired links ({report.deactivated} deactivated)',
        }
    )


def response_error(*, error: DAOError | ConfigurationError) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to purge expired links',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> str:
    """Deactivate and purge expired links

    Triggered by an EventBridge schedule (rate = cleanup_interval_seconds).

    This Lambda handler follows this procedure:
    - Step 1: Run one cleanup sweep
    - Step 2: Respond with success or error

    Diagnostic responses:
        success:
            status: success
            fetched: <expired links found>
            deactivated: <links deactivated by this sweep>
            deleted: <links purged>
            message: Purged <deleted> expired links (<deactivated> deactivated)
        error:
            status: error
            message: Failed to purge expired links
            reason: <reason>
            error: <error class name> (e.g. DataStoreError, MissingEnvironmentVariableError)

    Args:
        event (LambdaEvent):
            EventBridge event payload.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        str:
            JSON diagnostic document.

    Example:
        >>> response = json.loads(lambda_handler({}, None))
        >>> response['status']
        'success'
        >>> response['deleted']
        3
    """
    try:
        app_config = load_config(LAMBDA_NAME)
        lifecycle = LifecycleConfig.from_dict(app_config.get('lifecycle'))
        link_dao, notification_dao = build_daos(app_config, prefix=app_prefix())
        sweeper = CleanupSweeper(link_dao, notification_dao, interval_seconds=lifecycle.cleanup_interval_seconds)
        report = sweeper.tick()
    except (DAOError, ConfigurationError) as error:
        logger.exception(
            'Failed to purge expired links.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Purged %s expired links.',
            report.deleted,
            extra={'event': SUCCESS, **report.to_dict()},
        )
        return response_success(report=report)
