"""Where is this process running?

Functions:
    running_locally() -> bool:
        True under `sam local invoke` or with APP_ENV=local. Lambda handlers
        then let unexpected exceptions surface instead of answering 500,
        and config is read from the local AppConfig agent.

    lambda_function_name() -> str | None:
        Deployed function name on AWS Lambda, None elsewhere.

Example:
    >>> from shortlinks.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os

from shortlinks.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV, AWS_LAMBDA_FUNCTION_NAME_ENV


def running_locally() -> bool:
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'


def lambda_function_name() -> str | None:
    # Set by the Lambda runtime (and by SAM local), e.g. 'shortlinks-prod-RedirectUrlFunction-1A2B3C'
    return os.getenv(AWS_LAMBDA_FUNCTION_NAME_ENV) or None
