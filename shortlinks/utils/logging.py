"""JSON logging for the shortlinks lambdas and the cleanup sweeper

Call `initialize_logging(<lambda name>)` once per process, before anything
logs. The lambda packages do it in their `__init__.py`.

Every line written to stdout is one JSON object. Fields passed through
`extra=` land at the top level next to the standard ones, and every line
carries the environment and the lambda it came from:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinks.services.short_link_service",
    "message": "Redirecting to original URL.",
    "app_env": "prod",
    "lambda": "redirect_url",
    "code": "aB3xY9",
    "event": "REDIRECT_SUCCESS"
}

botocore, boto3 and urllib3 only log warnings and above; their debug output
would otherwise bury the link lifecycle events.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from shortlinks.utils.config import app_env
from shortlinks.utils.runtime import lambda_function_name
from shortlinks.utils.constants import LOG_LEVEL_ENV


QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord, its `extra` fields and fixed per-process fields as JSON

    Attributes:
        static_fields (dict[str, Any]):
            Fields added to every line (e.g. app_env, lambda). Fields of the
            record itself win on a name clash.
    """

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def __init__(self, static_fields: dict[str, Any] | None = None):
        super().__init__()
        self.static_fields = {k: v for k, v in (static_fields or {}).items() if v is not None}

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.static_fields,
        }

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        # datetimes and other non-JSON values in `extra` are rendered with str()
        return json.dumps(log, default=str)


def initialize_logging(lambda_name: str | None = None) -> None:
    """Route every logger to stdout through JsonFormatter

    Args:
        lambda_name (str | None):
            Logical lambda name (e.g. 'redirect_url'), added to every line.
            The deployed function name is added too when running on AWS.
    """
    log_level = os.getenv(LOG_LEVEL_ENV, 'INFO').upper()
    static_fields = {
        'app_env': app_env(),
        'lambda': lambda_name,
        'function': lambda_function_name(),
    }
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'static_fields': static_fields,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
