# Default link TTL duration (added to creation time to compute expires_at)
ONE_DAY_SECONDS = 86_400  # 60 * 60 * 24
DEFAULT_LINK_TTL_SECONDS = ONE_DAY_SECONDS

# Default delay between two cleanup sweeps
DEFAULT_CLEANUP_INTERVAL_SECONDS = 60

# Shortcode allocation
SHORTCODE_LENGTH = 6
MAX_SHORTCODE_ATTEMPTS = 5

# Scope in which generated shortcodes must be unique
CODE_SCOPE_USER = 'user'
CODE_SCOPE_GLOBAL = 'global'
DEFAULT_CODE_SCOPE = CODE_SCOPE_USER

# User identity cookie issued by the HTTP boundary
USER_ID_HEADER = 'X-User-ID'
USER_ID_COOKIE = 'SHORTLINK_USER'
USER_ID_COOKIE_MAX_AGE = 31_536_000  # 60 * 60 * 24 * 365

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
AWS_LAMBDA_FUNCTION_NAME_ENV = 'AWS_LAMBDA_FUNCTION_NAME'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig: identifiers of the deployed configuration document
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
