from shortlinks.utils.config import app_env, app_name, app_prefix, load_config, LifecycleConfig
from shortlinks.utils.helpers import base_url, get_short_url, get_header, get_cookie, require_environment
from shortlinks.utils.shortener import generate_shortcode
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'LifecycleConfig',
    'base_url',
    'get_short_url',
    'get_header',
    'get_cookie',
    'require_environment',
    'initialize_logging',
]
