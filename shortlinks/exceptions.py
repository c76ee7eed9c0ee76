"""Application-level exceptions.

Every exception carries a stable `error_code` which the lambda adapters
put into their JSON responses.

Classes:
    ShortLinksError:
        Base exception for all application-specific errors.

    CodeGenerationExhaustedError:
        Raised when no free shortcode could be allocated for a new link.

    ConfigurationError:
        Base exception for all configuration errors.

    MissingEnvironmentVariableError:
        Raised when a required environment variable is missing.

    BadConfigurationError:
        Raised when the application is configured with invalid parameters.
"""


class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlinks_error'


class CodeGenerationExhaustedError(ShortLinksError):
    """Raised when every shortcode allocation attempt collided with an existing code."""

    error_code = 'app:code_generation_exhausted_error'


class ConfigurationError(ShortLinksError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError, ValueError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
