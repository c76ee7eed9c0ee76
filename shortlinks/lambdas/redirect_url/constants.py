# Lambda name (section of the AppConfig document)
LAMBDA_NAME = 'redirect_url'

# Log events / response error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
LINK_NOT_AVAILABLE = 'LINK_NOT_AVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
