# Lambda name (section of the AppConfig document)
LAMBDA_NAME = 'shorten_url'

# Log events / response error codes
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_ORIGINAL_URL = 'MISSING_ORIGINAL_URL'
INVALID_MAX_CLICKS = 'INVALID_MAX_CLICKS'
CODE_GENERATION_EXHAUSTED = 'CODE_GENERATION_EXHAUSTED'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
USER_ID_ISSUED = 'USER_ID_ISSUED'
LINK_SHORTENED = 'LINK_SHORTENED'
