# Lambda name (section of the AppConfig document)
LAMBDA_NAME = 'cleanup_links'

# Diagnostic statuses
SUCCESS = 'success'
ERROR = 'error'
