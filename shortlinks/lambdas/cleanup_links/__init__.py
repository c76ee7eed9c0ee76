from shortlinks.utils.logging import initialize_logging
from shortlinks.lambdas.cleanup_links.constants import LAMBDA_NAME


initialize_logging(LAMBDA_NAME)
