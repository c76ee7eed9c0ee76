from shortlinks.utils.logging import initialize_logging
from shortlinks.lambdas.shorten_url.constants import LAMBDA_NAME


initialize_logging(LAMBDA_NAME)
