from shortlinks.utils.logging import initialize_logging
from shortlinks.lambdas.redirect_url.constants import LAMBDA_NAME


initialize_logging(LAMBDA_NAME)
