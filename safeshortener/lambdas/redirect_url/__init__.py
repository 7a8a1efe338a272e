from safeshortener.utils import initialize_logging


initialize_logging()
