from linkresolver.utils import initialize_logging


initialize_logging()
