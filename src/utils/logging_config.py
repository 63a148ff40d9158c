"""Application logging setup."""
import logging
import sys


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure the ``src`` logger tree once and return it."""
    logger = logging.getLogger("src")
    if logger.handlers:
        return logger  # already configured
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    # streamlit's watcher is chatty at INFO
    logging.getLogger("streamlit").setLevel(logging.WARNING)
    return logger
