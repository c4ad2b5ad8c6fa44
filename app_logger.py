import logging

from config import LOG_LEVEL

APP_LOGGER_NAME = "printing_orders"


def setup_logging() -> logging.Logger:
    """Library-friendly: do NOT touch root or add real handlers.

    Ensure the application logger exists, set its level, and add a NullHandler
    so importing the app without logging configured stays quiet.
    """
    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    logger.propagate = True
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger(APP_LOGGER_NAME)
    return base.getChild(name) if name else base


logger = setup_logging()
