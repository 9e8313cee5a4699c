import logging
import sys


def setup_logger(name="mintrans", level=logging.INFO):
    """Set up and return the application logger with a console handler"""
    logger = logging.getLogger(name)

    # setup_logger may run again after settings change; only swap the level then
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)

    return logger


def preview(text: str, limit: int = 30) -> str:
    """Shorten user text before it reaches a log line"""
    text = (text or "").replace("\n", " ")
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
