"""Logging configuration shared by the API server and the CLI."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO"):
    """Attach a single stream handler to the package logger.

    Safe to call more than once; later calls only adjust the level.
    """
    global _configured
    logger = logging.getLogger("people_network")
    logger.setLevel(level)
    if _configured:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    _configured = True
    return logger
