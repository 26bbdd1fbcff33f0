import logging
import sys

from dentalbill.core.config import settings

# Client libraries that log every outgoing request at INFO
NOISY_LOGGERS = ("twilio.http_client", "botocore", "boto3", "httpx")

def setup_logging():
    """
    Configure the "dentalbill" logger: one stdout handler at LOG_LEVEL, and the
    SMS, storage and HTTP client libraries held back to warnings.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("dentalbill")
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    if not logger.handlers:
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger

logger = setup_logging()
