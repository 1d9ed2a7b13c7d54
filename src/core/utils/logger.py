import logging
import os
import sys

from pythonjsonlogger import json as pythonjson

ROOT_LOGGER_NAME = "unicart"

# Configure JSON logging once for the whole service
logger = logging.getLogger(ROOT_LOGGER_NAME)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = pythonjson.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level", "asctime": "timestamp"},
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())


def get_logger(name: str) -> logging.Logger:
    """Return a child of the service logger so records share the JSON handler."""
    return logger.getChild(name)
