import logging
import os
import sys

LOG_LEVEL_ENV = "SAFE_IMAGE_LOG_LEVEL"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _coerce_level(level):
    """Accept logging constants or names like 'debug'."""
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"Unknown log level: {level}")
        return value
    return int(level)


def setup_logging(name="safe_image", level=None, stream=None):
    """
    Configures logging for the widget library and demo.

    The level comes from the argument, then $SAFE_IMAGE_LOG_LEVEL, then INFO.
    Handlers already installed by the host application are reused.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, logging.INFO)
    level = _coerce_level(level)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    else:
        for handler in root_logger.handlers:
            if handler.formatter is None:
                handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger


def get_logger(name="safe_image"):
    return logging.getLogger(name)
