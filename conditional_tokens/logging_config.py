"""
Logging configuration for the Conditional Tokens client.

Provides standard, detailed and JSON formatting with credential redaction.
"""

import copy
import logging
import logging.config
from typing import Optional


LOGGER_NAME = "conditional_tokens"

DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "redact": {
            "()": "conditional_tokens.utils.structured_logging.CredentialRedactionFilter"
        }
    },
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": (
                "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d "
                "- %(message)s (%(funcName)s)"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "standard",
            "filters": ["redact"],
            "stream": "ext://sys.stdout"
        }
    },
    "loggers": {
        LOGGER_NAME: {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        }
    },
    "root": {
        "level": "WARNING",
        "handlers": ["console"]
    }
}


def build_logging_config(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: bool = False
) -> dict:
    """
    Build a dictConfig for the package logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional rotating log file path
        json_format: Use JSON formatting

    Returns:
        logging.config.dictConfig-compatible dict
    """
    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    if level:
        config["loggers"][LOGGER_NAME]["level"] = level.upper()

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filters": ["redact"],
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    if json_format:
        for handler in config["handlers"].values():
            handler["formatter"] = "json"

    return config


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: bool = False
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON formatting
    """
    logging.config.dictConfig(build_logging_config(level, log_file, json_format))


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance under the package namespace.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
