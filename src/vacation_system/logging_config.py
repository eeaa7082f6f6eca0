"""Logging configuration.

Modules log through ``logging.getLogger(__name__)``; this sets up the handlers
once at application start.
"""

from __future__ import annotations

import logging
import logging.config


def build_logging_config(*, level: str = "INFO", fmt: str = "text") -> dict:
    formatter = "json" if fmt == "json" else "standard"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            "vacation_system": {"handlers": ["console"], "level": level.upper(), "propagate": False},
            "mysql.connector": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        },
    }


def setup_logging(*, level: str = "INFO", fmt: str = "text") -> logging.Logger:
    logging.config.dictConfig(build_logging_config(level=level, fmt=fmt))
    logger = logging.getLogger("vacation_system")
    logger.debug("Logging initialized (level=%s, format=%s)", level, fmt)
    return logger
