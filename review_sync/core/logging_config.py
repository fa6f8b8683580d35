import logging.config
import sys

from review_sync.config import settings


def build_logging_config(level: str = "INFO", fmt: str = "console") -> dict:
    formatter = "json" if fmt == "json" else "console"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "console": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "review_sync": {
                "level": level,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
    }


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    logging.config.dictConfig(
        build_logging_config(level or settings.LOG_LEVEL, fmt or settings.LOG_FORMAT)
    )
