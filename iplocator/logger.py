from logging import config, getLevelName, getLogger
from typing import Any

from iplocator.config import settings

LOGGER_NAME = "iplocator"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ACCESS_FORMAT = '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
DEFAULT_FORMAT = "%(levelprefix)s %(asctime)s - %(message)s"


def _uvicorn_formatter(factory: str, fmt: str) -> dict[str, Any]:
    return {"()": factory, "fmt": fmt, "datefmt": DATE_FORMAT, "use_colors": True}


def build_log_config(level: str) -> dict[str, Any]:
    """Logging config shared by the application logger and uvicorn.

    Application and uvicorn server messages go to stderr through uvicorn's
    default formatter; access lines go to stdout with the access formatter.
    """
    log_level = getLevelName(level.upper())
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "access": _uvicorn_formatter("uvicorn.logging.AccessFormatter", ACCESS_FORMAT),
            "default": _uvicorn_formatter("uvicorn.logging.DefaultFormatter", DEFAULT_FORMAT),
        },
        "handlers": {
            "access": {"class": "logging.StreamHandler", "formatter": "access", "stream": "ext://sys.stdout"},
            "default": {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stderr"},
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["default"], "level": log_level, "propagate": False},
            "uvicorn": {"handlers": ["default"], "level": log_level, "propagate": True},
            "uvicorn.access": {"handlers": ["access"], "level": log_level, "propagate": False},
            "uvicorn.error": {"level": log_level, "propagate": False},
        },
    }


log_config = build_log_config(settings.log_level)
config.dictConfig(log_config)

logger = getLogger(LOGGER_NAME)
