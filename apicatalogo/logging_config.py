"""Logging configuration helpers for API Catálogo."""

from __future__ import annotations

import logging
import os
from typing import Final

APP_LOGGER: Final[str] = "apicatalogo"

_DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ACCESS_FORMAT: Final[str] = '%(client_addr)s - "%(request_line)s" %(status_code)s'
_DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"


def resolve_level(level_name: str | None, default: int = logging.INFO) -> int:
    """Translate a log level name or number into a logging level."""

    if not level_name:
        return default

    value = level_name.strip()
    if value.isdigit():
        return int(value)

    numeric = getattr(logging, value.upper(), None)
    if isinstance(numeric, int):
        return numeric

    return default


def _attach_console_handler(
    logger: logging.Logger, fmt: str, datefmt: str | None
) -> None:
    # subclasses such as FileHandler or capture handlers do not count
    if any(type(existing) is logging.StreamHandler for existing in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt, datefmt))
    logger.addHandler(handler)


def configure_logging(*, debug: bool = False) -> None:
    """Stream application, access and SQL logs to the console."""

    default_level = logging.DEBUG if debug else logging.INFO
    level = resolve_level(os.getenv("LOG_LEVEL"), default_level)

    app_logger = logging.getLogger(APP_LOGGER)
    _attach_console_handler(app_logger, _DEFAULT_FORMAT, _DEFAULT_DATEFMT)
    app_logger.setLevel(level)
    app_logger.propagate = False

    # uvicorn never logs access lines below INFO
    access_logger = logging.getLogger("uvicorn.access")
    _attach_console_handler(access_logger, _ACCESS_FORMAT, None)
    access_logger.setLevel(max(level, logging.INFO))
    access_logger.propagate = False

    sql_logger = logging.getLogger("sqlalchemy.engine")
    sql_logger.setLevel(logging.INFO if debug else logging.WARNING)
