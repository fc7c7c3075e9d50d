"""rasterlab.utils.log – colourised logger helper

Every logger inside the package is a child of the ``rasterlab`` logger,
which owns the single colorlog handler; module loggers carry no handler of
their own and reach it through propagation. Loggers requested for names
outside the package get the handler attached directly.
"""

from __future__ import annotations

import logging
from typing import Optional

import colorlog

from rasterlab.utils import config

PACKAGE_LOGGER = "rasterlab"

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "%(log_color)s[%(levelname).1s] %(name)s: %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "white",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bold",
}


def level_from_name(name: str) -> int:
    """Translate a configured level name such as "debug"; unknown names mean INFO."""
    return LOG_LEVEL_MAP.get(name.strip().upper(), logging.INFO)


_LEVEL = level_from_name(config.get_logging_level())

_handler: Optional[logging.Handler] = None


def _build_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(LOG_FORMAT, log_colors=LOG_COLORS))
    handler.setLevel(level)
    return handler


def _in_package(name: str) -> bool:
    return name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")


def _shared_handler() -> logging.Handler:
    global _handler
    if _handler is None:
        _handler = _build_handler(_LEVEL)
    package = logging.getLogger(PACKAGE_LOGGER)
    if _handler not in package.handlers:
        package.addHandler(_handler)
        package.setLevel(_LEVEL)
    return _handler


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger that writes through the shared colour handler."""
    handler = _shared_handler()
    logger = logging.getLogger(name or PACKAGE_LOGGER)
    if not _in_package(logger.name) and handler not in logger.handlers:
        logger.addHandler(handler)
        logger.setLevel(_LEVEL)
    return logger


def set_global_log_level(level: int) -> None:
    """
    Configure the root logger with a single colour handler and set its level.
    For applications embedding rasterlab that log through the root logger.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:  # Iterate over a copy
        root_logger.removeHandler(handler)

    root_logger.addHandler(_build_handler(logging.NOTSET))
    root_logger.setLevel(level)
    root_logger.info("Log level set to %s", logging.getLevelName(level))


def set_level(debug_mode: bool) -> None:
    """Switch every logger using the shared handler between DEBUG and INFO."""
    global _LEVEL
    _LEVEL = logging.DEBUG if debug_mode else logging.INFO

    handler = _shared_handler()
    handler.setLevel(_LEVEL)
    logging.getLogger(PACKAGE_LOGGER).setLevel(_LEVEL)

    for logger in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger, logging.Logger) and handler in logger.handlers:
            logger.setLevel(_LEVEL)
