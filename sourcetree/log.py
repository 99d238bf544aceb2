# sourcetree/log.py
"""
Logging setup shared by the core and the Qt app.

Modules log through ``logging.getLogger(__name__)``; call
``configure_logging`` once at startup before anything interesting happens.
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAMES = ("sourcetree", "sourcetree_app")

RELEASE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DEBUG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s:%(lineno)d - %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_to_stdout: bool = True,
) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(DEBUG_FORMAT if level <= logging.DEBUG else RELEASE_FORMAT)
    handlers = []
    if log_to_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        handlers.append(logging.FileHandler(str(log_file), mode="a", encoding="utf-8"))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
