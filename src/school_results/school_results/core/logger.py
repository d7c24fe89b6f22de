from __future__ import annotations

import logging
import os
import sys

_logger = logging.getLogger("school_results")
if not _logger.handlers:
    _logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Child of the package logger.

    Module names resolve the same way whether the package is imported as
    ``school_results.*`` or through the ``src.`` path used by the tests.
    """
    if not name:
        return _logger
    return _logger.getChild(name.rsplit("school_results.", 1)[-1])


def set_level(level: str) -> None:
    _logger.setLevel(str(level).upper())
