# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""
Shared logging utilities for netcompat.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Generator, Optional

from .logger import LOGGER_NAME


def safe_logger(instance: Any = None, default_name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get logger from instance (or the instance itself) or return the project logger.

    Accepts anything that quacks like a logger: a logging.Logger, a
    LoggerAdapter, or an object carrying one in its `logger` attribute.
    """
    if isinstance(instance, (logging.Logger, logging.LoggerAdapter)):
        return instance  # type: ignore[return-value]
    lg = getattr(instance, "logger", None)
    if isinstance(lg, (logging.Logger, logging.LoggerAdapter)):
        return lg  # type: ignore[return-value]
    return logging.getLogger(default_name)


@contextmanager
def log_step(logger: logging.Logger, description: str, *, level: int = logging.INFO) -> Generator[None, None, None]:
    """
    Context manager for logging and timing operation steps.

    Logs the start of an operation, executes the block, then logs
    completion with elapsed time. Logs the error and re-raises on exception.

    Example:
        with log_step(logger, "Reading /etc/sysconfig/network"):
            translator.get_interfaces(path)
    """
    t0 = time.monotonic()
    logger.log(level, "%s ...", description)
    try:
        yield
    except Exception as e:
        logger.error("%s failed (%.2fs): %s", description, time.monotonic() - t0, e)
        raise
    logger.log(level, "%s done (%.2fs)", description, time.monotonic() - t0)


def plural(n: int, word: str, suffix: Optional[str] = None) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}{suffix if suffix is not None else 's'}"
