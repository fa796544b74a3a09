"""
PNGFuse Logger
Logging setup shared by the engine and the command line tool
"""

import logging
import sys
import time
from functools import wraps
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Callable

from config import LOGGING_SETTINGS


def setup_logger(name, level=None):
    """
    Create and configure a logger

    Args:
        name: logger name (usually __name__)
        level: log level name (taken from config when omitted)

    Returns:
        logging.Logger: Logger object
    """
    logger = logging.getLogger(name)

    # Never attach handlers twice
    if logger.handlers:
        return logger

    if level is None:
        level = LOGGING_SETTINGS.get('level', 'WARNING')
    logger.setLevel(getattr(logging, level))

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # stderr keeps listings printed on stdout machine-readable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if LOGGING_SETTINGS.get('log_to_file'):
        log_dir = Path(LOGGING_SETTINGS.get('log_dir', 'logs'))
        log_dir.mkdir(exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOGGING_SETTINGS.get('log_file', 'pngfuse.log'),
            maxBytes=LOGGING_SETTINGS.get('max_bytes', 2 * 1024 * 1024),
            backupCount=LOGGING_SETTINGS.get('backup_count', 3),
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_operation(arg, operation=None, status="SUCCESS", details=None):
    """Decorator or direct helper that records the status of an operation.

    Two forms are supported:

    * decorator: ``@log_operation("Fuse")``
    * direct call: ``log_operation(logger, "Clean", status="FAILED")``
    """

    if operation is None and isinstance(arg, str):
        operation_name = arg

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):
                logger = logging.getLogger(func.__module__)
                logger.info("[%s] Started", operation_name)
                started = time.perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception as exc:
                    logger.error("[%s] FAILED: %s", operation_name, exc)
                    raise
                logger.info("[%s] Completed in %.3fs", operation_name, time.perf_counter() - started)
                return result

            return wrapper

        return decorator

    if operation is not None:
        logger = arg
        msg = f"[{operation}] {status}"
        if details:
            msg += f" ({details})"

        if str(status).upper() == "FAILED":
            logger.error(msg)
        else:
            logger.info(msg)
        return None

    raise TypeError(
        "log_operation must be used as a decorator with an operation name "
        "or called with a logger and an operation name"
    )
