"""
Logging configuration for the WebSyncer service.

Sets up console + rotating file logging on the ``websyncer`` logger.
All modules should use:
    import logging
    logger = logging.getLogger(__name__)

Provider error bodies and store failures are only ever written here,
never returned to clients.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at INFO
_CHATTY_LOGGERS = ("urllib3", "httpx")


def setup_logging(
    log_dir: Path | None = None,
    level: Union[int, str] = logging.INFO,
    log_file: str = "websyncer.log",
) -> logging.Logger:
    """
    Configure logging for the service and return the package logger.

    Args:
        log_dir: Directory for the rotating log file. If None, only the
            console handler is installed.
        level: Minimum log level, as a number or a name such as "DEBUG".
        log_file: Name of the log file inside log_dir.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    package_logger = logging.getLogger("websyncer")
    package_logger.setLevel(level)

    # Repeated calls (uvicorn reload, tests) must not stack handlers
    if package_logger.handlers:
        return package_logger

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    package_logger.addHandler(console)

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            rotating = logging.handlers.RotatingFileHandler(
                filename=log_dir / log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            rotating.setLevel(level)
            rotating.setFormatter(formatter)
            package_logger.addHandler(rotating)
        except OSError as e:
            package_logger.warning("Could not set up file logging: %s", e)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger
