"""Logging bootstrap for autofold processes."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAMESPACE = "autofold"
LOG_FILE_NAME = "autofold.log"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    log_dir: Path,
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> Path:
    """Configure file and console logging for the autofold namespace.

    Logs are written to `{log_dir}/autofold.log` with automatic rotation
    (max 5MB per file, 3 backup files). Console output goes to stderr so it
    never mixes with command output on stdout.

    Args:
        log_dir: Directory for the log file. Created if it doesn't exist.
        level: Logging level for file output.
        console_level: Logging level for console output.

    Returns:
        Path to the log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))

    autofold_logger = logging.getLogger(LOGGER_NAMESPACE)
    autofold_logger.setLevel(min(level, console_level))

    # Reconfiguring replaces the previous handlers
    for handler in autofold_logger.handlers:
        handler.close()
    autofold_logger.handlers.clear()

    autofold_logger.addHandler(file_handler)
    autofold_logger.addHandler(console_handler)
    autofold_logger.propagate = False

    autofold_logger.debug("Logging configured: %s", log_file)
    return log_file
