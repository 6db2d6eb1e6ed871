"""
Logging configuration for pidwatch.

Provides centralized logging setup with clean, concise terminal output.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from pidwatch.exceptions import SetupError


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Console output is filtered at `level`; the optional log file always
    receives DEBUG and above.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: INFO)
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    # file handler takes DEBUG; console filters at `level`
    logger.setLevel(logging.DEBUG if log_file else level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt='[%(levelname)s] %(message)s'))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_package_logging(level_name: str, log_file: Optional[Path] = None) -> None:
    """
    Re-apply level and file output to every pidwatch logger created so far.

    Module loggers are created at import time with the default level, so the
    configured level only takes effect once the config is known.

    Raises:
        ValueError: unknown level name
        SetupError: the log file cannot be created or opened
    """
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    names = [n for n in logging.root.manager.loggerDict if n == "pidwatch" or n.startswith("pidwatch.")]
    try:
        for name in names:
            setup_logger(name, level=level, log_file=log_file)
    except OSError as e:
        raise SetupError(f"Cannot open log file {log_file}: {e}") from e
