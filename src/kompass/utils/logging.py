"""Logging configuration for kompass."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(
    level: str = "WARNING",
    log_dir: Path | None = None,
    console: bool = True,
) -> logging.Logger:
    """Set up logging for kompass.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the log file, or None for no file logging
        console: Whether to log to stderr

    Returns:
        Configured logger
    """
    logger = logging.getLogger("kompass")
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()

    # Console handler with rich formatting; stdout is reserved for output
    if console:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(logging.DEBUG)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "kompass.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "kompass") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
