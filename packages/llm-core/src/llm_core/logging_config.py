"""Centralized logging configuration for the application."""

import sys
from pathlib import Path

from loguru import logger


def setup_logging(log_name: str = "book_drafter", level: str = "INFO", log_dir: Path = Path("logs")) -> logger:
    """
    Configure logging for the application.

    Library modules only emit records; call this once from an entry point.

    Args:
        log_name: Base name for the log file
        level: Minimum level for both sinks
        log_dir: Directory that receives the rotating log file

    Returns:
        logger: Configured logger instance
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove any existing handlers
    logger.remove()

    logger.add(
        sink=log_dir / f"{log_name}.log",
        rotation="10 MB",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

    logger.add(
        sink=sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>",
    )

    return logger
