"""
Logger Configuration
Shared logging setup for the curation engine.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler
from rich.console import Console


# Shared console instance
console = Console(stderr=True)

# Log formats
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

# Default log directory
LOG_DIR = Path(__file__).parent.parent / "logs"

ROOT_LOGGER_NAME = "calm_curator"


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or "").strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger.

    Args:
        name: Logger name
        level: Log level, as an int or a level name such as "DEBUG"
        log_file: Optional file name, created under LOG_DIR
        use_rich: Use Rich for console output

    Returns:
        The configured Logger
    """
    level = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid stacking handlers on repeat calls
    if logger.handlers:
        return logger

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_path = LOG_DIR / log_file

        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger


def setup_from_settings() -> logging.Logger:
    """Configure the root curator logger from CURATION_LOG_* settings."""
    from config import get_logging_settings

    settings = get_logging_settings()
    return setup_logger(
        ROOT_LOGGER_NAME,
        level=settings.level,
        log_file=settings.file,
        use_rich=settings.use_rich,
    )


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger, configuring it with defaults on first use.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        return setup_logger(name)

    return logger


def get_audit_logger() -> logging.Logger:
    """Logger that receives pass log entries."""
    return get_logger(f"{ROOT_LOGGER_NAME}.audit")
