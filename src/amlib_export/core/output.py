"""
Unified output using Loguru.
Status messages go to the log file and to stderr; stdout is reserved for data.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_data_dir
from .console import safe_print

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path() -> Path:
    """Get the default path to the log file."""
    return get_data_dir() / "amlib-export.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and an optional stderr sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/amlib-export/amlib-export.log)
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Maximum size of log file before rotation
        backup_count: Number of rotated files to keep
        console_output: Whether to also write log records to stderr
    """
    logger.remove()

    log_path = log_file if log_file else get_log_file_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # No writable data dir: keep warnings visible and carry on
        logger.add(sys.stderr, level="WARNING", format="{level}: {message}")
        logger.warning(f"Cannot create log directory {log_path.parent}: {e}")
        return

    logger.add(
        log_path,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format=LOG_FORMAT,
        encoding="utf-8",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.debug(f"Loguru initialized: {log_path} (level={level})")


def log(message: str, level: str = "info", style: Optional[str] = None) -> None:
    """
    Unified logging: writes to the log file AND prints a status line on stderr.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
        style: Optional Rich style for the stderr line
    """
    log_func = getattr(logger, level)
    log_func(message)

    if level == "debug":
        return

    if style is None:
        style = {"warning": "yellow", "error": "red"}.get(level)
    safe_print(message, style=style)
