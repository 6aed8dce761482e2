"""
Unified output system using Loguru.
User-facing messages go to stdout and the log file; diagnostics go to the file only.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_data_dir

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"
CONSOLE_FORMAT = "<level>{level}</level>: {message}"


def get_log_file_path() -> Path:
    """Get the default path to the log file."""
    return get_data_dir() / "camelot-sort.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and an optional stderr sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/camelot-sort/camelot-sort.log)
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        console_output: Also emit log records to stderr
    """
    log_file = Path(log_file) if log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level,
        format=FILE_FORMAT,
        encoding="utf-8",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log file AND prints for the user.

    Warnings and errors are printed to stderr, everything else to stdout.

    Args:
        message: User-facing message
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    if level == "debug":
        return
    stream = sys.stderr if level in ("warning", "error") else sys.stdout
    print(message, file=stream)
