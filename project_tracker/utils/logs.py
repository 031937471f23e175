import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from project_tracker.constants import DEFAULT_LOG_FILE, LOG_BACKUP_COUNT, LOG_MAX_BYTES


def get_log_dir() -> Path:
    """Directory for log files, overridable with TRACKER_LOG_DIR."""
    log_dir = os.getenv("TRACKER_LOG_DIR")
    if log_dir:
        return Path(log_dir)
    return Path.home() / ".project_tracker" / "logs"


def setup_logger(
    log_file: str = DEFAULT_LOG_FILE,
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    logger = logging.getLogger("project_tracker")
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
    logger.setLevel(log_level)

    # Remove any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    log_dir = Path(log_dir) if log_dir else get_log_dir()
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, log_file),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    return logger
