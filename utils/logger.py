# utils/logger.py
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from utils import config

LOGGER_NAME = "kitchen"


def setup_logger(log_dir: str | None = None, to_file: bool | None = None):
    """
    Configure the logger shared by the ordering core.

    Features:
    - Daily rotating log files (one file per day) when file output is on
    - Console output
    - Unified log format with timestamp and level
    - Module loggers ("kitchen.store", "kitchen.reports") propagate here
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    if to_file is None:
        to_file = config.LOG_TO_FILE

    if to_file:
        # Create log directory if not exists
        directory = Path(log_dir or config.LOG_DIR)
        directory.mkdir(parents=True, exist_ok=True)

        file_handler = TimedRotatingFileHandler(
            filename=directory / config.LOG_FILE_NAME,
            when="midnight",
            interval=1,
            backupCount=config.LOG_BACKUP_DAYS,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.info(f"Logger initialized (file output {'on' if to_file else 'off'})")
    return logger
