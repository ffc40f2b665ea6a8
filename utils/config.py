# utils/config.py
"""Runtime configuration defaults for logging and reporting.

Every value can be overridden through an environment variable so the
same code runs on a branch tablet, in the kitchen or in tests.
"""
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


LOG_DIR = os.getenv("KITCHEN_LOG_DIR", "data/logs")
LOG_FILE_NAME = "kitchen.log"
LOG_LEVEL = os.getenv("KITCHEN_LOG_LEVEL", "INFO").upper()
LOG_BACKUP_DAYS = _env_int("KITCHEN_LOG_BACKUP_DAYS", 7)
LOG_TO_FILE = os.getenv("KITCHEN_LOG_TO_FILE", "1") not in ("0", "false", "no")

# 0 = Monday ... 6 = Sunday, same numbering as datetime.weekday()
WEEK_START = _env_int("KITCHEN_WEEK_START", 0)
if not 0 <= WEEK_START <= 6:
    raise ValueError("KITCHEN_WEEK_START must be between 0 and 6")
