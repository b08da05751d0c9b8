"""Logging configuration for TransVi."""

import logging
import sys
from logging.handlers import RotatingFileHandler
import os
from .utils import ensure_dir_exists

# Segment workers log concurrently, so every line carries its thread name.
LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(threadName)s] [%(name)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024 # 10 MB
LOG_BACKUP_COUNT = 5

def setup_logging(log_level: int = logging.INFO, log_dir: str = "logs", log_file: str = "transvi.log") -> None:
    """
    Sends log records to stdout and to a rotating file `log_dir/log_file`.

    Calling it again replaces the handlers installed by the previous call,
    which is how the CLI switches to the log location from the config file.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    root.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    log_path = os.path.join(log_dir, log_file)
    try:
        ensure_dir_exists(log_dir)
        file_handler = RotatingFileHandler(log_path, maxBytes=MAX_LOG_BYTES,
                                           backupCount=LOG_BACKUP_COUNT, encoding='utf-8')
    except Exception as e:
        # Console logging still works without the file
        root.error(f"Failed to set up file logging at {log_path}: {e}")
        return
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    root.info(f"Logging initialized. Log file: {log_path}")

def level_from_name(name: str) -> int:
    """Maps a level name such as "debug" to its logging constant, defaulting to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
