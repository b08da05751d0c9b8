"""Utility functions for TransVi."""

import os
import shutil
import logging
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Safe to call from several threads for the same path.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    if os.path.exists(dir_path) and not os.path.isdir(dir_path):
        raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    try:
        if not os.path.isdir(dir_path):
            os.makedirs(dir_path, exist_ok=True)
            logger.info(f"Created directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def remove_file(file_path: str) -> bool:
    """Best-effort file removal. Returns False (and logs) when removal fails."""
    try:
        os.remove(file_path)
        logger.debug(f"Removed file: {file_path}")
        return True
    except OSError as e:
        logger.warning(f"Could not remove file {file_path}: {e}")
        return False

def remove_dir(dir_path: str) -> bool:
    """Best-effort recursive directory removal. A missing directory counts as removed."""
    if not os.path.exists(dir_path):
        return True
    try:
        shutil.rmtree(dir_path)
        logger.info(f"Removed directory: {dir_path}")
        return True
    except OSError as e:
        logger.error(f"Error deleting directory {dir_path}: {e}")
        return False

def format_time_srt(milliseconds: int) -> str:
    """
    Formats milliseconds into SRT time format HH:MM:SS,mmm.

    Args:
        milliseconds: Time in whole milliseconds.

    Returns:
        Formatted time string.
    """
    milliseconds = max(int(milliseconds), 0)
    hrs = milliseconds // 3600000
    milliseconds %= 3600000
    mins = milliseconds // 60000
    milliseconds %= 60000
    secs = milliseconds // 1000
    milliseconds %= 1000
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{milliseconds:03d}"
