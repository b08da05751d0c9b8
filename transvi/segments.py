"""Discovers the audio segments written by the splitter."""

import logging
import os
import re
from typing import List, Optional

from .models import Segment
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

SEGMENT_PREFIX = "part"
AUDIO_EXTENSION = ".wav"
SUBTITLE_EXTENSION = ".srt"

_SEGMENT_NAME = re.compile(rf"^{SEGMENT_PREFIX}(\d+){re.escape(AUDIO_EXTENSION)}$")
_FRAGMENT_NAME = re.compile(rf"^{SEGMENT_PREFIX}(\d+){re.escape(SUBTITLE_EXTENSION)}$")


def _ordinal(pattern: "re.Pattern", filename: str) -> Optional[int]:
    match = pattern.match(filename)
    if not match:
        return None
    return int(match.group(1))


def segment_ordinal(filename: str) -> Optional[int]:
    """Ordinal of an audio segment filename (`part007.wav` -> 7), or None."""
    return _ordinal(_SEGMENT_NAME, filename)


def fragment_ordinal(filename: str) -> Optional[int]:
    """Ordinal of a subtitle fragment filename (`part007.srt` -> 7), or None."""
    return _ordinal(_FRAGMENT_NAME, filename)


def fragment_filename(segment_filename: str) -> str:
    """Name of the subtitle fragment produced for an audio segment."""
    return os.path.splitext(segment_filename)[0] + SUBTITLE_EXTENSION


def enumerate_segments(audio_dir: str, subtitle_dir: str) -> List[Segment]:
    """
    Lists the audio segments in `audio_dir`.

    Files that don't match `partNNN.wav`, and segments numbered below 1, are
    skipped. The result is sorted by ordinal.

    Args:
        audio_dir: Directory the splitter wrote segments into.
        subtitle_dir: Directory each segment's subtitle fragment should go to.

    Returns:
        One Segment per matching file.

    Raises:
        FileSystemError: If `audio_dir` is missing or cannot be listed.
    """
    logger.info(f"Scanning directory for audio segments: {audio_dir}")
    try:
        names = os.listdir(audio_dir)
    except OSError as e:
        logger.error(f"Error walking {audio_dir} directory: {e}")
        raise FileSystemError(f"Could not list segment directory {audio_dir}: {e}") from e

    segments = []
    for name in names:
        path = os.path.join(audio_dir, name)
        if os.path.isdir(path):
            continue
        ordinal = segment_ordinal(name)
        if ordinal is None:
            logger.debug(f"Ignoring non-segment file: {name}")
            continue
        if ordinal < 1:
            logger.warning(f"Skipping invalid or zero index in filename: {name}")
            continue
        segments.append(Segment(
            ordinal=ordinal,
            input_path=path,
            output_path=os.path.join(subtitle_dir, fragment_filename(name)),
        ))

    segments.sort(key=lambda s: s.ordinal)
    logger.info(f"Found {len(segments)} audio segments.")
    return segments
