"""Parses SRT subtitle fragments produced by the transcriber."""

import logging
from datetime import datetime
from typing import List

from .models import SubtitleEntry
from .exceptions import SubtitleParseError

logger = logging.getLogger(__name__)

TIMECODE_ARROW = "-->"

# Parser states
EXPECT_INDEX = "index"
EXPECT_TIMECODE = "timecode"
EXPECT_TEXT = "text"
SKIP = "skip"


def parse_timecode(value: str) -> int:
    """
    Converts an SRT timecode (HH:MM:SS,mmm) to milliseconds.

    The clock part must be a valid time of day. The millisecond part only
    has to be an integer; it is not range-checked.

    Raises:
        SubtitleParseError: If either component cannot be parsed.
    """
    parts = value.strip().split(",")
    if len(parts) != 2:
        raise SubtitleParseError(f"Invalid time format: {value!r}")
    clock, millis = parts
    try:
        t = datetime.strptime(clock, "%H:%M:%S")
        ms = int(millis)
    except ValueError as e:
        raise SubtitleParseError(f"Invalid time format: {value!r}: {e}") from e
    return ((t.hour * 60 + t.minute) * 60 + t.second) * 1000 + ms


def parse_timecode_line(line: str):
    """Splits a `start --> end` line and returns (start, end) in milliseconds."""
    parts = line.split(TIMECODE_ARROW)
    if len(parts) != 2:
        raise SubtitleParseError(f"Invalid timecode line: {line!r}")
    return parse_timecode(parts[0]), parse_timecode(parts[1])


def parse_srt(text: str, offset_ms: int = 0) -> List[SubtitleEntry]:
    """
    Parses SRT text into subtitle entries, shifting every timestamp by `offset_ms`.

    Malformed blocks are skipped; the rest of the text is still parsed.

    Args:
        text: Raw SRT content.
        offset_ms: Milliseconds added to both start and end of every entry.

    Returns:
        Entries in the order they appear in the text.
    """
    entries: List[SubtitleEntry] = []
    state = EXPECT_INDEX
    index = start = end = None
    lines: List[str] = []

    def finish_block():
        if state == EXPECT_TEXT and lines:
            entries.append(SubtitleEntry(index=index, start_ms=start + offset_ms, end_ms=end + offset_ms,
                                         text="\n".join(lines)))
        elif state != EXPECT_INDEX:
            logger.debug(f"Skipping malformed subtitle block (stopped in state '{state}')")

    for raw_line in text.lstrip("\ufeff").replace("\r\n", "\n").split("\n"):
        line = raw_line.rstrip("\r")
        if not line.strip():
            finish_block()
            state, lines = EXPECT_INDEX, []
            continue

        if state == EXPECT_INDEX:
            try:
                index = int(line.strip())
                state = EXPECT_TIMECODE
            except ValueError:
                logger.debug(f"Invalid subtitle index: {line!r}")
                state = SKIP
        elif state == EXPECT_TIMECODE:
            try:
                start, end = parse_timecode_line(line)
                state = EXPECT_TEXT
            except SubtitleParseError as e:
                logger.debug(str(e))
                state = SKIP
        elif state == EXPECT_TEXT:
            lines.append(line)
        # SKIP: wait for the next blank line

    finish_block()
    return entries
