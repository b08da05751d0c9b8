"""Handles formatting subtitle entries into subtitle files (SRT)."""

import logging
import os
from abc import ABC, abstractmethod
from typing import List

from .models import SubtitleEntry
from .exceptions import FormattingError
from .utils import format_time_srt

logger = logging.getLogger(__name__)

class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    @abstractmethod
    def format_entries(self, entries: List[SubtitleEntry]) -> str:
        """
        Renders entries as subtitle text, numbering them 1..N in list order.

        Args:
            entries: Entries already in output order.

        Returns:
            The subtitle document as a string.
        """
        pass

    def write(self, entries: List[SubtitleEntry], output_path: str) -> None:
        """
        Formats entries and writes them to `output_path` (UTF-8).

        Raises:
            FormattingError: If the file cannot be written.
        """
        logger.info(f"Writing {len(entries)} subtitle blocks to {output_path}")
        content = self.format_entries(entries)
        parent = os.path.dirname(output_path)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to write subtitle file to {output_path}: {e}", exc_info=True)
            raise FormattingError(f"Could not write subtitle file {output_path}: {e}") from e
        logger.info(f"Successfully wrote {len(entries)} subtitle blocks to {output_path}")


class SRTFormatter(SubtitleFormatter):
    """Formats subtitles into the SRT (SubRip Text) format."""

    def format_entry(self, number: int, entry: SubtitleEntry) -> str:
        """Renders one block. `entry.index` is ignored in favour of `number`."""
        start_time_str = format_time_srt(entry.start_ms)
        end_time_str = format_time_srt(entry.end_ms)
        return f"{number}\n{start_time_str} --> {end_time_str}\n{entry.text}\n\n"

    def format_entries(self, entries: List[SubtitleEntry]) -> str:
        return "".join(self.format_entry(i, entry) for i, entry in enumerate(entries, start=1))
