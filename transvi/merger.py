"""Shifts per-segment subtitle fragments into track time and merges them into one file."""

import logging
import os
from typing import List, Optional, Tuple

from .models import SubtitleEntry, segment_offset_ms
from .segments import SUBTITLE_EXTENSION, fragment_ordinal
from .srt_parser import parse_srt
from .subtitle_formatter import SubtitleFormatter, SRTFormatter
from .exceptions import MergeError, FormattingError
from .utils import remove_file

logger = logging.getLogger(__name__)

class SubtitleMerger:
    """
    Builds the final subtitle track from the fragments in a directory.

    Each fragment `partNNN.srt` is shifted by (NNN - 1) segment lengths,
    all entries are sorted by start time and renumbered from 1.
    """

    def __init__(self, formatter: Optional[SubtitleFormatter] = None):
        self.formatter = formatter or SRTFormatter()

    def list_srt_files(self, subtitle_dir: str) -> List[str]:
        """Names of all `.srt` files in `subtitle_dir`; empty if the directory is missing."""
        if not os.path.isdir(subtitle_dir):
            return []
        try:
            names = os.listdir(subtitle_dir)
        except OSError as e:
            raise MergeError(f"Could not list subtitle directory {subtitle_dir}: {e}") from e
        return [name for name in names
                if name.endswith(SUBTITLE_EXTENSION) and os.path.isfile(os.path.join(subtitle_dir, name))]

    def find_fragments(self, subtitle_dir: str) -> List[Tuple[int, str]]:
        """
        Returns (ordinal, path) for every usable fragment, ordered by ordinal.

        Fragments whose name carries no positive ordinal are skipped with a
        warning. A missing directory yields no fragments.
        """
        if not os.path.isdir(subtitle_dir):
            logger.warning(f"Subtitle directory not found, nothing to merge: {subtitle_dir}")
            return []

        fragments = []
        for name in self.list_srt_files(subtitle_dir):
            path = os.path.join(subtitle_dir, name)
            ordinal = fragment_ordinal(name)
            if ordinal is None or ordinal < 1:
                logger.warning(f"Skipping invalid or zero index in filename: {name}")
                continue
            fragments.append((ordinal, path))

        fragments.sort()
        return fragments

    def load_fragment(self, ordinal: int, path: str) -> List[SubtitleEntry]:
        """Parses one fragment, shifted to track time, with negative times clamped to zero."""
        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as f:
                content = f.read()
        except OSError as e:
            raise MergeError(f"Could not read subtitle fragment {path}: {e}") from e

        entries = parse_srt(content, offset_ms=segment_offset_ms(ordinal))
        for entry in entries:
            entry.start_ms = max(entry.start_ms, 0)
            entry.end_ms = max(entry.end_ms, 0)
        logger.debug(f"Loaded {len(entries)} entries from {path}")
        return entries

    def collect(self, subtitle_dir: str) -> List[SubtitleEntry]:
        """All entries from all fragments, stably sorted by start time."""
        entries: List[SubtitleEntry] = []
        fragments = self.find_fragments(subtitle_dir)
        for ordinal, path in fragments:
            entries.extend(self.load_fragment(ordinal, path))
        entries.sort(key=lambda e: e.start_ms)
        logger.info(f"Collected {len(entries)} subtitle entries from {len(fragments)} fragments")
        return entries

    def merge(self, subtitle_dir: str, output_path: str) -> List[SubtitleEntry]:
        """
        Writes the merged track to `output_path`, then deletes the fragments.
        `output_path` itself is never deleted, even when it sits in `subtitle_dir`.

        Args:
            subtitle_dir: Directory containing the `partNNN.srt` fragments.
            output_path: Path of the merged subtitle file.

        Returns:
            The merged entries in output order.

        Raises:
            MergeError: If a fragment cannot be read or the output cannot be written.
        """
        entries = self.collect(subtitle_dir)
        try:
            self.formatter.write(entries, output_path)
        except FormattingError as e:
            raise MergeError(str(e)) from e

        output_abspath = os.path.abspath(output_path)
        for name in self.list_srt_files(subtitle_dir):
            path = os.path.join(subtitle_dir, name)
            if os.path.abspath(path) == output_abspath:
                continue
            remove_file(path)
        return entries
