"""Handles Speech-to-Text transcription of audio segments with the whisper CLI."""

import logging
import os
import subprocess
from typing import List, Optional

from .models import Segment
from .exceptions import TranscriptionError
from .utils import ensure_dir_exists, remove_file

logger = logging.getLogger(__name__)

class ChunkTranscriber:
    """Turns one audio segment into one SRT fragment by running the transcriber."""

    def __init__(self, whisper_path: Optional[str] = None, model_name: str = "base.en",
                 timeout: Optional[float] = None):
        """
        Initializes the ChunkTranscriber.

        Args:
            whisper_path: Optional path to the whisper executable.
                          If None, assumes whisper is in the system PATH.
            model_name: Model passed to the transcriber (e.g. "base.en").
            timeout: Optional limit in seconds for a single transcription.
        """
        self.whisper_cmd = whisper_path or 'whisper'
        self.model_name = model_name
        self.timeout = timeout
        logger.info(f"Using transcriber command: {self.whisper_cmd} (model '{self.model_name}')")

    def build_command(self, segment: Segment) -> List[str]:
        return [
            self.whisper_cmd,
            segment.input_path,
            "--model", self.model_name,
            "-f", "srt",
            "-o", segment.output_path,
        ]

    def process(self, segment: Segment) -> None:
        """
        Transcribes a segment, then deletes its audio file.

        Args:
            segment: The segment to transcribe.

        Raises:
            FileSystemError: If the output directory cannot be created.
            TranscriptionError: If the transcriber cannot be launched or fails.
        """
        ensure_dir_exists(os.path.dirname(segment.output_path) or ".")

        cmd = self.build_command(segment)
        logger.info(f"Running: {cmd}")
        try:
            completed = subprocess.run(cmd, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise TranscriptionError(
                f"Transcriber timed out after {self.timeout}s for {segment.input_path}") from e
        except OSError as e:
            raise TranscriptionError(f"Could not launch {self.whisper_cmd}: {e}") from e

        if completed.returncode != 0:
            raise TranscriptionError(
                f"Transcriber exited with status {completed.returncode} for {segment.input_path}")

        logger.debug(f"Transcribed segment {segment.ordinal} to {segment.output_path}")
        remove_file(segment.input_path)
