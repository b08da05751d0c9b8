"""Handles splitting a video's audio into fixed-length WAV segments using ffmpeg."""

import ffmpeg
import os
import logging
from typing import Optional

from .models import SEGMENT_SECONDS
from .segments import SEGMENT_PREFIX, AUDIO_EXTENSION
from .exceptions import AudioSplitError, FileSystemError
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

class AudioSplitter:
    """Extracts the audio track of a video and cuts it into numbered segments."""

    def __init__(self, ffmpeg_path: Optional[str] = None, segment_seconds: int = SEGMENT_SECONDS):
        """
        Initializes the AudioSplitter.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
            segment_seconds: Length of each segment. The merger assumes
                             SEGMENT_SECONDS, so only tests should change it.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        self.segment_seconds = segment_seconds
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def output_pattern(self, output_audio_dir: str) -> str:
        return os.path.join(output_audio_dir, f"{SEGMENT_PREFIX}%03d{AUDIO_EXTENSION}")

    def build_stream(self, video_filepath: str, output_audio_dir: str):
        """
        Builds the ffmpeg graph: no video, 16-bit PCM at 16kHz, segment muxer
        numbering files from 1 with timestamps reset per segment.
        """
        return (
            ffmpeg
            .input(video_filepath)
            .output(
                self.output_pattern(output_audio_dir),
                vn=None,
                acodec='pcm_s16le',
                ar=16000,
                f='segment',
                segment_time=self.segment_seconds,
                segment_start_number=1,
                reset_timestamps=1,
            )
            .overwrite_output()
        )

    def split(self, video_filepath: str, output_audio_dir: str) -> str:
        """
        Splits the audio of a video file into `partNNN.wav` segments.

        Args:
            video_filepath: Path to the input video file.
            output_audio_dir: Directory to write the segments into.

        Returns:
            The directory holding the segments.

        Raises:
            FileSystemError: If the input is missing or the output directory
                             cannot be created.
            AudioSplitError: If ffmpeg cannot be launched or fails.
        """
        logger.info(f"Starting audio split for: {video_filepath}")
        if not os.path.isfile(video_filepath):
            raise FileSystemError(f"Input video file not found: {video_filepath}")

        ensure_dir_exists(output_audio_dir)
        stream = self.build_stream(video_filepath, output_audio_dir)
        logger.info(f"Running: {stream.compile(cmd=self.ffmpeg_cmd)}")

        try:
            stream.run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg stderr: {stderr_output}")
            last_line = stderr_output.strip().splitlines()[-1] if stderr_output.strip() else str(e)
            raise AudioSplitError(f"FFmpeg split failed: {last_line}") from e
        except OSError as e:
            raise AudioSplitError(f"Could not launch {self.ffmpeg_cmd}: {e}") from e

        logger.info(f"Audio split into {self.segment_seconds}s segments in: {output_audio_dir}")
        return output_audio_dir
