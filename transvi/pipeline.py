"""Orchestrates the subtitle generation pipeline."""

import logging
import time
from typing import Optional

from .audio_splitter import AudioSplitter
from .transcriber import ChunkTranscriber
from .merger import SubtitleMerger
from .segments import enumerate_segments
from .worker_pool import BoundedWorkerPool
from .exceptions import TransViError, WorkerPoolError
from .utils import ensure_dir_exists, remove_dir

logger = logging.getLogger(__name__)

class SubtitlePipeline:
    """
    Manages the end-to-end process of generating subtitles for a video file:
    split, transcribe every segment in parallel, merge, clean up.
    """

    def __init__(
        self,
        config: dict,
        audio_splitter: AudioSplitter,
        transcriber: ChunkTranscriber,
        merger: Optional[SubtitleMerger] = None,
    ):
        """
        Initializes the SubtitlePipeline.

        Args:
            config: A dictionary containing configuration settings
                    (see config_loader.DEFAULT_CONFIG).
            audio_splitter: An instance of AudioSplitter.
            transcriber: An instance of ChunkTranscriber.
            merger: An instance of SubtitleMerger; a default one is created if None.
        """
        self.config = config
        self.audio_splitter = audio_splitter
        self.transcriber = transcriber
        self.merger = merger or SubtitleMerger()

        self.audio_dir = config.get('audio_dir', 'audio_parts')
        self.subtitle_dir = config.get('subtitle_dir', 'subtitles')
        self.output_path = config.get('merged_output', 'merged_sub_titles.srt')
        self.pool = BoundedWorkerPool(
            max_workers=int(config.get('workers', 6)),
            show_progress=config.get('show_progress', True),
            desc="Transcribing",
        )

    def _cleanup_work_dirs(self) -> None:
        for dir_path in (self.audio_dir, self.subtitle_dir):
            remove_dir(dir_path)

    def run(self, video_path: str) -> str:
        """
        Executes the full pipeline for a single video.

        Args:
            video_path: Path to the input video file.

        Returns:
            Path of the merged subtitle file.

        Raises:
            FileSystemError: If a working directory cannot be created or read.
            AudioSplitError: If ffmpeg fails.
            WorkerPoolError: If any segment failed to transcribe; nothing is merged.
            MergeError: If the fragments cannot be merged.
        """
        start_time = time.time()
        logger.info(f"--- Starting TransVi process for: {video_path} ---")

        try:
            # 1. Working directories
            logger.info("Step 1: Creating working directories...")
            ensure_dir_exists(self.audio_dir)
            ensure_dir_exists(self.subtitle_dir)

            # 2. Split
            logger.info("Step 2: Splitting audio into segments...")
            self.audio_splitter.split(video_path, self.audio_dir)

            # 3. Enumerate
            logger.info("Step 3: Enumerating segments...")
            segments = enumerate_segments(self.audio_dir, self.subtitle_dir)

            # 4. Transcribe
            logger.info(f"Step 4: Transcribing {len(segments)} segments...")
            result = self.pool.run(segments, self.transcriber.process)
            if not result.ok:
                for failure in result.failures:
                    logger.error(f"Error processing chunk {failure.item.input_path}: {failure.error}")
                raise WorkerPoolError(result.failures)

            # 5. Merge
            logger.info("Step 5: Merging subtitle fragments...")
            entries = self.merger.merge(self.subtitle_dir, self.output_path)
            logger.info(f"Merged {len(entries)} subtitles into: {self.output_path}")

        except TransViError as e:
            logger.error(f"TransVi process failed: {e}")
            raise

        # 6. Cleanup
        logger.info("Step 6: Removing working directories...")
        self._cleanup_work_dirs()

        logger.info(f"--- TransVi process completed successfully in {time.time() - start_time:.2f} seconds ---")
        return self.output_path
