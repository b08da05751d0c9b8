"""Command-Line Interface handler for TransVi."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config_loader import ConfigLoader
from .log_setup import setup_logging, level_from_name
from .audio_splitter import AudioSplitter
from .transcriber import ChunkTranscriber
from .pipeline import SubtitlePipeline
from .exceptions import TransViError, ConfigurationError, WorkerPoolError

logger = logging.getLogger(__name__) # Get logger for this module

class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


class CLIHandler:
    """Parses arguments and orchestrates the TransVi process."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = _ArgumentParser(
            description="TransVi: Generate subtitles for a video by transcribing its audio in parallel chunks.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-input", "--input",
            dest="input",
            default=None,
            help="Input video file path (required)."
        )
        parser.add_argument(
            "-output", "--output",
            dest="output",
            default="output.mp4",
            help="Output video with subtitles. Informational only; the merged subtitles are written to 'merged_output'."
        )
        parser.add_argument(
            "-workers", "--workers",
            dest="workers",
            type=int,
            default=None, # Default taken from config
            help="Number of parallel workers (default: 6)."
        )
        parser.add_argument(
            "-config", "--config",
            dest="config",
            default=None,
            help="Path to an optional YAML configuration file."
        )
        parser.add_argument(
            "-log-level", "--log-level",
            dest="log_level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        parser.add_argument(
            "-no-progress", "--no-progress",
            dest="no_progress",
            action="store_true",
            help="Disable the progress bar."
        )
        return parser

    def _apply_overrides(self, args: argparse.Namespace, config: dict) -> dict:
        """Applies CLI flags on top of the loaded configuration and validates them."""
        if args.input is None or not args.input.strip():
            raise ConfigurationError("-input is required")
        if args.workers is not None:
            logger.info(f"Overriding workers from config with CLI argument: {args.workers}")
            config['workers'] = args.workers
        if args.no_progress:
            config['show_progress'] = False

        try:
            workers = int(config.get('workers', 6))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"workers must be an integer, got {config.get('workers')!r}") from e
        if workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {workers}")
        config['workers'] = workers

        show_progress = config.get('show_progress', True)
        if not isinstance(show_progress, bool):
            raise ConfigurationError(f"show_progress must be true or false, got {show_progress!r}")

        # Working directories are deleted after the merge
        output_dir = os.path.abspath(os.path.dirname(config['merged_output']) or '.')
        for key in ('audio_dir', 'subtitle_dir'):
            work_dir = os.path.abspath(config[key])
            if output_dir == work_dir or output_dir.startswith(work_dir + os.sep):
                raise ConfigurationError(
                    f"merged_output {config['merged_output']!r} must not be inside {key} {config[key]!r}")
        return config

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parses arguments, sets up logging, loads config, and runs the pipeline.

        Returns:
            The process exit code: 0 on success, 1 on any failure.
        """
        args = self.parser.parse_args(argv)

        # --- Setup Logging ---
        log_level = level_from_name(args.log_level)
        setup_logging(log_level=log_level)

        try:
            # --- Load Configuration ---
            config = ConfigLoader().load_config(args.config)

            # --- Re-configure Logging with settings from Config ---
            if args.config:
                setup_logging(log_level=log_level, log_dir=config['log_dir'], log_file=config['log_file'])
                logger.info("Logging re-configured with settings from config file.")

            config = self._apply_overrides(args, config)
        except ConfigurationError as e:
            logger.critical(f"Error: {e}")
            return 1

        logger.info(f"Output will be saved to: {args.output}")

        # --- Validate Input Path ---
        if not os.path.isfile(args.input):
            logger.critical(f"Input video file not found or is not a file: {args.input}")
            return 1

        try:
            logger.info("Initializing TransVi components...")
            audio_splitter = AudioSplitter(ffmpeg_path=config.get('ffmpeg_path'))
            transcriber = ChunkTranscriber(
                whisper_path=config.get('whisper_path'),
                model_name=config.get('whisper_model') or 'base.en',
                timeout=config.get('transcribe_timeout'),
            )
            pipeline = SubtitlePipeline(
                config=config,
                audio_splitter=audio_splitter,
                transcriber=transcriber,
            )

            # --- Run Generation ---
            output_path = pipeline.run(args.input)
            logger.info(f"TransVi finished successfully. Subtitles written to: {output_path}")
            return 0

        except WorkerPoolError as e:
            logger.error(f"Error processing chunks: {e}")
            return 1
        except TransViError as e:
            # Catch errors originating from our application logic
            logger.error(f"A TransVi error occurred: {e}")
            return 1
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            return 1
        except Exception as e:
            # Catch any other unexpected errors
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            return 1


def main(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    sys.exit(CLIHandler().run(argv))
