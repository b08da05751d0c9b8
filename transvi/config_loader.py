"""Handles loading configuration defaults from YAML files."""

import yaml
import os
import logging
from typing import Optional
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'ffmpeg_path': None,
    'whisper_path': None,
    'whisper_model': 'base.en',
    'workers': 6,
    'audio_dir': 'audio_parts',
    'subtitle_dir': 'subtitles',
    'merged_output': 'merged_sub_titles.srt',
    'transcribe_timeout': None,
    'show_progress': True,
    'log_dir': 'logs',
    'log_file': 'transvi.log',
}

class ConfigLoader:
    """Loads configuration settings from a YAML file on top of the built-in defaults."""

    def load_config(self, config_path: Optional[str] = None) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file, or None to
                         use the built-in defaults only.

        Returns:
            A dictionary with every key of DEFAULT_CONFIG, overridden by the
            values found in the file.

        Raises:
            ConfigurationError: If the file is missing, cannot be parsed as
                                YAML, or is not a mapping.
        """
        config = dict(DEFAULT_CONFIG)
        if config_path is None:
            logger.debug("No configuration file given, using built-in defaults.")
            return config

        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except OSError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        for key, value in loaded.items():
            if key not in DEFAULT_CONFIG:
                logger.warning(f"Ignoring unknown configuration key '{key}' in {config_path}")
                continue
            config[key] = value

        logger.info(f"Configuration loaded successfully from {config_path}")
        return config
