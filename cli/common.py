"""
Helpers shared by the subcommands: configuration loading and exit handling.
"""

import logging
import os
import sys
from typing import Optional

import click

from audiodiary.transcription.config import TranscriptionConfig
from audiodiary.transcription.errors import ConfigurationError
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages
from audiodiary.utils.logging_config import logging_config

from .help_texts import ExitCodes


logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> TranscriptionConfig:
    """Load configuration, exiting with INVALID_CONFIGURATION on failure."""
    try:
        if config_path:
            config = TranscriptionConfig.load_from_yaml(config_path)
        else:
            config = TranscriptionConfig.from_env()
    except FileNotFoundError:
        click.echo(
            ErrorMessages.format_error(ErrorCategory.CONFIGURATION, "file_not_found", file_path=config_path),
            err=True,
        )
        sys.exit(ExitCodes.INVALID_CONFIGURATION)
    except ConfigurationError as e:
        click.echo(
            ErrorMessages.format_error(
                ErrorCategory.CONFIGURATION,
                "invalid_yaml",
                file_path=config_path or "environment",
                error_details=e.message,
            ),
            err=True,
        )
        sys.exit(ExitCodes.INVALID_CONFIGURATION)

    if logging_config.is_debug_enabled():
        logging_config.log_configuration_details(describe_config(config))
    return config


def describe_config(config: TranscriptionConfig) -> dict:
    """Flat key/value view of the configuration for debug output."""
    details = {
        "priority": ", ".join(config.priority),
        "default_language": config.default_language,
        "preflight_validation": config.preflight_validation,
        "local_transcription.enabled": config.local_transcription.enabled,
        "assemblyai.api_key": config.assemblyai.api_key,
        "whisper_api.api_key": config.whisper_api.api_key,
        "google_speech.api_key": config.google_speech.api_key,
        "azure_speech.api_key": config.azure_speech.api_key,
        "azure_speech.region": config.azure_speech.region,
    }
    return details


def ensure_recording_exists(path: str) -> None:
    """Exit with FILE_NOT_FOUND when the recording is missing."""
    if not os.path.isfile(path):
        logger.error(f"Audio file not found: {path}")
        click.echo(
            ErrorMessages.format_error(ErrorCategory.ASSET_UNAVAILABLE, "file_not_found", file_path=path),
            err=True,
        )
        sys.exit(ExitCodes.FILE_NOT_FOUND)
