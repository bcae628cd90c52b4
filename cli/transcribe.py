"""
Transcribe Subcommand Module

This module implements the transcribe subcommand for the Audio Diary CLI.
The orchestrator picks the provider (configured priority, then on-device,
then the local mock), so there is no engine flag; the outcome is printed as
text or, with --json, as the same mapping the diary persists.
"""

import asyncio
import json
import logging
import sys

import click

from audiodiary.transcription.orchestrator import TranscriptionOrchestrator
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages
from audiodiary.utils.logging_config import logging_config

from .common import ensure_recording_exists, load_config
from .help_texts import (
    CONFIG_HELP, LOG_LEVEL_HELP, TRANSCRIBE_HELP, TRANSCRIBE_LANGUAGE_HELP,
    TRANSCRIBE_ON_DEVICE_HELP, ExitCodes,
)
from .shared_options import (
    audio_argument, config_option, json_option, language_option, log_level_option,
)


# Exit code for each failure category; anything else is TRANSCRIPTION_FAILED
FAILURE_EXIT_CODES = {
    ErrorCategory.UNAUTHORIZED: ExitCodes.AUTHENTICATION_ERROR,
    ErrorCategory.CONFIGURATION: ExitCodes.INVALID_CONFIGURATION,
    ErrorCategory.ASSET_UNAVAILABLE: ExitCodes.FILE_NOT_FOUND,
    ErrorCategory.UPLOAD_FAILED: ExitCodes.NETWORK_ERROR,
    ErrorCategory.SUBMISSION_FAILED: ExitCodes.NETWORK_ERROR,
    ErrorCategory.STATUS_CHECK_FAILED: ExitCodes.NETWORK_ERROR,
    ErrorCategory.UNSUPPORTED_RUNTIME: ExitCodes.PROVIDER_NOT_AVAILABLE,
}


@click.command(help=TRANSCRIBE_HELP)
@audio_argument
@language_option(help=TRANSCRIBE_LANGUAGE_HELP)
@click.option('--on-device', 'on_device', is_flag=True, default=False, help=TRANSCRIBE_ON_DEVICE_HELP)
@config_option(help=CONFIG_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
@json_option()
def transcribe(audio, language, on_device, config, log_level, as_json):
    # Configure logging first
    logging_config.configure_logging(level=log_level, force=True)
    logger = logging.getLogger(__name__)
    logger.debug(f"CLI arguments: audio={audio}, language={language}, on_device={on_device}")

    transcription_config = load_config(config)
    ensure_recording_exists(audio)

    orchestrator = TranscriptionOrchestrator(transcription_config)
    if on_device and not orchestrator.on_device_supported:
        logger.info("On-device recognition is not available in this runtime; using the next provider")

    result = asyncio.run(orchestrator.transcribe(audio, language=language, prefer_on_device=on_device))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.success:
        click.echo(result.text)
        confidence = f"{result.confidence:.2f}" if result.confidence is not None else "n/a"
        click.echo(f"\nProvider: {result.provider_label} (confidence {confidence})", err=True)
    else:
        click.echo(f"Transcription failed ({result.provider_label}): {result.error_message}", err=True)
        suggestion = ErrorMessages.get_suggestion_for_category(result.error_category)
        if suggestion:
            click.echo(f"Suggestion: {suggestion}", err=True)

    if not as_json:
        for warning in result.warnings:
            click.echo(f"Warning: {warning}", err=True)

    if not result.success:
        sys.exit(FAILURE_EXIT_CODES.get(result.error_category, ExitCodes.TRANSCRIPTION_FAILED))
