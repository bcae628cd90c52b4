"""
Validate Subcommand Module

Runs the admission checks on a recording. Exits with AUDIO_REJECTED when the
recording would not be admitted; warnings alone do not change the exit code.
"""

import json
import logging
import sys

import click

from audiodiary.transcription.validator import AudioValidator
from audiodiary.utils.logging_config import logging_config

from .common import load_config
from .help_texts import CONFIG_HELP, LOG_LEVEL_HELP, VALIDATE_HELP, ExitCodes
from .shared_options import audio_argument, config_option, json_option, log_level_option


@click.command(help=VALIDATE_HELP)
@audio_argument
@config_option(help=CONFIG_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
@json_option()
def validate(audio, config, log_level, as_json):
    logging_config.configure_logging(level=log_level, force=True)
    logger = logging.getLogger(__name__)

    transcription_config = load_config(config)
    outcome = AudioValidator(transcription_config.audio_quality).validate(audio)
    logger.debug(f"Validation outcome for {audio}: {outcome}")

    if as_json:
        click.echo(json.dumps({
            "admissible": outcome.admissible,
            "rejection_reason": outcome.rejection_reason,
            "warnings": list(outcome.warnings),
        }, indent=2))
    elif outcome.admissible:
        click.echo(f"OK: {audio} can be transcribed")
        for warning in outcome.warnings:
            click.echo(f"Warning: {warning}")
    else:
        click.echo(f"Rejected: {outcome.rejection_reason}", err=True)

    if not outcome.admissible:
        sys.exit(ExitCodes.AUDIO_REJECTED)
