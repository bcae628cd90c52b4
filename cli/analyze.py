"""
Analyze Subcommand Module

Reports the estimated duration and quality tier of a recording without
contacting any speech service.
"""

import json
import logging
import sys

import click

from audiodiary.transcription.errors import AssetUnavailableError
from audiodiary.transcription.quality import AudioQualityAnalyzer
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages
from audiodiary.utils.logging_config import logging_config

from .common import load_config
from .help_texts import ANALYZE_HELP, CONFIG_HELP, LOG_LEVEL_HELP, ExitCodes
from .shared_options import audio_argument, config_option, json_option, log_level_option


@click.command(help=ANALYZE_HELP)
@audio_argument
@config_option(help=CONFIG_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
@json_option()
def analyze(audio, config, log_level, as_json):
    logging_config.configure_logging(level=log_level, force=True)
    logger = logging.getLogger(__name__)

    transcription_config = load_config(config)
    analyzer = AudioQualityAnalyzer(transcription_config.audio_quality)

    try:
        report = analyzer.analyze(audio)
    except AssetUnavailableError as e:
        logger.error(e.message)
        click.echo(
            ErrorMessages.format_error(ErrorCategory.ASSET_UNAVAILABLE, "file_not_found", file_path=audio),
            err=True,
        )
        sys.exit(ExitCodes.FILE_NOT_FOUND)

    if as_json:
        click.echo(json.dumps({
            "file_size_bytes": report.file_size_bytes,
            "estimated_duration_seconds": round(report.estimated_duration_seconds, 2),
            "quality_tier": report.quality_tier.value,
            "advisory": report.advisory,
        }, indent=2))
        return

    click.echo(f"File size:          {report.file_size_bytes} bytes")
    click.echo(f"Estimated duration: {report.estimated_duration_seconds:.1f}s (size-based estimate)")
    click.echo(f"Quality tier:       {report.quality_tier.value}")
    if report.advisory:
        click.echo(f"Advisory:           {report.advisory}")
