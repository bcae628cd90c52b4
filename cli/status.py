"""
Status and Languages Subcommand Module

``status`` shows which transcription paths are usable and which provider
would answer the next request. ``languages`` lists the supported diary
languages with the code each service receives.
"""

import json
import logging

import click

from audiodiary.transcription.factory import TranscriptionProviderFactory
from audiodiary.transcription.languages import SUPPORTED_LANGUAGES
from audiodiary.transcription.orchestrator import TranscriptionOrchestrator
from audiodiary.transcription.registry import PROVIDER_LABELS
from audiodiary.utils.logging_config import logging_config

from .common import load_config
from .help_texts import CONFIG_HELP, LANGUAGES_HELP, LOG_LEVEL_HELP, STATUS_HELP
from .shared_options import config_option, json_option, log_level_option


@click.command(help=STATUS_HELP)
@config_option(help=CONFIG_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
@json_option()
def status(config, log_level, as_json):
    logging_config.configure_logging(level=log_level, force=True)
    logger = logging.getLogger(__name__)

    transcription_config = load_config(config)
    orchestrator = TranscriptionOrchestrator(transcription_config)
    report = orchestrator.api_status()
    logger.debug(f"Provider status: {report}")

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    factory = TranscriptionProviderFactory(transcription_config)
    click.echo("Cloud providers (priority order):")
    for descriptor in orchestrator.registry.list_by_priority():
        marker = "configured" if descriptor.is_available else "not configured"
        click.echo(f"  {descriptor.priority + 1}. {descriptor.label:<16} {marker}")
        if descriptor.is_available:
            for problem in factory.validate_provider_requirements(descriptor.identifier):
                click.echo(f"       ! {problem}")

    click.echo(f"On-device recognition: {'supported' if report['on_device'] else 'not supported'}")
    click.echo(f"Local simulation mode: {'enabled' if report['local_mode'] else 'disabled'}")
    click.echo(f"Active provider:       {PROVIDER_LABELS.get(report['active_provider'], report['active_provider'])}")
    if not report["has_any_provider"]:
        click.echo("\nNo provider credential configured; transcriptions will be simulated.")


@click.command(help=LANGUAGES_HELP)
@json_option()
def languages(as_json):
    if as_json:
        click.echo(json.dumps([
            {
                "code": lang.code,
                "name": lang.name,
                "whisper": lang.whisper_code,
                "google": lang.google_code,
                "assemblyai": lang.assembly_code,
            }
            for lang in SUPPORTED_LANGUAGES
        ], indent=2, ensure_ascii=False))
        return

    click.echo(f"{'Code':<6}{'Language':<14}{'Google/Azure':<14}")
    for lang in SUPPORTED_LANGUAGES:
        click.echo(f"{lang.code:<6}{lang.name:<14}{lang.google_code:<14}")
