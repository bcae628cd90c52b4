"""
Connection Test Subcommand Module

Checks a provider credential end to end against a known-good public
recording (see ConnectionTester).
"""

import asyncio
import logging
import sys

import click

from audiodiary.transcription.connection_tester import ConnectionTester
from audiodiary.transcription.registry import ASSEMBLYAI, AZURE, GOOGLE, OPENAI, ProviderRegistry
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages
from audiodiary.utils.logging_config import logging_config

from .common import load_config
from .help_texts import (
    CONFIG_HELP, LOG_LEVEL_HELP, TEST_CONNECTION_HELP, TEST_CONNECTION_PROVIDER_HELP, ExitCodes,
)
from .shared_options import config_option, log_level_option


# Setup hints shown when a credential is missing or rejected
CREDENTIAL_HINTS = {
    ASSEMBLYAI: ("AssemblyAI", "ASSEMBLYAI_API_KEY", "assemblyai"),
    OPENAI: ("OpenAI Whisper API", "OPENAI_API_KEY", "whisper_api"),
    GOOGLE: ("Google Speech", "GOOGLE_SPEECH_API_KEY", "google_speech"),
    AZURE: ("Azure Speech", "AZURE_SPEECH_KEY", "azure_speech"),
}


@click.command(name='test-connection', help=TEST_CONNECTION_HELP)
@click.option(
    '--provider',
    default=ASSEMBLYAI,
    type=click.Choice(list(CREDENTIAL_HINTS)),
    help=TEST_CONNECTION_PROVIDER_HELP,
)
@config_option(help=CONFIG_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
def test_connection(provider, config, log_level):
    logging_config.configure_logging(level=log_level, force=True)
    logger = logging.getLogger(__name__)

    transcription_config = load_config(config)
    tester = ConnectionTester(transcription_config)
    descriptor = ProviderRegistry.from_config(transcription_config).get(provider)

    click.echo(f"Testing {descriptor.label}...")
    with logging_config.timed(f"{descriptor.label} connection test"):
        result = asyncio.run(tester.test_provider(descriptor))

    if result.success:
        click.echo(result.text)
        return

    logger.debug(f"Connection test result: {result.to_dict()}")
    service_name, env_var, section = CREDENTIAL_HINTS[provider]
    if result.error_category is ErrorCategory.CONFIGURATION:
        click.echo(
            ErrorMessages.format_error(
                ErrorCategory.UNAUTHORIZED,
                "missing_api_key",
                service_name=service_name,
                env_var_name=env_var,
                config_section=section,
            ),
            err=True,
        )
        sys.exit(ExitCodes.INVALID_CONFIGURATION)

    if result.error_category is ErrorCategory.UNAUTHORIZED:
        click.echo(result.error_message, err=True)
        click.echo(
            ErrorMessages.format_error(
                ErrorCategory.UNAUTHORIZED,
                "invalid_api_key",
                service_name=service_name,
                env_var_name=env_var,
            ),
            err=True,
        )
        sys.exit(ExitCodes.AUTHENTICATION_ERROR)

    click.echo(f"Connection test failed: {result.error_message}", err=True)
    if result.error_category is ErrorCategory.UNSUPPORTED_RUNTIME:
        sys.exit(ExitCodes.PROVIDER_NOT_AVAILABLE)
    sys.exit(ExitCodes.NETWORK_ERROR)
