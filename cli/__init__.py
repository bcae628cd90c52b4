"""
CLI Package for the Audio Diary transcription core

This package provides a modular CLI architecture using Click groups and subcommands.
Each subcommand is implemented in its own module for better maintainability and testing.

The main entry point is the main() function which creates a Click group and registers
all available subcommands. The cli() function serves as the console script entry point
for setup.py.
"""

import os
import click
from dotenv import load_dotenv

from audiodiary import __version__
from audiodiary.utils.logging_config import configure_logging

# Load environment variables from .env files
# Priority: .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')
from .analyze import analyze
from .validate import validate
from .transcribe import transcribe
from .status import status, languages
from .connection import test_connection

# Configure logging when CLI package is imported
configure_logging()

@click.group()
@click.version_option(version=__version__, prog_name='audiodiary')
def main():
    """Audio Diary CLI - analyze, validate and transcribe diary recordings.

    Recordings are checked for usable length and size, then sent to the
    highest-priority configured speech-to-text provider. Without any
    provider credential the simulated local provider answers instead.
    """
    pass

# Register subcommands
main.add_command(analyze)
main.add_command(validate)
main.add_command(transcribe)
main.add_command(status)
main.add_command(languages)
main.add_command(test_connection)

# Entry point for setup.py console script
def cli():
    """Console script entry point.

    This function is called when the audiodiary command is executed
    from the command line after installation via pip.
    """
    main()
