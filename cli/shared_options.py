"""
Shared CLI Option Decorators

This module provides reusable Click decorators for common CLI options,
ensuring consistency across subcommands.
"""

import click


def audio_argument(f):
    """Positional argument for the recording to process."""
    return click.argument('audio', type=click.Path(dir_okay=False))(f)

def language_option(help=None):
    """Decorator for language hint options."""
    def decorator(f):
        return click.option(
            '--language', '-l',
            default=None,
            help=help or "Language hint (e.g. 'lv', 'lv-LV', 'auto')"
        )(f)
    return decorator

def config_option(help=None):
    """Decorator for configuration file options."""
    def decorator(f):
        return click.option(
            '--config',
            default=None,
            help=help or 'Path to configuration file'
        )(f)
    return decorator

def log_level_option(help=None):
    """Decorator for logging level options."""
    def decorator(f):
        return click.option(
            '--log-level',
            default='WARNING',
            type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
            help=help or 'Logging level'
        )(f)
    return decorator

def json_option(help=None):
    """Decorator for machine-readable output."""
    def decorator(f):
        return click.option(
            '--json', 'as_json',
            is_flag=True,
            default=False,
            help=help or 'Print the result as JSON'
        )(f)
    return decorator
