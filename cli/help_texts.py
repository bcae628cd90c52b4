"""
Centralized Help Text Constants

This module provides all CLI help text constants for commands and options,
and the process exit codes shared by every subcommand.
"""

# Exit codes for different error types
class ExitCodes:
    SUCCESS = 0
    GENERAL_ERROR = 1
    MISSING_REQUIRED_OPTION = 2
    INVALID_CONFIGURATION = 3
    PROVIDER_NOT_AVAILABLE = 4
    AUTHENTICATION_ERROR = 5
    FILE_NOT_FOUND = 6
    AUDIO_REJECTED = 7
    NETWORK_ERROR = 8
    TRANSCRIPTION_FAILED = 9

# Command help texts
ANALYZE_HELP = "Estimate duration and quality tier of a recording."
VALIDATE_HELP = "Check whether a recording may be sent for transcription."
TRANSCRIBE_HELP = "Transcribe a recording with the best available speech-to-text provider."
STATUS_HELP = "Show which transcription providers are configured and which would be used."
LANGUAGES_HELP = "List supported diary languages and their per-provider codes."
TEST_CONNECTION_HELP = (
    "Verify a provider's API key end to end with a known-good public recording. "
    "Takes up to a minute and a half."
)

# Option help texts
TRANSCRIBE_LANGUAGE_HELP = (
    "Language hint for transcription (e.g. 'lv', 'en-US'). Defaults to the "
    "configured default_language; 'auto' lets the provider detect it."
)

TRANSCRIBE_ON_DEVICE_HELP = (
    "Prefer on-device speech recognition when the runtime provides it."
)

CONFIG_HELP = (
    "Path to configuration file (.yaml). If omitted, providers are configured "
    "from environment variables (ASSEMBLYAI_API_KEY, OPENAI_API_KEY, ...) only."
)

LOG_LEVEL_HELP = "Logging level for detailed output. Use DEBUG for troubleshooting."

TEST_CONNECTION_PROVIDER_HELP = "Provider to test (default: assemblyai)."
