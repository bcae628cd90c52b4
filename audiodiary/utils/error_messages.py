"""
Centralized Error Message Templates

This module provides the user-facing vocabulary for every failure the
transcription core can report, plus the CLI templates used when a command
cannot even start.

Two layers:
- ErrorCategory + ErrorMessages.user_message(): the short, stable text that
  ends up in TranscriptionResult.error_message. Provider jargon and raw HTTP
  bodies never reach this layer.
- ErrorMessages.format_error(): longer multi-line templates with actionable
  suggestions for the CLI (missing configuration, missing files, credentials).
"""

import asyncio
from typing import Dict, Optional, Tuple
from enum import Enum
import logging

import httpx


logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of transcription failures reported to the caller."""
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    QUOTA_EXCEEDED = "quota_exceeded"
    TIMEOUT = "timeout"
    UPLOAD_FAILED = "upload_failed"
    SUBMISSION_FAILED = "submission_failed"
    STATUS_CHECK_FAILED = "status_check_failed"
    EMPTY_RESULT = "empty_result"
    PROCESSING_FAILED = "processing_failed"
    INVALID_AUDIO = "invalid_audio"
    ASSET_UNAVAILABLE = "asset_unavailable"
    UNSUPPORTED_RUNTIME = "unsupported_runtime"
    CONFIGURATION = "configuration"
    UNCLASSIFIED = "unclassified"


class ErrorMessages:
    """
    Centralized error message templates with consistent formatting.

    USER_MESSAGES holds one sentence per category; these are what the diary
    screen shows next to its "try again" button.
    """

    USER_MESSAGES: Dict[ErrorCategory, str] = {
        ErrorCategory.BAD_REQUEST: "The speech service rejected the recording (unsupported audio format or parameters).",
        ErrorCategory.UNAUTHORIZED: "The speech service rejected the API key. Check the configured credential.",
        ErrorCategory.QUOTA_EXCEEDED: "The speech service usage limit has been reached. Try again later or upgrade the plan.",
        ErrorCategory.TIMEOUT: "The transcription took too long to finish. Try again.",
        ErrorCategory.UPLOAD_FAILED: "The recording could not be uploaded to the speech service.",
        ErrorCategory.SUBMISSION_FAILED: "The speech service did not accept the transcription request.",
        ErrorCategory.STATUS_CHECK_FAILED: "The transcription status could not be checked.",
        ErrorCategory.EMPTY_RESULT: "No speech was recognised in the recording (empty result).",
        ErrorCategory.PROCESSING_FAILED: "The speech service could not process this recording.",
        ErrorCategory.INVALID_AUDIO: "The recording is not usable for transcription.",
        ErrorCategory.ASSET_UNAVAILABLE: "The recording could not be found or read.",
        ErrorCategory.UNSUPPORTED_RUNTIME: "On-device speech recognition is not supported here.",
        ErrorCategory.CONFIGURATION: "The transcription provider is not configured correctly.",
        ErrorCategory.UNCLASSIFIED: "Transcription failed. Try again.",
    }

    CONFIGURATION_TEMPLATES = {
        "invalid_yaml": """
Configuration Error: Invalid YAML syntax in {file_path}

{error_details}

Suggestions:
  • Check for proper indentation (use spaces, not tabs)
  • Ensure all quotes are properly closed

Example valid configuration:
  priority: [assemblyai, openai]
  assemblyai:
    api_key: ${{ASSEMBLYAI_API_KEY}}
""",

        "file_not_found": """
Configuration Error: Configuration file not found '{file_path}'

Suggestions:
  • Check the --config path
  • Omit --config to configure providers from environment variables only
""",
    }

    FILE_TEMPLATES = {
        "file_not_found": """
File Error: Recording not found '{file_path}'

The specified audio file does not exist or cannot be accessed.

Suggestions:
  • Check the file path is correct
  • Verify the file exists: ls -la "{file_path}"
""",
    }

    API_TEMPLATES = {
        "missing_api_key": """
Authentication Error: API key required for {service_name}

No usable API key found for {service_name}.

Setup Instructions:
  Option 1: Environment variable
    export {env_var_name}="your-api-key-here"

  Option 2: Configuration file
    {config_section}:
      api_key: ${{{env_var_name}}}
""",

        "invalid_api_key": """
Authentication Error: Invalid API key for {service_name}

The provided API key is not valid or has been revoked.

Suggestions:
  • Verify the key in your {service_name} dashboard
  • Re-export {env_var_name} with the current key
""",
    }

    @classmethod
    def user_message(cls, category: ErrorCategory) -> str:
        """Return the stable user-facing sentence for a category."""
        return cls.USER_MESSAGES.get(category, cls.USER_MESSAGES[ErrorCategory.UNCLASSIFIED])

    @classmethod
    def format_error(
        cls,
        category: ErrorCategory,
        template_key: str,
        **kwargs
    ) -> str:
        """
        Format a multi-line CLI error message using templates.

        Args:
            category: The error category
            template_key: The specific template within the category
            **kwargs: Template variables to substitute

        Returns:
            Formatted error message with suggestions
        """
        templates = cls._get_templates_for_category(category)

        if template_key not in templates:
            return cls._format_generic_error(category, template_key, **kwargs)

        template = templates[template_key]

        try:
            return template.format(**kwargs).strip()
        except KeyError as e:
            logger.warning(f"Missing template variable {e} for {category.value}.{template_key}")
            return cls._format_generic_error(category, template_key, **kwargs)

    @classmethod
    def _get_templates_for_category(cls, category: ErrorCategory) -> Dict[str, str]:
        """Get templates for a specific error category."""
        template_map = {
            ErrorCategory.CONFIGURATION: cls.CONFIGURATION_TEMPLATES,
            ErrorCategory.ASSET_UNAVAILABLE: cls.FILE_TEMPLATES,
            ErrorCategory.UNAUTHORIZED: cls.API_TEMPLATES,
        }

        return template_map.get(category, {})

    @classmethod
    def _format_generic_error(
        cls,
        category: ErrorCategory,
        template_key: str,
        **kwargs
    ) -> str:
        """Format a generic error message when specific template is not found."""
        error_details = kwargs.get('error_details', cls.user_message(category))

        return f"""
{category.value.replace('_', ' ').title()} Error: {template_key}

{error_details}

General Suggestions:
  • Try running with --log-level debug for additional details
  • Run 'audiodiary status' to see which providers are configured

For help: audiodiary --help
""".strip()

    @classmethod
    def get_suggestion_for_category(cls, category: ErrorCategory) -> Optional[str]:
        """
        Provide a follow-up action for a failed transcription.

        Returns:
            Suggested action or None when "try again" is all there is to say
        """
        suggestions = {
            ErrorCategory.UNAUTHORIZED: "Run 'audiodiary test-connection' after updating the API key",
            ErrorCategory.QUOTA_EXCEEDED: "Configure another provider or enable on-device recognition",
            ErrorCategory.CONFIGURATION: "Run 'audiodiary status' to review provider configuration",
            ErrorCategory.INVALID_AUDIO: "Record a longer clip and check the microphone",
            ErrorCategory.EMPTY_RESULT: "Speak louder or closer to the microphone",
        }
        return suggestions.get(category)


def classify_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    """Map any exception raised inside a provider to (category, user message).

    Transcription errors carry their own category. Transport exceptions from
    httpx and asyncio timeouts are recognised here; anything else is
    unclassified.

    Args:
        error: Exception caught at a provider boundary

    Returns:
        Tuple of (category, user-facing message)
    """
    category = getattr(error, "category", None)
    if not isinstance(category, ErrorCategory):
        if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
            category = ErrorCategory.TIMEOUT
        elif isinstance(error, httpx.HTTPStatusError):
            category = category_for_status(error.response.status_code) or ErrorCategory.UNCLASSIFIED
        else:
            category = ErrorCategory.UNCLASSIFIED

    message = getattr(error, "user_message", None) or ErrorMessages.user_message(category)
    return category, message


def category_for_status(status_code: int) -> Optional[ErrorCategory]:
    """Return the category implied by an HTTP status, if it implies one."""
    if status_code == 400:
        return ErrorCategory.BAD_REQUEST
    if status_code in (401, 403):
        return ErrorCategory.UNAUTHORIZED
    if status_code in (402, 429):
        return ErrorCategory.QUOTA_EXCEEDED
    if status_code in (408, 504):
        return ErrorCategory.TIMEOUT
    return None

