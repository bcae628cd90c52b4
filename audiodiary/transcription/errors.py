"""
Transcription Error Classes

This module defines custom exception classes for transcription operations.
Every class carries an ErrorCategory so the provider boundary can turn it
into a failed TranscriptionResult with a stable, user-facing message.

Exceptions never leave a provider's transcribe(); they exist so the internal
steps (read, upload, submit, poll) can stop early with a precise reason.
"""

from typing import Optional

from audiodiary.utils.error_messages import ErrorCategory, category_for_status


class TranscriptionError(Exception):
    """Base exception class for all transcription-related errors.

    Attributes:
        category: ErrorCategory used for the user-facing message
        user_message: Optional override for the category's default message
        status_code: HTTP status that triggered the error, if any

    Example:
        try:
            await provider._run(asset, language)
        except TranscriptionError as e:
            logger.error(f"Transcription failed: {e}")
    """

    category = ErrorCategory.UNCLASSIFIED

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.user_message = user_message
        if category is not None:
            self.category = category


class ConfigurationError(TranscriptionError):
    """Raised when a provider is missing or has an unusable configuration.

    Example:
        if not config.is_configured:
            raise ConfigurationError("AssemblyAI API key not configured")
    """

    category = ErrorCategory.CONFIGURATION


class AssetUnavailableError(TranscriptionError):
    """Raised when the recorded audio does not exist or cannot be read."""

    category = ErrorCategory.ASSET_UNAVAILABLE


class InvalidAudioError(TranscriptionError):
    """Raised when the audio payload fails the byte-level sanity checks.

    This covers zero-length payloads and payloads above the provider-side
    maximum.
    """

    category = ErrorCategory.INVALID_AUDIO


class UploadError(TranscriptionError):
    """Raised when the upload step fails.

    This exception is raised when:
    - The upload endpoint answers with a non-success status
    - The response body is empty or not JSON
    - The response does not contain the uploaded resource reference
    - The network request itself fails
    """

    category = ErrorCategory.UPLOAD_FAILED


class SubmissionError(TranscriptionError):
    """Raised when the transcription request is not accepted.

    A 400 answer is reported as a bad request (unsupported audio or
    parameters) rather than a generic submission failure.
    """

    category = ErrorCategory.SUBMISSION_FAILED

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        if status_code == 400 and "category" not in kwargs:
            kwargs["category"] = ErrorCategory.BAD_REQUEST
        super().__init__(message, status_code=status_code, **kwargs)


class StatusCheckError(TranscriptionError):
    """Raised when a poll of the job status does not return 2xx."""

    category = ErrorCategory.STATUS_CHECK_FAILED


class EmptyResultError(TranscriptionError):
    """Raised when the service finished but returned no usable text."""

    category = ErrorCategory.EMPTY_RESULT


class JobFailedError(TranscriptionError):
    """Raised when the remote job ends in its error state.

    The remote error text is kept in ``remote_error`` for logging only.
    """

    category = ErrorCategory.PROCESSING_FAILED

    def __init__(self, message: str, remote_error: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.remote_error = remote_error


class TranscriptionTimeoutError(TranscriptionError):
    """Raised when the poll budget is exhausted or a request times out."""

    category = ErrorCategory.TIMEOUT


class UnauthorizedCredentialError(TranscriptionError):
    """Raised when the service rejects the configured credential (401/403)."""

    category = ErrorCategory.UNAUTHORIZED


class QuotaExceededError(TranscriptionError):
    """Raised when the service reports a payment or rate limit (402/429)."""

    category = ErrorCategory.QUOTA_EXCEEDED


class BadRequestError(TranscriptionError):
    """Raised when the service rejects the request parameters (400)."""

    category = ErrorCategory.BAD_REQUEST


class UnsupportedRuntimeError(TranscriptionError):
    """Raised when on-device recognition is requested but unavailable."""

    category = ErrorCategory.UNSUPPORTED_RUNTIME


def error_for_status(
    status_code: int,
    step_error: type,
    message: str,
) -> TranscriptionError:
    """Build the exception for a non-success HTTP answer.

    Credential and quota answers map to their dedicated classes no matter
    which step produced them; everything else becomes ``step_error``.

    Args:
        status_code: HTTP status of the response
        step_error: Exception class for the step (UploadError, SubmissionError, ...)
        message: Diagnostic message for logs

    Returns:
        Exception instance ready to be raised
    """
    category = category_for_status(status_code)
    if category is ErrorCategory.UNAUTHORIZED:
        return UnauthorizedCredentialError(message, status_code=status_code)
    if category is ErrorCategory.QUOTA_EXCEEDED:
        return QuotaExceededError(message, status_code=status_code)
    return step_error(message, status_code=status_code)
