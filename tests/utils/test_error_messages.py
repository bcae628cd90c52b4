"""
Unit Tests: error categories and user-facing messages

**Test Coverage:**
- classify_error for transcription errors, transport errors and the rest
- HTTP status to category mapping
- error_for_status class selection
- CLI templates and suggestions
"""

import asyncio

import httpx
import pytest

from audiodiary.transcription.errors import (
    QuotaExceededError,
    SubmissionError,
    UnauthorizedCredentialError,
    UploadError,
    error_for_status,
)
from audiodiary.utils.error_messages import (
    ErrorCategory,
    ErrorMessages,
    category_for_status,
    classify_error,
)


def test_every_category_has_a_user_message():
    for category in ErrorCategory:
        assert ErrorMessages.user_message(category)


def test_classify_transcription_error():
    category, message = classify_error(UploadError("HTTP 500 <html>stack</html>"))

    assert category is ErrorCategory.UPLOAD_FAILED
    assert message == ErrorMessages.user_message(ErrorCategory.UPLOAD_FAILED)
    assert "stack" not in message


def test_classify_uses_user_message_override():
    error = UploadError("technical", user_message="Custom text")

    assert classify_error(error) == (ErrorCategory.UPLOAD_FAILED, "Custom text")


@pytest.mark.parametrize("error,category", [
    (httpx.ReadTimeout("slow"), ErrorCategory.TIMEOUT),
    (asyncio.TimeoutError(), ErrorCategory.TIMEOUT),
    (ValueError("odd"), ErrorCategory.UNCLASSIFIED),
])
def test_classify_other_exceptions(error, category):
    assert classify_error(error)[0] is category


def test_classify_http_status_error():
    request = httpx.Request("GET", "https://example.com")
    error = httpx.HTTPStatusError("denied", request=request, response=httpx.Response(403, request=request))

    assert classify_error(error)[0] is ErrorCategory.UNAUTHORIZED


@pytest.mark.parametrize("status,category", [
    (400, ErrorCategory.BAD_REQUEST),
    (401, ErrorCategory.UNAUTHORIZED),
    (403, ErrorCategory.UNAUTHORIZED),
    (402, ErrorCategory.QUOTA_EXCEEDED),
    (429, ErrorCategory.QUOTA_EXCEEDED),
    (504, ErrorCategory.TIMEOUT),
    (500, None),
    (404, None),
])
def test_category_for_status(status, category):
    assert category_for_status(status) is category


def test_error_for_status_picks_dedicated_classes():
    assert isinstance(error_for_status(401, UploadError, "m"), UnauthorizedCredentialError)
    assert isinstance(error_for_status(429, SubmissionError, "m"), QuotaExceededError)
    bad_request = error_for_status(400, SubmissionError, "m")
    assert isinstance(bad_request, SubmissionError)
    assert bad_request.category is ErrorCategory.BAD_REQUEST
    assert error_for_status(500, UploadError, "m").status_code == 500


def test_format_error_template():
    text = ErrorMessages.format_error(ErrorCategory.ASSET_UNAVAILABLE, "file_not_found", file_path="a.m4a")

    assert "Recording not found 'a.m4a'" in text


def test_format_error_falls_back_to_generic():
    text = ErrorMessages.format_error(ErrorCategory.TIMEOUT, "unknown_template")

    assert "audiodiary status" in text


def test_format_error_missing_variable_falls_back():
    text = ErrorMessages.format_error(ErrorCategory.CONFIGURATION, "invalid_yaml", file_path="x.yaml")

    assert "invalid_yaml" in text


def test_suggestions():
    assert "test-connection" in ErrorMessages.get_suggestion_for_category(ErrorCategory.UNAUTHORIZED)
    assert ErrorMessages.get_suggestion_for_category(ErrorCategory.TIMEOUT) is None
