"""
Unit Tests: CloudOpenAIWhisperProvider

**Test Coverage:**
- Initialization with valid and invalid configuration
- Transcribe with a mocked AsyncOpenAI client
- Language hint normalization
- SDK error translation
- Size limits and empty results
- Validate requirements method
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from audiodiary.transcription.config import WhisperAPIConfig
from audiodiary.transcription.errors import ConfigurationError
from audiodiary.transcription.providers.cloud_openai_whisper import CloudOpenAIWhisperProvider
from audiodiary.utils.error_messages import ErrorCategory


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def whisper_api_config():
    """Create a test Whisper API configuration."""
    return WhisperAPIConfig(api_key="sk-test-key-12345")


def mock_client(response=None, error=None):
    client = MagicMock()
    client.audio.transcriptions.create = AsyncMock(return_value=response, side_effect=error)
    return client


def status_error(cls, status):
    request = httpx.Request("POST", "https://api.openai.com/v1/audio/transcriptions")
    return cls("boom", response=httpx.Response(status, request=request), body=None)


# ============================================================================
# Test: Initialization
# ============================================================================

def test_initialization_with_invalid_config():
    with pytest.raises(ConfigurationError) as exc_info:
        CloudOpenAIWhisperProvider("not a config object")

    assert "Expected WhisperAPIConfig" in str(exc_info.value)


def test_client_not_created_until_needed(whisper_api_config):
    provider = CloudOpenAIWhisperProvider(whisper_api_config)

    assert provider.client is None


# ============================================================================
# Test: Transcribe
# ============================================================================

@pytest.mark.asyncio
async def test_transcribe_success(whisper_api_config, make_audio):
    response = MagicMock(text=" Sveiki! ", language="latvian")
    client = mock_client(response)
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=client)

    result = await provider.transcribe(make_audio(5_000, name="entry.m4a"), language="lv-LV")

    assert result.success
    assert result.text == "Sveiki!"
    assert result.confidence == 0.95
    assert result.provider_label == "OpenAI Whisper"

    kwargs = client.audio.transcriptions.create.call_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["language"] == "lv"
    assert kwargs["response_format"] == "verbose_json"
    filename, payload = kwargs["file"]
    assert filename == "entry.m4a"
    assert len(payload) == 5_000


@pytest.mark.asyncio
async def test_auto_language_is_omitted(whisper_api_config, make_audio):
    client = mock_client(MagicMock(text="Hello"))
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=client)

    await provider.transcribe(make_audio(5_000), language="auto")

    assert "language" not in client.audio.transcriptions.create.call_args.kwargs


@pytest.mark.asyncio
async def test_plain_text_response(whisper_api_config, make_audio):
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=mock_client("plain text"))

    result = await provider.transcribe(make_audio(5_000))

    assert result.text == "plain text"


@pytest.mark.asyncio
async def test_empty_text_is_empty_result(whisper_api_config, make_audio):
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=mock_client(MagicMock(text="")))

    result = await provider.transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.EMPTY_RESULT


@pytest.mark.asyncio
async def test_oversize_file_is_not_sent(whisper_api_config, make_audio, monkeypatch):
    monkeypatch.setattr(CloudOpenAIWhisperProvider, "MAX_FILE_SIZE", 1_000)
    client = mock_client(MagicMock(text="never"))
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=client)

    result = await provider.transcribe(make_audio(1_001))

    assert result.error_category is ErrorCategory.INVALID_AUDIO
    client.audio.transcriptions.create.assert_not_called()


@pytest.mark.asyncio
async def test_missing_key_fails_with_configuration_category(make_audio):
    provider = CloudOpenAIWhisperProvider(WhisperAPIConfig(api_key=None))

    result = await provider.transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.CONFIGURATION


# ============================================================================
# Test: Error translation
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("error,category", [
    (lambda: status_error(openai.AuthenticationError, 401), ErrorCategory.UNAUTHORIZED),
    (lambda: status_error(openai.PermissionDeniedError, 403), ErrorCategory.UNAUTHORIZED),
    (lambda: status_error(openai.RateLimitError, 429), ErrorCategory.QUOTA_EXCEEDED),
    (lambda: status_error(openai.BadRequestError, 400), ErrorCategory.BAD_REQUEST),
    (lambda: status_error(openai.InternalServerError, 500), ErrorCategory.UNCLASSIFIED),
    (
        lambda: openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com")),
        ErrorCategory.TIMEOUT,
    ),
    (
        lambda: openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com")),
        ErrorCategory.UNCLASSIFIED,
    ),
])
async def test_sdk_errors_are_translated(whisper_api_config, make_audio, error, category):
    provider = CloudOpenAIWhisperProvider(whisper_api_config, client=mock_client(error=error()))

    result = await provider.transcribe(make_audio(5_000))

    assert not result.success
    assert result.error_category is category
    assert "boom" not in result.error_message


# ============================================================================
# Test: Requirements and metadata
# ============================================================================

def test_validate_requirements(whisper_api_config):
    assert CloudOpenAIWhisperProvider(whisper_api_config).validate_requirements() == []

    missing = CloudOpenAIWhisperProvider(WhisperAPIConfig(api_key="")).validate_requirements()
    assert "OPENAI_API_KEY" in missing[0]

    malformed = CloudOpenAIWhisperProvider(WhisperAPIConfig(api_key="abc")).validate_requirements()
    assert "sk-" in malformed[0]


def test_engine_info(whisper_api_config):
    provider = CloudOpenAIWhisperProvider(whisper_api_config)

    assert provider.get_engine_info() == ("cloud-openai-whisper", "whisper-1")
