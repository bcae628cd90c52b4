"""
Cloud OpenAI Whisper Transcription Provider

Implements CloudOpenAIWhisperProvider using OpenAI's Whisper API through the
asynchronous OpenAI SDK client. A single round trip: the recording is sent
as a multipart upload and the transcript comes back in the response.
"""
import logging
from typing import List, Optional, Tuple

import openai
from openai import AsyncOpenAI

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import WhisperAPIConfig, is_real_credential
from audiodiary.transcription.errors import (
    BadRequestError,
    ConfigurationError,
    EmptyResultError,
    InvalidAudioError,
    QuotaExceededError,
    TranscriptionError,
    TranscriptionTimeoutError,
    UnauthorizedCredentialError,
    error_for_status,
)
from audiodiary.transcription.languages import primary_subtag
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider


logger = logging.getLogger(__name__)


class CloudOpenAIWhisperProvider(BaseTranscriptionProvider):
    """
    Transcribes audio using OpenAI's Whisper API.

    The API reports no confidence, so results carry the configured
    default_confidence.

    Example:
        >>> config = WhisperAPIConfig(api_key="sk-...")
        >>> provider = CloudOpenAIWhisperProvider(config)
        >>> result = await provider.transcribe("entry.m4a", language="lv-LV")
        >>> print(result.text)
    """

    label = "OpenAI Whisper"

    # Maximum file size (25 MB)
    MAX_FILE_SIZE = 25 * 1024 * 1024

    def __init__(self, config: WhisperAPIConfig, client: Optional[AsyncOpenAI] = None):
        """
        Initialize the OpenAI Whisper API provider with configuration.

        Args:
            config: WhisperAPIConfig instance with provider configuration
            client: Optional pre-built AsyncOpenAI client

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not isinstance(config, WhisperAPIConfig):
            raise ConfigurationError(
                f"Expected WhisperAPIConfig, got {type(config).__name__}"
            )
        super().__init__()
        self.config = config
        self.client = client

    def _ensure_client_initialized(self) -> AsyncOpenAI:
        """Ensure the OpenAI client is initialized."""
        if self.client is None:
            if not is_real_credential(self.config.api_key):
                raise ConfigurationError("OpenAI API key not configured")
            self.client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self.client

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        client = self._ensure_client_initialized()

        payload = asset.read_bytes()
        if not payload:
            raise InvalidAudioError("Audio file is empty (0 bytes)")
        if len(payload) > self.MAX_FILE_SIZE:
            raise InvalidAudioError(
                f"File too large: {len(payload) / (1024 * 1024):.1f}MB. "
                f"Maximum size: {self.MAX_FILE_SIZE / (1024 * 1024):.0f}MB"
            )

        transcription_params = {
            "model": self.config.model,
            "temperature": self.config.temperature,
            "response_format": self.config.response_format,
        }
        code = primary_subtag(language)
        if code:
            transcription_params["language"] = code

        logger.debug(f"Sending {len(payload)} bytes to Whisper API ({self.config.model}, language={code})")
        try:
            response = await client.audio.transcriptions.create(
                file=(asset.filename, payload),
                **transcription_params
            )
        except openai.APIError as e:
            raise self._translate_api_error(e)

        text = response if isinstance(response, str) else getattr(response, "text", "")
        text = (text or "").strip()
        if not text:
            raise EmptyResultError("Whisper API returned empty text")

        detected = getattr(response, "language", None)
        logger.info(f"Whisper API transcription complete ({len(text)} characters, language={detected or code})")
        return TranscriptionResult.succeeded(text, self.label, self.config.default_confidence)

    @staticmethod
    def _translate_api_error(error: "openai.APIError") -> TranscriptionError:
        """Map an OpenAI SDK exception onto the transcription error taxonomy."""
        message = f"OpenAI Whisper API transcription failed: {error}"
        if isinstance(error, openai.APITimeoutError):
            return TranscriptionTimeoutError(message)
        if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
            return UnauthorizedCredentialError(message, status_code=error.status_code)
        if isinstance(error, openai.RateLimitError):
            return QuotaExceededError(message, status_code=error.status_code)
        if isinstance(error, openai.BadRequestError):
            return BadRequestError(message, status_code=error.status_code)
        if isinstance(error, openai.APIStatusError):
            return error_for_status(error.status_code, TranscriptionError, message)
        return TranscriptionError(message)

    def get_engine_info(self) -> Tuple[str, str]:
        """
        Return the provider name and model variant.

        Returns:
            Tuple of (provider_name, model_variant)
        """
        return ("cloud-openai-whisper", self.config.model)

    def validate_requirements(self) -> List[str]:
        """
        Validate that the OpenAI API is properly configured.

        Returns:
            List of error messages. Empty list means all requirements are met.
        """
        errors = []
        if not is_real_credential(self.config.api_key):
            errors.append(
                "OpenAI API key not found. Set OPENAI_API_KEY environment variable "
                "or configure whisper_api.api_key in config.yaml"
            )
            return errors

        if not self.config.api_key.startswith('sk-'):
            errors.append("Invalid OpenAI API key format. API key should start with 'sk-'.")
        return errors
