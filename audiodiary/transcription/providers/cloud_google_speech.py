"""
Cloud Google Speech Transcription Provider

Synchronous recognize call of the Google Speech-to-Text v1 REST API: the
recording travels base64-encoded inside the JSON request and the
transcript comes back in the same response.
"""
import base64
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import GoogleSpeechConfig, is_real_credential
from audiodiary.transcription.errors import (
    ConfigurationError,
    EmptyResultError,
    InvalidAudioError,
    TranscriptionError,
)
from audiodiary.transcription.languages import to_bcp47
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider
from audiodiary.utils.error_messages import category_for_status


logger = logging.getLogger(__name__)


class SpeechAlternative(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transcript: str = ""
    confidence: Optional[float] = None


class SpeechResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    alternatives: List[SpeechAlternative] = []


class RecognizeResponse(BaseModel):
    """Body of a successful speech:recognize call."""
    model_config = ConfigDict(extra="ignore")

    results: List[SpeechResult] = []


class GoogleSpeechProvider(BaseTranscriptionProvider):
    """
    Transcribes recordings with Google Speech-to-Text.

    Example:
        >>> provider = GoogleSpeechProvider(GoogleSpeechConfig(api_key="AIza..."))
        >>> result = await provider.transcribe("entry.webm", language="lv")
    """

    label = "Google Speech"
    DEFAULT_CONFIDENCE = 0.9
    # Synchronous recognition accepts about one minute of inline audio
    MAX_INLINE_BYTES = 10 * 1024 * 1024

    def __init__(self, config: GoogleSpeechConfig, http_client: Optional[httpx.AsyncClient] = None):
        if not isinstance(config, GoogleSpeechConfig):
            raise ConfigurationError(
                f"Expected GoogleSpeechConfig, got {type(config).__name__}"
            )
        super().__init__(http_client)
        self.config = config

    def build_request(self, payload: bytes, language: Optional[str]) -> Dict[str, Any]:
        """JSON body for speech:recognize."""
        return {
            "config": {
                "encoding": self.config.encoding,
                "sampleRateHertz": self.config.sample_rate_hertz,
                "languageCode": to_bcp47(language),
                "alternativeLanguageCodes": list(self.config.alternative_language_codes),
                "enableAutomaticPunctuation": self.config.enable_automatic_punctuation,
                "enableWordConfidence": self.config.enable_word_confidence,
                "model": self.config.model,
            },
            "audio": {
                "content": base64.b64encode(payload).decode("ascii"),
            },
        }

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        if not is_real_credential(self.config.api_key):
            raise ConfigurationError("Google Speech API key not configured")

        payload = asset.read_bytes()
        if not payload:
            raise InvalidAudioError("Audio file is empty (0 bytes)")
        if len(payload) > self.MAX_INLINE_BYTES:
            raise InvalidAudioError(f"Audio too large for inline recognition: {len(payload)} bytes")

        body = self.build_request(payload, language)
        logger.debug(f"Google Speech request: language={body['config']['languageCode']}, {len(payload)} bytes")

        async with self.http_session(self.config.timeout) as client:
            response = await client.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=body,
            )

        if not response.is_success:
            # Statuses without a category of their own stay unclassified
            raise TranscriptionError(
                f"Google Speech API error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                category=category_for_status(response.status_code),
            )

        try:
            parsed = RecognizeResponse.model_validate_json(response.content or b"{}")
        except ValidationError:
            raise TranscriptionError(f"Unreadable Google Speech response: {response.text[:200]}")

        for result in parsed.results:
            if result.alternatives and result.alternatives[0].transcript.strip():
                best = result.alternatives[0]
                confidence = best.confidence if best.confidence is not None else self.DEFAULT_CONFIDENCE
                return TranscriptionResult.succeeded(best.transcript.strip(), self.label, confidence)

        raise EmptyResultError("Google Speech returned no results")

    def get_engine_info(self) -> Tuple[str, str]:
        return ("cloud-google-speech", self.config.model)

    def validate_requirements(self) -> List[str]:
        errors = []
        if not is_real_credential(self.config.api_key):
            errors.append(
                "Google Speech API key not found. Set GOOGLE_SPEECH_API_KEY environment variable "
                "or configure google_speech.api_key in config.yaml"
            )
        return errors
