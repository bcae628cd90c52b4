"""
Cloud Azure Speech Transcription Provider

Uses the Azure Speech short-audio REST endpoint: the raw recording is the
request body and the recognized text is returned in the same response.
"""
import logging
from typing import List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import AzureSpeechConfig, is_real_credential
from audiodiary.transcription.errors import (
    ConfigurationError,
    EmptyResultError,
    InvalidAudioError,
    JobFailedError,
    TranscriptionError,
)
from audiodiary.transcription.languages import to_bcp47
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider
from audiodiary.utils.error_messages import category_for_status


logger = logging.getLogger(__name__)

# Statuses meaning "the audio was processed but contained no speech"
NO_SPEECH_STATUSES = ("NoMatch", "InitialSilenceTimeout", "BabbleTimeout")


class NBestEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    confidence: Optional[float] = Field(default=None, alias="Confidence")
    display: str = Field(default="", alias="Display")


class RecognitionResponse(BaseModel):
    """Body of a detailed-format recognition response."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    recognition_status: str = Field(alias="RecognitionStatus")
    display_text: str = Field(default="", alias="DisplayText")
    nbest: List[NBestEntry] = Field(default_factory=list, alias="NBest")


class AzureSpeechProvider(BaseTranscriptionProvider):
    """
    Transcribes recordings with Azure Cognitive Services Speech.

    Example:
        >>> provider = AzureSpeechProvider(AzureSpeechConfig(api_key="...", region="westeurope"))
        >>> result = await provider.transcribe("entry.wav", language="lv-LV")
    """

    label = "Azure Speech"
    DEFAULT_CONFIDENCE = 0.9
    DEFAULT_CONTENT_TYPE = "audio/wav"

    def __init__(self, config: AzureSpeechConfig, http_client: Optional[httpx.AsyncClient] = None):
        if not isinstance(config, AzureSpeechConfig):
            raise ConfigurationError(
                f"Expected AzureSpeechConfig, got {type(config).__name__}"
            )
        super().__init__(http_client)
        self.config = config

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self.config.region}.stt.speech.microsoft.com"
            "/speech/recognition/conversation/cognitiveservices/v1"
        )

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        if not is_real_credential(self.config.api_key):
            raise ConfigurationError("Azure Speech key not configured")

        payload = asset.read_bytes()
        if not payload:
            raise InvalidAudioError("Audio file is empty (0 bytes)")

        locale = to_bcp47(language)
        headers = {
            "Ocp-Apim-Subscription-Key": self.config.api_key,
            "Content-Type": asset.mime_hint or self.DEFAULT_CONTENT_TYPE,
            "Accept": "application/json",
        }
        logger.debug(f"Azure Speech request: region={self.config.region}, language={locale}")

        async with self.http_session(self.config.timeout) as client:
            response = await client.post(
                self.endpoint,
                params={"language": locale, "format": "detailed"},
                content=payload,
                headers=headers,
            )

        if not response.is_success:
            raise TranscriptionError(
                f"Azure Speech error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                category=category_for_status(response.status_code),
            )

        try:
            parsed = RecognitionResponse.model_validate_json(response.content)
        except ValidationError:
            raise TranscriptionError(f"Unreadable Azure Speech response: {response.text[:200]}")

        if parsed.recognition_status in NO_SPEECH_STATUSES:
            raise EmptyResultError(f"Azure Speech recognized no speech ({parsed.recognition_status})")
        if parsed.recognition_status != "Success":
            raise JobFailedError(
                "Azure Speech recognition failed",
                remote_error=parsed.recognition_status,
            )

        text = parsed.display_text.strip()
        if not text and parsed.nbest:
            text = parsed.nbest[0].display.strip()
        if not text:
            raise EmptyResultError("Azure Speech returned empty text")

        confidence = self.DEFAULT_CONFIDENCE
        if parsed.nbest and parsed.nbest[0].confidence is not None:
            confidence = parsed.nbest[0].confidence
        return TranscriptionResult.succeeded(text, self.label, confidence)

    def get_engine_info(self) -> Tuple[str, str]:
        return ("cloud-azure-speech", self.config.region)

    def validate_requirements(self) -> List[str]:
        errors = []
        if not is_real_credential(self.config.api_key):
            errors.append(
                "Azure Speech key not found. Set AZURE_SPEECH_KEY environment variable "
                "or configure azure_speech.api_key in config.yaml"
            )
        if not self.config.region:
            errors.append("Azure Speech region not set (AZURE_SPEECH_REGION)")
        return errors
