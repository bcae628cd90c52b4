"""
Local Mock Transcription Provider

Offline stand-in used when local simulation mode is enabled or when no
real provider is usable. It returns a canned diary sentence; its label
marks the text as simulated so it is never mistaken for a transcript.
"""
import asyncio
import logging
import random
from typing import List, Optional, Tuple

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import LocalTranscriptionConfig
from audiodiary.transcription.errors import AssetUnavailableError, ConfigurationError
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider
from audiodiary.transcription.registry import LOCAL_MOCK, PROVIDER_LABELS


logger = logging.getLogger(__name__)

MOCK_TEXTS = (
    "Šis ir mana dienasgrāmatas ieraksts par šodienas notikumiem un pārdomām.",
    "Šodien bija ļoti produktīva diena darbā. Izdevās pabeigt visus svarīgos uzdevumus.",
    "SIMULATION: configure an API key for real speech recognition.",
    "Jāsaplāno nākamās nedēļas tikšanās un projekta uzdevumi komandai.",
    "Šī ideja varētu būt ļoti noderīga mūsu nākamajam projektam. Jāapspriež ar kolēģiem.",
    "Jauna mācīšanās pieredze programmēšanā - jāizpēta šī bibliotēka tālāk.",
    "Pozitīva diena ar jauniem sasniegumiem, idejām un interesantām diskusijām.",
)


class LocalMockProvider(BaseTranscriptionProvider):
    """
    Simulated transcription for offline development and last-resort fallback.

    Pass ``rng`` (or set ``seed`` in the config) for reproducible output.
    """

    label = PROVIDER_LABELS[LOCAL_MOCK]

    def __init__(self, config: LocalTranscriptionConfig, rng: Optional[random.Random] = None):
        if not isinstance(config, LocalTranscriptionConfig):
            raise ConfigurationError(
                f"Expected LocalTranscriptionConfig, got {type(config).__name__}"
            )
        if config.min_confidence > config.max_confidence:
            raise ConfigurationError("local_transcription.min_confidence exceeds max_confidence")
        super().__init__()
        self.config = config
        self.rng = rng or random.Random(config.seed)

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        await asyncio.sleep(self.config.processing_delay)

        if not asset.exists():
            raise AssetUnavailableError(f"Audio file not found: {asset.location}")

        text = self.rng.choice(MOCK_TEXTS)
        confidence = self.rng.uniform(self.config.min_confidence, self.config.max_confidence)
        logger.warning("Returning simulated transcription; no real provider was used")
        return TranscriptionResult.succeeded(text, self.label, confidence)

    def get_engine_info(self) -> Tuple[str, str]:
        return ("local-mock", "simulated")

    def validate_requirements(self) -> List[str]:
        return []
