"""
Unit Tests: TranscriptionProviderFactory

**Test Coverage:**
- Dispatch from identifier to provider class
- Provider caching and cache clearing
- Unknown identifiers
- Requirement validation and available providers
"""

import pytest

from audiodiary.transcription.config import (
    AssemblyAIConfig,
    TranscriptionConfig,
    WhisperAPIConfig,
)
from audiodiary.transcription.errors import ConfigurationError
from audiodiary.transcription.factory import PROVIDER_IDS, TranscriptionProviderFactory
from audiodiary.transcription.providers.base import TranscriberProvider
from audiodiary.transcription.providers.cloud_assemblyai import AssemblyAIProvider
from audiodiary.transcription.providers.cloud_azure_speech import AzureSpeechProvider
from audiodiary.transcription.providers.cloud_google_speech import GoogleSpeechProvider
from audiodiary.transcription.providers.cloud_openai_whisper import CloudOpenAIWhisperProvider
from audiodiary.transcription.providers.local_mock import LocalMockProvider
from audiodiary.transcription.providers.on_device_speech import OnDeviceSpeechProvider
from audiodiary.transcription.registry import ProviderRegistry


@pytest.fixture
def factory():
    return TranscriptionProviderFactory(TranscriptionConfig.from_env())


@pytest.mark.parametrize("identifier,cls", [
    ("assemblyai", AssemblyAIProvider),
    ("openai", CloudOpenAIWhisperProvider),
    ("google", GoogleSpeechProvider),
    ("azure", AzureSpeechProvider),
    ("on-device", OnDeviceSpeechProvider),
    ("local-mock", LocalMockProvider),
])
def test_create_provider_dispatch(factory, identifier, cls):
    provider = factory.create_provider(identifier)

    assert isinstance(provider, cls)
    assert isinstance(provider, TranscriberProvider)


def test_providers_are_cached(factory):
    first = factory.create_provider("assemblyai")

    assert factory.create_provider("assemblyai") is first
    factory.clear_cache()
    assert factory.create_provider("assemblyai") is not first


def test_unknown_provider(factory):
    with pytest.raises(ConfigurationError) as exc_info:
        factory.create_provider("deepgram")

    assert "Unknown provider" in str(exc_info.value)


def test_create_for_descriptor(factory):
    descriptor = ProviderRegistry.from_config(factory.config).get("google")

    assert isinstance(factory.create_for(descriptor), GoogleSpeechProvider)


def test_engine_is_passed_to_on_device_provider():
    engine = object()
    factory = TranscriptionProviderFactory(TranscriptionConfig.from_env(), engine=engine)

    assert factory.on_device_supported
    assert factory.create_provider("on-device").engine is engine


def test_available_providers_without_credentials(factory):
    assert factory.get_available_providers() == ["local-mock"]


def test_available_providers_with_credentials():
    config = TranscriptionConfig.from_env().with_overrides(
        assemblyai=AssemblyAIConfig(api_key="aai"),
        whisper_api=WhisperAPIConfig(api_key="sk-x"),
    )

    available = TranscriptionProviderFactory(config).get_available_providers()

    assert available == ["assemblyai", "openai", "local-mock"]


def test_validate_provider_requirements(factory):
    assert factory.validate_provider_requirements("assemblyai")
    assert factory.validate_provider_requirements("local-mock") == []
    assert "Unknown provider" in factory.validate_provider_requirements("nope")[0]


def test_provider_ids_cover_every_path():
    assert set(PROVIDER_IDS) == {"assemblyai", "openai", "google", "azure", "on-device", "local-mock"}
