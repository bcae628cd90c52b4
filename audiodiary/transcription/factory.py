"""
Transcription Provider Factory

Closed-set dispatch from a provider identifier to a provider instance.
Handles provider instantiation, caching and requirement validation based
on configuration. There is no plugin loading: the identifiers below are
the whole set.
"""

import logging
import random
from typing import Dict, List, Optional

import httpx
from openai import AsyncOpenAI

from audiodiary.transcription.config import TranscriptionConfig
from audiodiary.transcription.errors import ConfigurationError
from audiodiary.transcription.providers.base import TranscriberProvider
from audiodiary.transcription.providers.cloud_assemblyai import AssemblyAIProvider
from audiodiary.transcription.providers.cloud_azure_speech import AzureSpeechProvider
from audiodiary.transcription.providers.cloud_google_speech import GoogleSpeechProvider
from audiodiary.transcription.providers.cloud_openai_whisper import CloudOpenAIWhisperProvider
from audiodiary.transcription.providers.local_mock import LocalMockProvider
from audiodiary.transcription.providers.on_device_speech import (
    OnDeviceSpeechProvider,
    SpeechRecognitionEngine,
)
from audiodiary.transcription.registry import (
    ASSEMBLYAI,
    AZURE,
    GOOGLE,
    LOCAL_MOCK,
    ON_DEVICE,
    OPENAI,
    ProviderDescriptor,
)


logger = logging.getLogger(__name__)

PROVIDER_IDS = (ASSEMBLYAI, OPENAI, GOOGLE, AZURE, ON_DEVICE, LOCAL_MOCK)


class TranscriptionProviderFactory:
    """Factory for creating transcription providers with validation support.

    This factory handles:
    - Provider instantiation based on provider identifier
    - Provider caching to prevent redundant instantiation
    - Provider validation before use

    Collaborators the providers cannot build themselves (the runtime's
    recognition engine, shared HTTP clients, a seeded random generator)
    are handed in here and passed through.

    Example:
        >>> config = TranscriptionConfig.load_from_yaml('audiodiary.yaml')
        >>> factory = TranscriptionProviderFactory(config)
        >>> provider = factory.create_provider("assemblyai")
        >>> if not provider.validate_requirements():
        ...     result = await provider.transcribe("entry.m4a")
    """

    def __init__(
        self,
        config: TranscriptionConfig,
        engine: Optional[SpeechRecognitionEngine] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        openai_client: Optional[AsyncOpenAI] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize transcription provider factory.

        Args:
            config: Transcription configuration with all provider configs
            engine: On-device recognition engine, if the runtime has one
            http_client: Shared client for the HTTP providers (tests, pooling)
            openai_client: Pre-built AsyncOpenAI client
            rng: Random generator for the local mock
        """
        self.config = config
        self.engine = engine
        self.http_client = http_client
        self.openai_client = openai_client
        self.rng = rng

        # Cache for instantiated providers
        self._provider_cache: Dict[str, TranscriberProvider] = {}

    @property
    def on_device_supported(self) -> bool:
        return self.engine is not None

    def create_provider(self, provider: str) -> TranscriberProvider:
        """Create provider for specified provider identifier.

        Supports: assemblyai, openai, google, azure, on-device, local-mock

        Args:
            provider: Provider identifier

        Returns:
            Instantiated transcription provider

        Raises:
            ConfigurationError: If provider is unknown
        """
        if provider in self._provider_cache:
            return self._provider_cache[provider]

        provider_instance = self._instantiate_provider(provider)
        self._provider_cache[provider] = provider_instance
        logger.debug(f"Created provider {provider}: {type(provider_instance).__name__}")
        return provider_instance

    def create_for(self, descriptor: ProviderDescriptor) -> TranscriberProvider:
        """Create the provider matching a registry descriptor."""
        return self.create_provider(descriptor.identifier)

    def _instantiate_provider(self, provider: str) -> TranscriberProvider:
        if provider == ASSEMBLYAI:
            return AssemblyAIProvider(self.config.assemblyai, http_client=self.http_client)

        elif provider == OPENAI:
            return CloudOpenAIWhisperProvider(self.config.whisper_api, client=self.openai_client)

        elif provider == GOOGLE:
            return GoogleSpeechProvider(self.config.google_speech, http_client=self.http_client)

        elif provider == AZURE:
            return AzureSpeechProvider(self.config.azure_speech, http_client=self.http_client)

        elif provider == ON_DEVICE:
            return OnDeviceSpeechProvider(self.config.on_device, engine=self.engine)

        elif provider == LOCAL_MOCK:
            return LocalMockProvider(self.config.local_transcription, rng=self.rng)

        else:
            raise ConfigurationError(
                f"Unknown provider: {provider}. "
                f"Valid options: {', '.join(PROVIDER_IDS)}"
            )

    def get_available_providers(self) -> List[str]:
        """Get list of providers whose requirements are currently met."""
        available = []
        for provider in PROVIDER_IDS:
            try:
                if not self._instantiate_provider(provider).validate_requirements():
                    available.append(provider)
            except ConfigurationError:
                continue
        return available

    def validate_provider_requirements(self, provider: str) -> List[str]:
        """Validate that provider requirements are met without caching.

        Args:
            provider: Provider identifier to validate

        Returns:
            List of error messages. Empty list means all requirements are met.
        """
        try:
            return self._instantiate_provider(provider).validate_requirements()
        except ConfigurationError as e:
            return [str(e)]

    def clear_cache(self):
        """Clear the provider cache.

        This forces re-instantiation of providers on next request.
        """
        self._provider_cache.clear()
