"""
Provider registry.

Holds one ProviderDescriptor per credential-backed transcription service
and answers "which provider should be used" by walking the configured
priority order. On-device recognition and the local mock are not
registered here: they need no credential and are the orchestrator's
fallbacks.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from audiodiary.transcription.config import TranscriptionConfig, is_real_credential


logger = logging.getLogger(__name__)

ASSEMBLYAI = "assemblyai"
OPENAI = "openai"
GOOGLE = "google"
AZURE = "azure"
ON_DEVICE = "on-device"
LOCAL_MOCK = "local-mock"


@dataclass(frozen=True)
class ProviderCapabilities:
    """Static traits of a provider.

    Attributes:
        requires_upload: Audio is uploaded and the result polled
        supports_language_detection: Provider can detect the language itself
        alternate_model_languages: Languages that need an alternate model
    """
    requires_upload: bool = False
    supports_language_detection: bool = False
    alternate_model_languages: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ProviderDescriptor:
    """Configuration and availability of one credential-backed provider."""
    identifier: str
    label: str
    credential: Optional[str]
    priority: int
    capabilities: ProviderCapabilities = field(default_factory=ProviderCapabilities)

    @property
    def is_available(self) -> bool:
        """A provider is available when a non-placeholder credential is set."""
        return is_real_credential(self.credential)

    def __repr__(self) -> str:
        # Credentials stay out of logs and tracebacks
        return (
            f"ProviderDescriptor(identifier={self.identifier!r}, priority={self.priority}, "
            f"available={self.is_available})"
        )


PROVIDER_LABELS = {
    ASSEMBLYAI: "AssemblyAI",
    OPENAI: "OpenAI Whisper",
    GOOGLE: "Google Speech",
    AZURE: "Azure Speech",
    ON_DEVICE: "On-device speech recognition",
    LOCAL_MOCK: "Local Mock (simulated, not a real transcription)",
}


def _descriptors_from_config(config: TranscriptionConfig) -> Dict[str, dict]:
    return {
        ASSEMBLYAI: dict(
            credential=config.assemblyai.api_key,
            capabilities=ProviderCapabilities(
                requires_upload=True,
                supports_language_detection=True,
                alternate_model_languages=frozenset(config.assemblyai.nano_languages),
            ),
        ),
        OPENAI: dict(
            credential=config.whisper_api.api_key,
            capabilities=ProviderCapabilities(supports_language_detection=True),
        ),
        GOOGLE: dict(
            credential=config.google_speech.api_key,
            capabilities=ProviderCapabilities(),
        ),
        AZURE: dict(
            credential=config.azure_speech.api_key,
            capabilities=ProviderCapabilities(),
        ),
    }


class ProviderRegistry:
    """Priority-ordered view over the configured providers.

    Example:
        >>> registry = ProviderRegistry.from_config(TranscriptionConfig.from_env())
        >>> descriptor = registry.first_available()
        >>> descriptor.identifier if descriptor else "none"
        'assemblyai'
    """

    def __init__(self, descriptors: List[ProviderDescriptor]):
        self._descriptors = sorted(descriptors, key=lambda d: d.priority)

    @classmethod
    def from_config(cls, config: TranscriptionConfig) -> "ProviderRegistry":
        """Build the registry from configuration.

        Identifiers in ``config.priority`` that are not known providers are
        ignored and repeats keep their first position; known providers
        missing from it are appended after the listed ones.
        """
        known = _descriptors_from_config(config)
        order = list(dict.fromkeys(p for p in config.priority if p in known))
        ignored = [p for p in config.priority if p not in known]
        if ignored:
            logger.debug(f"Ignoring unknown providers in priority list: {ignored}")
        for identifier in known:
            if identifier not in order:
                order.append(identifier)

        descriptors = [
            ProviderDescriptor(
                identifier=identifier,
                label=PROVIDER_LABELS[identifier],
                priority=rank,
                **known[identifier],
            )
            for rank, identifier in enumerate(order)
        ]
        return cls(descriptors)

    def list_by_priority(self) -> List[ProviderDescriptor]:
        """All registered providers, highest priority first."""
        return list(self._descriptors)

    def first_available(self) -> Optional[ProviderDescriptor]:
        """Highest-priority provider with a real credential, or None."""
        for descriptor in self._descriptors:
            if descriptor.is_available:
                logger.debug(f"First available provider: {descriptor.identifier}")
                return descriptor
        logger.debug("No credential-backed provider is configured")
        return None

    def get(self, identifier: str) -> Optional[ProviderDescriptor]:
        for descriptor in self._descriptors:
            if descriptor.identifier == identifier:
                return descriptor
        return None

    def status(self) -> Dict[str, bool]:
        """Availability of every registered provider, keyed by identifier."""
        return {d.identifier: d.is_available for d in self._descriptors}
