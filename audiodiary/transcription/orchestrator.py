"""
Transcription Orchestrator

The façade the diary screen calls. It chooses a provider, runs it and
returns exactly one TranscriptionResult. transcribe() is a total function:
missing configuration degrades to on-device recognition or the local mock,
and any unexpected exception becomes a failed result.

Selection order (first match wins):
1. Local simulation mode enabled -> local mock
2. Caller prefers on-device and the runtime supports it -> on-device
3. Highest-priority provider with a real credential
4. On-device recognition, when supported
5. Local mock
"""
import logging
import os
from typing import Any, Dict, Optional, Tuple, Union

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import TranscriptionConfig
from audiodiary.transcription.factory import TranscriptionProviderFactory
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.on_device_speech import SpeechRecognitionEngine
from audiodiary.transcription.registry import (
    LOCAL_MOCK,
    ON_DEVICE,
    PROVIDER_LABELS,
    ProviderRegistry,
)
from audiodiary.transcription.validator import AudioValidator
from audiodiary.utils.error_messages import classify_error
from audiodiary.utils.logging_config import logging_config


logger = logging.getLogger(__name__)

FALLBACK_LABEL = "Transcription"


class TranscriptionOrchestrator:
    """Chooses a provider for each recording and normalizes its outcome.

    Example:
        >>> orchestrator = TranscriptionOrchestrator(TranscriptionConfig.from_env())
        >>> result = await orchestrator.transcribe("entry.m4a", language="lv")
        >>> result.to_dict()["provider"]
        'AssemblyAI'
    """

    def __init__(
        self,
        config: TranscriptionConfig,
        registry: Optional[ProviderRegistry] = None,
        factory: Optional[TranscriptionProviderFactory] = None,
        validator: Optional[AudioValidator] = None,
        engine: Optional[SpeechRecognitionEngine] = None,
    ):
        self.config = config
        self.registry = registry or ProviderRegistry.from_config(config)
        self.factory = factory or TranscriptionProviderFactory(config, engine=engine)
        self.validator = validator or AudioValidator(config.audio_quality)

    @property
    def on_device_supported(self) -> bool:
        return self.factory.on_device_supported

    def select_provider(self, prefer_on_device: bool = False) -> Tuple[str, str]:
        """Pick the provider identifier for the next transcription.

        Returns:
            Tuple of (identifier, reason)
        """
        if self.config.local_transcription.enabled:
            return LOCAL_MOCK, "local simulation mode is enabled"

        if prefer_on_device and self.on_device_supported:
            return ON_DEVICE, "on-device recognition requested by caller"

        descriptor = self.registry.first_available()
        if descriptor is not None:
            return descriptor.identifier, f"highest-priority configured provider (rank {descriptor.priority})"

        if self.on_device_supported:
            return ON_DEVICE, "no provider credential configured; on-device recognition is supported"

        return LOCAL_MOCK, "no provider credential configured and no on-device recognition"

    async def transcribe(
        self,
        asset: Union[AudioAsset, str, os.PathLike],
        language: Optional[str] = None,
        prefer_on_device: bool = False,
    ) -> TranscriptionResult:
        """Transcribe a recording with the best available provider.

        Never raises. Pre-flight validation warnings (and a rejection reason,
        if any) are attached to the result as advisory ``warnings``; they
        never block the attempt.

        Args:
            asset: AudioAsset or path to the recording
            language: Language hint; defaults to config.default_language,
                "auto" asks the provider to detect it
            prefer_on_device: Use on-device recognition when supported

        Returns:
            TranscriptionResult
        """
        warnings = self._preflight(asset)
        label = FALLBACK_LABEL
        if language is None:
            language = self.config.default_language

        try:
            identifier, reason = self.select_provider(prefer_on_device)
            label = PROVIDER_LABELS.get(identifier, label)
            logging_config.log_provider_selection(
                identifier, reason, [d.identifier for d in self.registry.list_by_priority() if d.is_available]
            )

            provider = self.factory.create_provider(identifier)
            label = provider.label
            with logging_config.timed(f"{label} transcription"):
                result = await provider.transcribe(asset, language)
        except Exception as e:
            category, message = classify_error(e)
            logger.exception(f"Transcription via {label} failed unexpectedly: {e}")
            result = TranscriptionResult.failed(message, label, category)

        if result.success:
            logger.info(f"Transcription succeeded via {result.provider_label}")
        else:
            logger.warning(
                f"Transcription via {result.provider_label} failed "
                f"[{result.error_category.value if result.error_category else 'unknown'}]"
            )

        if warnings:
            result = result.with_warnings(warnings)
        return result

    def _preflight(self, asset) -> Tuple[str, ...]:
        if not self.config.preflight_validation:
            return ()
        try:
            outcome = self.validator.validate(asset)
        except Exception as e:
            logger.warning(f"Pre-flight validation skipped: {e}")
            return ()

        warnings = list(outcome.warnings)
        if not outcome.admissible:
            logger.info(f"Pre-flight validation would reject the recording: {outcome.rejection_reason}")
            warnings.insert(0, outcome.rejection_reason)
        return tuple(warnings)

    def api_status(self) -> Dict[str, Any]:
        """Availability of every transcription path.

        Returns:
            Mapping with per-provider availability, on-device support, local
            mode, the provider that would be used now, and whether any
            credential-backed provider is configured
        """
        active, _ = self.select_provider()
        providers = self.registry.status()
        return {
            "providers": providers,
            "on_device": self.on_device_supported,
            "local_mode": self.config.local_transcription.enabled,
            "active_provider": active,
            "has_any_provider": any(providers.values()),
        }
