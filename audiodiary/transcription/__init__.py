"""
Transcription Core

Speech-to-text for diary recordings.

Key Components:
    - quality.py / validator.py: AudioQualityAnalyzer and AudioValidator
    - registry.py: ProviderRegistry, the priority-ordered provider list
    - factory.py: TranscriptionProviderFactory for provider instantiation
    - providers/: provider implementations
    - orchestrator.py: TranscriptionOrchestrator, the entry point
    - connection_tester.py: ConnectionTester for credential diagnostics
    - config.py: Configuration management with environment variable support
    - errors.py: Transcription-specific error classes

Usage:
    >>> from audiodiary.transcription import TranscriptionConfig, TranscriptionOrchestrator
    >>>
    >>> config = TranscriptionConfig.load_from_yaml('audiodiary.yaml')
    >>> orchestrator = TranscriptionOrchestrator(config)
    >>> result = await orchestrator.transcribe("entry.m4a", language="lv")
"""

# Export data model
from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.models import (
    QualityReport,
    QualityTier,
    TranscriptionResult,
    ValidationOutcome,
)

# Export components
from audiodiary.transcription.quality import AudioQualityAnalyzer
from audiodiary.transcription.validator import AudioValidator
from audiodiary.transcription.registry import ProviderDescriptor, ProviderRegistry
from audiodiary.transcription.factory import TranscriptionProviderFactory
from audiodiary.transcription.orchestrator import TranscriptionOrchestrator
from audiodiary.transcription.connection_tester import ConnectionTester

# Export configuration classes
from audiodiary.transcription.config import TranscriptionConfig

# Export error classes
from audiodiary.transcription.errors import (
    TranscriptionError,
    ConfigurationError,
    AssetUnavailableError,
    UnsupportedRuntimeError,
)

__all__ = [
    # Data model
    "AudioAsset",
    "QualityReport",
    "QualityTier",
    "TranscriptionResult",
    "ValidationOutcome",

    # Components
    "AudioQualityAnalyzer",
    "AudioValidator",
    "ProviderDescriptor",
    "ProviderRegistry",
    "TranscriptionProviderFactory",
    "TranscriptionOrchestrator",
    "ConnectionTester",

    # Configuration
    "TranscriptionConfig",

    # Errors
    "TranscriptionError",
    "ConfigurationError",
    "AssetUnavailableError",
    "UnsupportedRuntimeError",
]
