"""
Audio quality analysis.

The duration estimate is a heuristic: file size divided by an assumed
constant byte rate (AudioQualityConfig.bytes_per_second). No audio is
decoded, so variable-bitrate or heavily compressed recordings are
mis-estimated; tier boundaries are defined against this estimate.
"""
import logging
import os
from typing import Optional, Union

from audiodiary.transcription.audio import AudioAsset, ensure_asset
from audiodiary.transcription.config import AudioQualityConfig
from audiodiary.transcription.errors import AssetUnavailableError
from audiodiary.transcription.models import QualityReport, QualityTier


logger = logging.getLogger(__name__)

ADVISORY_TOO_SHORT = "Recording is too short for reliable speech recognition."
ADVISORY_LOW = "Record a longer clip for better recognition."
ADVISORY_MEDIUM = "Good quality for speech recognition."
ADVISORY_HIGH = "Excellent quality for speech recognition."


class AudioQualityAnalyzer:
    """Classifies a recording as low, medium or high quality.

    Example:
        >>> analyzer = AudioQualityAnalyzer(AudioQualityConfig())
        >>> report = analyzer.analyze("entry.m4a")
        >>> report.quality_tier
        <QualityTier.HIGH: 'high'>
    """

    def __init__(self, config: Optional[AudioQualityConfig] = None):
        self.config = config or AudioQualityConfig()

    def estimate_duration(self, file_size_bytes: int) -> float:
        """Estimated duration in seconds for a payload of the given size."""
        return file_size_bytes / float(self.config.bytes_per_second)

    def analyze(self, asset: Union[AudioAsset, str, os.PathLike]) -> QualityReport:
        """Inspect the recording and classify it.

        Args:
            asset: AudioAsset or path to the recording

        Returns:
            QualityReport, recomputed on every call

        Raises:
            AssetUnavailableError: If the recording does not exist or cannot be read
        """
        asset = ensure_asset(asset)
        if not asset.exists():
            raise AssetUnavailableError(f"Audio file not found: {asset.location}")

        file_size = asset.byte_length
        duration = self.estimate_duration(file_size)

        if file_size < self.config.low_quality_threshold:
            tier, advisory = QualityTier.LOW, ADVISORY_LOW
        elif file_size > self.config.high_quality_threshold:
            tier, advisory = QualityTier.HIGH, ADVISORY_HIGH
        else:
            tier, advisory = QualityTier.MEDIUM, ADVISORY_MEDIUM

        if duration < self.config.min_recording_duration:
            tier, advisory = QualityTier.LOW, ADVISORY_TOO_SHORT

        logger.debug(
            f"Quality of {asset.location}: {file_size} bytes, ~{duration:.1f}s, tier={tier.value}"
        )
        return QualityReport(
            estimated_duration_seconds=duration,
            file_size_bytes=file_size,
            quality_tier=tier,
            advisory=advisory,
        )
