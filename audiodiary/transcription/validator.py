"""
Admission checks run before a transcription attempt.

The validator is advisory for the orchestrator: callers use it as a
pre-flight check, and the orchestrator only copies its warnings onto the
result.
"""
import logging
import os
from typing import List, Optional, Union

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import AudioQualityConfig
from audiodiary.transcription.errors import AssetUnavailableError
from audiodiary.transcription.models import QualityTier, ValidationOutcome
from audiodiary.transcription.quality import AudioQualityAnalyzer


logger = logging.getLogger(__name__)

WARNING_LOW_QUALITY = "Low audio quality may reduce recognition accuracy."
WARNING_VERY_SMALL = "Very small file; the recording may not contain enough audio."


class AudioValidator:
    """Enforces duration and size limits on a recording."""

    def __init__(
        self,
        config: Optional[AudioQualityConfig] = None,
        analyzer: Optional[AudioQualityAnalyzer] = None,
    ):
        self.config = config or AudioQualityConfig()
        self.analyzer = analyzer or AudioQualityAnalyzer(self.config)

    def validate(self, asset: Union[AudioAsset, str, os.PathLike]) -> ValidationOutcome:
        """Decide whether the recording may be sent for transcription.

        Rejections, checked in order: unreadable, empty, over the size
        limit, under the minimum duration, over the maximum duration.
        Warnings never block.

        Args:
            asset: AudioAsset or path to the recording

        Returns:
            ValidationOutcome
        """
        try:
            report = self.analyzer.analyze(asset)
        except AssetUnavailableError as e:
            logger.warning(f"Validation could not read the recording: {e}")
            return ValidationOutcome(
                admissible=False,
                rejection_reason="The recording could not be read.",
            )

        cfg = self.config
        if report.file_size_bytes == 0:
            return self._reject("Recording is empty (0 bytes); it is too short to transcribe.")

        if report.file_size_bytes > cfg.max_file_size:
            return self._reject(
                f"Recording is too large ({_megabytes(report.file_size_bytes)} MB, "
                f"maximum {_megabytes(cfg.max_file_size)} MB)."
            )

        if report.estimated_duration_seconds < cfg.min_recording_duration:
            return self._reject(
                f"Recording is too short to transcribe (minimum {cfg.min_recording_duration:g} second(s))."
            )

        if report.estimated_duration_seconds > cfg.max_recording_duration:
            return self._reject(
                f"Recording is too long to transcribe (maximum {cfg.max_recording_duration / 60:g} minute(s))."
            )

        warnings: List[str] = []
        if report.quality_tier is QualityTier.LOW:
            warnings.append(WARNING_LOW_QUALITY)
        if report.file_size_bytes < cfg.very_small_file_threshold:
            warnings.append(WARNING_VERY_SMALL)

        return ValidationOutcome(admissible=True, warnings=tuple(warnings))

    @staticmethod
    def _reject(reason: str) -> ValidationOutcome:
        logger.info(f"Recording rejected: {reason}")
        return ValidationOutcome(admissible=False, rejection_reason=reason)


def _megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.1f}"
