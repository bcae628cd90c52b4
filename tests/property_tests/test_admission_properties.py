"""
Property-based tests for recording admission and quality classification.

**Property 1: Empty recordings are never admissible**
**Property 2: Oversize recordings are never admissible**
**Property 3: Quality tier never decreases as the recording grows**
**Property 4: Admissible outcomes carry no rejection reason**
"""

import os
import tempfile

from hypothesis import given, settings, strategies as st

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import AudioQualityConfig
from audiodiary.transcription.models import QualityTier
from audiodiary.transcription.quality import AudioQualityAnalyzer
from audiodiary.transcription.validator import AudioValidator


TIER_ORDER = {QualityTier.LOW: 0, QualityTier.MEDIUM: 1, QualityTier.HIGH: 2}

# Small limits keep generated files tiny
SMALL_LIMITS = AudioQualityConfig(
    bytes_per_second=100,
    low_quality_threshold=500,
    high_quality_threshold=2_000,
    max_file_size=4_000,
    very_small_file_threshold=300,
)


def _write(directory, size):
    path = os.path.join(directory, "entry.wav")
    with open(path, "wb") as f:
        f.write(b"\x00" * size)
    return path


@settings(max_examples=50, deadline=None)
@given(config_limit=st.integers(min_value=1, max_value=10_000))
def test_empty_recording_never_admissible(config_limit):
    """
    **Property 1: Empty recordings are never admissible**
    *For any* size limit, a 0-byte recording is rejected as empty.
    """
    with tempfile.TemporaryDirectory() as directory:
        outcome = AudioValidator(AudioQualityConfig(max_file_size=config_limit)).validate(_write(directory, 0))

    assert not outcome.admissible
    assert "empty" in outcome.rejection_reason.lower()


@settings(max_examples=50, deadline=None)
@given(excess=st.integers(min_value=1, max_value=2_000))
def test_oversize_recording_never_admissible(excess):
    """
    **Property 2: Oversize recordings are never admissible**
    *For any* recording larger than max_file_size, validation rejects it.
    """
    with tempfile.TemporaryDirectory() as directory:
        outcome = AudioValidator(SMALL_LIMITS).validate(_write(directory, SMALL_LIMITS.max_file_size + excess))

    assert not outcome.admissible
    assert "too large" in outcome.rejection_reason


@settings(deadline=None)
@given(sizes=st.lists(st.integers(min_value=0, max_value=10_000_000), min_size=2, max_size=10))
def test_quality_tier_is_monotonic(sizes):
    """
    **Property 3: Quality tier never decreases as the recording grows**
    *For any* two sizes a <= b, tier(a) <= tier(b).
    """
    analyzer = AudioQualityAnalyzer(AudioQualityConfig())
    with tempfile.NamedTemporaryFile(suffix=".wav") as f:
        tiers = [
            analyzer.analyze(AudioAsset(location=f.name, byte_length=size)).quality_tier
            for size in sorted(sizes)
        ]

    ranks = [TIER_ORDER[t] for t in tiers]
    assert ranks == sorted(ranks)


@settings(max_examples=50, deadline=None)
@given(size=st.integers(min_value=0, max_value=6_000))
def test_outcome_is_consistent(size):
    """
    **Property 4: Admissible outcomes carry no rejection reason**
    *For any* recording, exactly one of admissible or rejection_reason holds,
    and rejected recordings carry no warnings.
    """
    with tempfile.TemporaryDirectory() as directory:
        outcome = AudioValidator(SMALL_LIMITS).validate(_write(directory, size))

    assert outcome.admissible == (outcome.rejection_reason is None)
    if not outcome.admissible:
        assert outcome.warnings == ()
