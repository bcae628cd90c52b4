"""
Property-based tests for provider selection and result normalization.

**Property 5: First available provider respects priority**
**Property 6: Every known provider is listed exactly once**
**Property 7: Result confidence always lies in [0, 1]**
**Property 8: Region-qualified language tags reduce to their primary subtag**
"""

from hypothesis import given, strategies as st

from audiodiary.transcription.config import (
    AssemblyAIConfig,
    AzureSpeechConfig,
    GoogleSpeechConfig,
    TranscriptionConfig,
    WhisperAPIConfig,
)
from audiodiary.transcription.languages import primary_subtag
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.registry import ASSEMBLYAI, AZURE, GOOGLE, OPENAI, ProviderRegistry


KNOWN = [ASSEMBLYAI, OPENAI, GOOGLE, AZURE]

credential = st.one_of(
    st.none(),
    st.just(""),
    st.just("YOUR_API_KEY"),
    st.text(alphabet="abcdef0123456789", min_size=4, max_size=12),
)


def _config(priority, keys):
    return TranscriptionConfig.from_env().with_overrides(
        priority=tuple(priority),
        assemblyai=AssemblyAIConfig(api_key=keys[0]),
        whisper_api=WhisperAPIConfig(api_key=keys[1]),
        google_speech=GoogleSpeechConfig(api_key=keys[2]),
        azure_speech=AzureSpeechConfig(api_key=keys[3]),
    )


@given(
    priority=st.lists(st.sampled_from(KNOWN + ["deepgram", "whisper-local"]), max_size=6),
    keys=st.tuples(credential, credential, credential, credential),
)
def test_first_available_respects_priority(priority, keys):
    """
    **Property 5: First available provider respects priority**
    *For any* priority list and credential set, first_available() is the
    first listed provider with a real credential, or None.
    """
    registry = ProviderRegistry.from_config(_config(priority, keys))

    expected = next((d for d in registry.list_by_priority() if d.is_available), None)
    assert registry.first_available() == expected
    if expected is not None:
        assert all(not d.is_available for d in registry.list_by_priority()[:expected.priority])


@given(priority=st.lists(st.sampled_from(KNOWN + ["unknown"]), max_size=8))
def test_every_known_provider_listed_once(priority):
    """
    **Property 6: Every known provider is listed exactly once**
    """
    registry = ProviderRegistry.from_config(_config(priority, (None, None, None, None)))
    listed = [d.identifier for d in registry.list_by_priority()]

    assert sorted(listed) == sorted(KNOWN)
    first_listed = [p for p in dict.fromkeys(priority) if p in KNOWN]
    assert listed[:len(first_listed)] == first_listed


@given(confidence=st.floats(allow_nan=False, allow_infinity=False, width=32))
def test_confidence_is_clamped(confidence):
    """
    **Property 7: Result confidence always lies in [0, 1]**
    """
    result = TranscriptionResult.succeeded("teksts", "Provider", confidence)

    assert 0.0 <= result.confidence <= 1.0


@given(
    primary=st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=2, max_size=3),
    region=st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=2, max_size=2),
)
def test_primary_subtag_of_region_tag(primary, region):
    """
    **Property 8: Region-qualified language tags reduce to their primary subtag**
    """
    assert primary_subtag(f"{primary}-{region}") == primary
    assert primary_subtag(f"{primary.upper()}_{region}") == primary
