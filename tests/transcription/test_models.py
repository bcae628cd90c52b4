"""
Unit Tests: Result and job models

**Test Coverage:**
- TranscriptionResult success/failure invariants
- Confidence clamping and validation
- Serialization for the persistence layer
- Job state machine transitions and remote status mapping
"""

import pytest

from audiodiary.transcription.models import (
    JobState,
    JobStatus,
    TranscriptionJob,
    TranscriptionResult,
    ValidationOutcome,
)
from audiodiary.utils.error_messages import ErrorCategory


# ============================================================================
# Test: TranscriptionResult
# ============================================================================

def test_succeeded_result():
    result = TranscriptionResult.succeeded("Labdien", "AssemblyAI", 0.87)

    assert result.success
    assert result.text == "Labdien"
    assert result.error_message is None
    assert result.error_category is None


def test_succeeded_clamps_confidence():
    assert TranscriptionResult.succeeded("x", "p", 1.7).confidence == 1.0
    assert TranscriptionResult.succeeded("x", "p", -0.2).confidence == 0.0


def test_failed_result():
    result = TranscriptionResult.failed("Nope", "Google Speech", ErrorCategory.TIMEOUT)

    assert not result.success
    assert result.text is None
    assert result.error_category is ErrorCategory.TIMEOUT


@pytest.mark.parametrize("kwargs", [
    dict(success=True, provider_label="p", text="   "),
    dict(success=True, provider_label="p", text="ok", error_message="also failed"),
    dict(success=False, provider_label="p"),
    dict(success=False, provider_label="p", text="hi", error_message="bad"),
    dict(success=True, provider_label="p", text="ok", confidence=1.5),
])
def test_inconsistent_results_are_rejected(kwargs):
    with pytest.raises(ValueError):
        TranscriptionResult(**kwargs)


def test_with_warnings_keeps_outcome():
    result = TranscriptionResult.succeeded("text", "p", 0.9).with_warnings(["quiet"])

    assert result.warnings == ("quiet",)
    assert result.text == "text"
    assert result.confidence == 0.9


def test_to_dict():
    result = TranscriptionResult.failed("Too long", "AssemblyAI", ErrorCategory.TIMEOUT).with_warnings(["w"])

    assert result.to_dict() == {
        "success": False,
        "text": None,
        "confidence": None,
        "provider": "AssemblyAI",
        "error": "Too long",
        "error_category": "timeout",
        "warnings": ["w"],
    }


def test_validation_outcome_invariants():
    with pytest.raises(ValueError):
        ValidationOutcome(admissible=True, rejection_reason="why")
    with pytest.raises(ValueError):
        ValidationOutcome(admissible=False)


# ============================================================================
# Test: Job state machine
# ============================================================================

def test_upload_path_transitions():
    job = TranscriptionJob()
    for state in (JobState.UPLOADING, JobState.SUBMITTED, JobState.POLLING, JobState.COMPLETED):
        job.transition(state)

    assert job.state is JobState.COMPLETED
    assert job.history[0] is JobState.IDLE
    assert job.state.is_terminal


def test_url_path_skips_upload():
    job = TranscriptionJob()
    job.transition(JobState.SUBMITTED)

    assert job.state is JobState.SUBMITTED


@pytest.mark.parametrize("path", [
    [JobState.POLLING],
    [JobState.UPLOADING, JobState.COMPLETED],
    [JobState.UPLOADING, JobState.FAILED, JobState.SUBMITTED],
    [JobState.SUBMITTED, JobState.TIMED_OUT],
])
def test_illegal_transitions(path):
    job = TranscriptionJob()
    with pytest.raises(ValueError):
        for state in path:
            job.transition(state)


@pytest.mark.parametrize("remote,expected", [
    ("queued", JobStatus.SUBMITTED),
    ("processing", JobStatus.PROCESSING),
    ("completed", JobStatus.COMPLETED),
    ("error", JobStatus.FAILED),
    ("COMPLETED", JobStatus.COMPLETED),
    ("paused", None),
    (None, None),
])
def test_remote_status_mapping(remote, expected):
    assert JobStatus.from_remote(remote) is expected
