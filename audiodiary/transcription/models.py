"""
Transcription data model.

Value objects exchanged between the analyzer, validator, providers and the
orchestrator. Everything except TranscriptionJob is immutable; a job is
owned by exactly one transcribe() call and discarded when it returns.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Dict, Any, List

from audiodiary.utils.error_messages import ErrorCategory


class QualityTier(str, Enum):
    """Coarse usability class of a recording."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class QualityReport:
    """Result of AudioQualityAnalyzer.analyze().

    estimated_duration_seconds is derived from the file size, not decoded
    from the audio stream.
    """
    estimated_duration_seconds: float
    file_size_bytes: int
    quality_tier: QualityTier
    advisory: Optional[str] = None


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of AudioValidator.validate()."""
    admissible: bool
    rejection_reason: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.admissible and self.rejection_reason:
            raise ValueError("An admissible outcome cannot carry a rejection reason")
        if not self.admissible and not self.rejection_reason:
            raise ValueError("A rejected outcome needs a rejection reason")


class JobStatus(str, Enum):
    """Remote status of an upload-and-poll job."""
    SUBMITTED = "submitted"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_remote(cls, value: Optional[str]) -> Optional["JobStatus"]:
        """Map the service's status vocabulary; None for unknown values."""
        return _REMOTE_STATUS.get((value or "").lower())


_REMOTE_STATUS = {
    "queued": JobStatus.SUBMITTED,
    "submitted": JobStatus.SUBMITTED,
    "processing": JobStatus.PROCESSING,
    "completed": JobStatus.COMPLETED,
    "error": JobStatus.FAILED,
    "failed": JobStatus.FAILED,
}


class JobState(str, Enum):
    """Local state machine of one upload-and-poll transcription."""
    IDLE = "idle"
    UPLOADING = "uploading"
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT)


_ALLOWED_TRANSITIONS = {
    JobState.IDLE: {JobState.UPLOADING, JobState.SUBMITTED, JobState.FAILED},
    JobState.UPLOADING: {JobState.SUBMITTED, JobState.FAILED},
    JobState.SUBMITTED: {JobState.POLLING, JobState.FAILED},
    JobState.POLLING: {JobState.COMPLETED, JobState.FAILED, JobState.TIMED_OUT},
}


@dataclass
class TranscriptionJob:
    """Bookkeeping for one upload-and-poll transcription.

    IDLE -> SUBMITTED is allowed for jobs that skip the upload because the
    audio is already reachable by URL (connection test fixture).
    """
    state: JobState = JobState.IDLE
    uploaded_resource_url: Optional[str] = None
    remote_job_id: Optional[str] = None
    status: Optional[JobStatus] = None
    poll_attempts: int = 0
    error_message: Optional[str] = None
    history: List[JobState] = field(default_factory=lambda: [JobState.IDLE])

    def transition(self, new_state: JobState) -> None:
        """Move to new_state, refusing transitions the state machine does not have."""
        allowed = _ALLOWED_TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise ValueError(f"Illegal job transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)


@dataclass(frozen=True)
class TranscriptionResult:
    """The single normalized outcome every provider produces.

    Exactly one of (success, text) or (failure, error_message) holds. Use
    the succeeded()/failed() constructors; __post_init__ rejects anything
    else.

    Attributes:
        success: Whether text was obtained
        text: Transcribed text (success only, never blank)
        confidence: Confidence in [0, 1] when the provider reports one
        provider_label: Human-readable name of the provider that answered
        error_message: User-facing failure message (failure only)
        error_category: Failure category (failure only)
        warnings: Advisory notes from the pre-flight validator
    """
    success: bool
    provider_label: str
    text: Optional[str] = None
    confidence: Optional[float] = None
    error_message: Optional[str] = None
    error_category: Optional[ErrorCategory] = None
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.success:
            if self.text is None or not self.text.strip():
                raise ValueError("A successful result needs non-blank text")
            if self.error_message is not None:
                raise ValueError("A successful result cannot carry an error message")
        else:
            if not self.error_message:
                raise ValueError("A failed result needs an error message")
            if self.text is not None:
                raise ValueError("A failed result cannot carry text")
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")

    @classmethod
    def succeeded(
        cls,
        text: str,
        provider_label: str,
        confidence: Optional[float] = None,
    ) -> "TranscriptionResult":
        if confidence is not None:
            confidence = min(1.0, max(0.0, float(confidence)))
        return cls(success=True, text=text, confidence=confidence, provider_label=provider_label)

    @classmethod
    def failed(
        cls,
        error_message: str,
        provider_label: str,
        category: ErrorCategory = ErrorCategory.UNCLASSIFIED,
    ) -> "TranscriptionResult":
        return cls(
            success=False,
            error_message=error_message,
            error_category=category,
            provider_label=provider_label,
        )

    def with_warnings(self, warnings) -> "TranscriptionResult":
        """Return a copy carrying the given advisory warnings."""
        return TranscriptionResult(
            success=self.success,
            provider_label=self.provider_label,
            text=self.text,
            confidence=self.confidence,
            error_message=self.error_message,
            error_category=self.error_category,
            warnings=tuple(warnings),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping for the persistence collaborator."""
        return {
            "success": self.success,
            "text": self.text,
            "confidence": self.confidence,
            "provider": self.provider_label,
            "error": self.error_message,
            "error_category": self.error_category.value if self.error_category else None,
            "warnings": list(self.warnings),
        }
