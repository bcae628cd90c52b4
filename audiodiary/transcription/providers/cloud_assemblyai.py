"""
Cloud AssemblyAI Transcription Provider

Implements AssemblyAIProvider, the upload-and-poll provider:

1. Upload the raw recording (POST /v2/upload) and receive a resource URL
2. Submit a transcription request for that URL (POST /v2/transcript)
3. Poll the job (GET /v2/transcript/{id}) until it completes, fails or
   the poll budget runs out

Each call owns one TranscriptionJob that records the local state machine.
Upload, submission and status checks are never retried; the poll loop is
the only repetition. When the poll budget is exhausted the remote job is
left running.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from audiodiary.transcription.audio import HEADER_SIZE, AudioAsset, describe_header, sniff_container
from audiodiary.transcription.config import AssemblyAIConfig, is_real_credential
from audiodiary.transcription.errors import (
    ConfigurationError,
    EmptyResultError,
    InvalidAudioError,
    JobFailedError,
    StatusCheckError,
    SubmissionError,
    TranscriptionError,
    TranscriptionTimeoutError,
    UploadError,
    error_for_status,
)
from audiodiary.transcription.languages import primary_subtag
from audiodiary.transcription.models import JobState, JobStatus, TranscriptionJob, TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider


logger = logging.getLogger(__name__)


class UploadResponse(BaseModel):
    """Body of a successful POST /v2/upload."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    upload_url: str = Field(min_length=1)


class SubmitResponse(BaseModel):
    """Body of a successful POST /v2/transcript."""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = Field(min_length=1)
    status: Optional[str] = None


class TranscriptStatus(BaseModel):
    """Body of GET /v2/transcript/{id}."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: Optional[str] = None
    text: Optional[str] = None
    confidence: Optional[float] = None
    language_code: Optional[str] = None
    error: Optional[str] = None


class AssemblyAIProvider(BaseTranscriptionProvider):
    """
    Transcribes recordings with AssemblyAI's asynchronous transcript API.

    Example:
        >>> provider = AssemblyAIProvider(AssemblyAIConfig(api_key="..."))
        >>> result = await provider.transcribe("entry.m4a", language="lv-LV")
        >>> result.success, result.provider_label
        (True, 'AssemblyAI')
    """

    label = "AssemblyAI"
    DEFAULT_CONFIDENCE = 0.9

    def __init__(self, config: AssemblyAIConfig, http_client: Optional[httpx.AsyncClient] = None):
        if not isinstance(config, AssemblyAIConfig):
            raise ConfigurationError(
                f"Expected AssemblyAIConfig, got {type(config).__name__}"
            )
        super().__init__(http_client)
        self.config = config

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        self._require_credential()
        payload = self._read_payload(asset)

        job = TranscriptionJob()
        async with self.http_session(self.config.request_timeout) as client:
            status = await self.run_job(
                client,
                job,
                payload=payload,
                language=language,
                poll_interval=self.config.poll_interval,
                max_poll_attempts=self.config.max_poll_attempts,
            )

        text = (status.text or "").strip()
        confidence = status.confidence if status.confidence is not None else self.DEFAULT_CONFIDENCE
        logger.info(
            f"AssemblyAI transcript {job.remote_job_id} completed after "
            f"{job.poll_attempts} poll(s), {len(text)} characters"
        )
        return TranscriptionResult.succeeded(text, self.label, confidence)

    def build_submission(self, audio_url: str, language: Optional[str]) -> Dict[str, Any]:
        """Request body for POST /v2/transcript.

        A language hint becomes ``language_code`` (primary subtag only);
        languages the default model does not cover also request the "nano"
        model. Without a hint the service detects the language.
        """
        params: Dict[str, Any] = {
            "audio_url": audio_url,
            "punctuate": True,
            "format_text": True,
        }
        code = primary_subtag(language)
        if code:
            params["language_code"] = code
            if code in self.config.nano_languages:
                params["speech_model"] = "nano"
                logger.debug(f"Using nano model for language: {code}")
        else:
            params["language_detection"] = True
        return params

    async def run_job(
        self,
        client: httpx.AsyncClient,
        job: TranscriptionJob,
        *,
        payload: Optional[bytes] = None,
        audio_url: Optional[str] = None,
        language: Optional[str] = None,
        submission: Optional[Dict[str, Any]] = None,
        poll_interval: float,
        max_poll_attempts: int,
    ) -> TranscriptStatus:
        """Drive one job from upload (or a ready URL) to its completed status.

        Exactly one of ``payload`` (upload first) or ``audio_url`` (already
        reachable) must be given. ``submission`` replaces the default request
        body built by build_submission().

        Returns:
            The completed TranscriptStatus with non-blank text

        Raises:
            TranscriptionError: Subclass describing the failing step
        """
        if (payload is None) == (audio_url is None):
            raise ValueError("Provide exactly one of payload or audio_url")

        try:
            if payload is not None:
                job.transition(JobState.UPLOADING)
                job.uploaded_resource_url = await self._upload(client, payload)
            else:
                job.uploaded_resource_url = audio_url

            if submission is None:
                body = self.build_submission(job.uploaded_resource_url, language)
            else:
                body = dict(submission, audio_url=job.uploaded_resource_url)
            job.remote_job_id = await self._submit(client, body)
            job.transition(JobState.SUBMITTED)
            job.status = JobStatus.SUBMITTED

            return await self._poll(client, job, poll_interval, max_poll_attempts)
        except TranscriptionTimeoutError as e:
            job.error_message = e.message
            job.transition(JobState.TIMED_OUT if job.state is JobState.POLLING else JobState.FAILED)
            raise
        except TranscriptionError as e:
            job.error_message = e.message
            if not job.state.is_terminal:
                job.transition(JobState.FAILED)
            raise

    def get_engine_info(self) -> Tuple[str, str]:
        return ("cloud-assemblyai", "v2")

    def validate_requirements(self) -> List[str]:
        errors = []
        if not is_real_credential(self.config.api_key):
            errors.append(
                "AssemblyAI API key not found. Set ASSEMBLYAI_API_KEY environment variable "
                "or configure assemblyai.api_key in config.yaml"
            )
        if self.config.max_poll_attempts < 1:
            errors.append("assemblyai.max_poll_attempts must be at least 1")
        return errors

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _require_credential(self) -> None:
        if not is_real_credential(self.config.api_key):
            raise ConfigurationError("AssemblyAI API key not configured")

    @property
    def _auth_headers(self) -> Dict[str, str]:
        return {"authorization": self.config.api_key}

    def _read_payload(self, asset: AudioAsset) -> bytes:
        payload = asset.read_bytes()
        size = len(payload)

        if size == 0:
            raise InvalidAudioError(
                "Audio file is empty (0 bytes)",
                user_message="The recording is empty. Record again and speak for at least a second.",
            )
        if size > self.config.max_upload_bytes:
            raise InvalidAudioError(
                f"Audio file too large: {size} bytes (maximum {self.config.max_upload_bytes})",
                user_message="The recording is too large for the speech service.",
            )
        if size < self.config.small_payload_bytes:
            logger.warning(f"Audio file is very small ({size} bytes); it may contain no speech")

        header = payload[:HEADER_SIZE]
        logger.debug(
            f"Audio header [{describe_header(header)}] "
            f"container={sniff_container(header) or 'unknown'} size={size}"
        )
        return payload

    async def _upload(self, client: httpx.AsyncClient, payload: bytes) -> str:
        url = f"{self.config.base_url}/v2/upload"
        logger.debug(f"Uploading {len(payload)} bytes to {url}")
        try:
            response = await client.post(
                url,
                content=payload,
                headers={**self._auth_headers, "content-type": "application/octet-stream"},
            )
        except httpx.RequestError as e:
            raise UploadError(f"Network error during upload: {e}")

        if not response.is_success:
            raise error_for_status(
                response.status_code,
                UploadError,
                f"Upload failed with status {response.status_code}: {response.text[:200]}",
            )

        if not response.content or not response.content.strip():
            raise UploadError("Upload response body is empty", status_code=response.status_code)
        try:
            return UploadResponse.model_validate_json(response.content).upload_url
        except ValidationError as e:
            raise UploadError(
                f"Upload response has no upload_url: {response.text[:200]} ({e.error_count()} error(s))",
                status_code=response.status_code,
            )

    async def _submit(self, client: httpx.AsyncClient, body: Dict[str, Any]) -> str:
        url = f"{self.config.base_url}/v2/transcript"
        options = {k: v for k, v in body.items() if k != "audio_url"}
        logger.debug(f"Submitting transcript request: {options}")
        try:
            response = await client.post(url, json=body, headers=self._auth_headers)
        except httpx.RequestError as e:
            raise SubmissionError(f"Network error during submission: {e}")

        if not response.is_success:
            raise error_for_status(
                response.status_code,
                SubmissionError,
                f"Submission failed with status {response.status_code}: {response.text[:200]}",
            )
        try:
            submitted = SubmitResponse.model_validate_json(response.content)
        except ValidationError:
            raise SubmissionError(
                f"Submission response has no transcript id: {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.info(f"AssemblyAI transcript submitted: {submitted.id}")
        return submitted.id

    async def _poll(
        self,
        client: httpx.AsyncClient,
        job: TranscriptionJob,
        poll_interval: float,
        max_poll_attempts: int,
    ) -> TranscriptStatus:
        url = f"{self.config.base_url}/v2/transcript/{job.remote_job_id}"
        job.transition(JobState.POLLING)

        while job.poll_attempts < max_poll_attempts:
            await asyncio.sleep(poll_interval)
            job.poll_attempts += 1
            logger.debug(f"Checking status, attempt {job.poll_attempts}/{max_poll_attempts}")

            try:
                response = await client.get(url, headers=self._auth_headers)
            except httpx.RequestError as e:
                raise StatusCheckError(f"Network error during status check: {e}")
            if not response.is_success:
                raise error_for_status(
                    response.status_code,
                    StatusCheckError,
                    f"Status check failed with status {response.status_code}: {response.text[:200]}",
                )
            try:
                current = TranscriptStatus.model_validate_json(response.content)
            except ValidationError:
                raise StatusCheckError(
                    f"Unreadable status response: {response.text[:200]}",
                    status_code=response.status_code,
                )

            status = JobStatus.from_remote(current.status)
            if status is None:
                logger.warning(f"Unknown transcript status {current.status!r}; continuing to poll")
                continue
            job.status = status

            if status is JobStatus.COMPLETED:
                if not (current.text or "").strip():
                    raise EmptyResultError("Transcript completed with empty text")
                job.transition(JobState.COMPLETED)
                return current

            if status is JobStatus.FAILED:
                logger.error(f"AssemblyAI transcript {job.remote_job_id} failed: {current.error}")
                raise JobFailedError("Remote transcription job failed", remote_error=current.error)

        raise TranscriptionTimeoutError(
            f"Transcript {job.remote_job_id} not completed after {max_poll_attempts} status checks"
        )
