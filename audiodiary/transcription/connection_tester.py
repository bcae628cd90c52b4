"""
Connection Tester

Operator diagnostic: runs a provider end to end against a known-good public
recording to confirm the credential and the service are healthy. It is not
used when creating diary entries.

Only the upload-and-poll provider can transcribe a remote fixture URL; for
the other providers the test reports that it is unsupported.
"""
import logging
from typing import Optional

import httpx

from audiodiary.transcription.config import TranscriptionConfig
from audiodiary.transcription.errors import TranscriptionError, UnauthorizedCredentialError
from audiodiary.transcription.models import TranscriptionJob, TranscriptionResult
from audiodiary.transcription.providers.cloud_assemblyai import AssemblyAIProvider
from audiodiary.transcription.registry import ASSEMBLYAI, ProviderDescriptor
from audiodiary.utils.error_messages import ErrorCategory, classify_error


logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


class ConnectionTester:
    """Checks provider credentials against a fixed fixture.

    The test holds no state between calls, so repeating it against a
    healthy service yields the same outcome.

    Example:
        >>> tester = ConnectionTester(config)
        >>> result = await tester.test_provider(registry.get("assemblyai"))
        >>> result.text
        'Connection OK: ...'
    """

    def __init__(self, config: TranscriptionConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.http_client = http_client

    async def test_provider(self, descriptor: ProviderDescriptor) -> TranscriptionResult:
        """Run the end-to-end check for one provider.

        Args:
            descriptor: Registry entry of the provider to test

        Returns:
            TranscriptionResult: success text "Connection OK: <preview>",
            or a failure whose category distinguishes a rejected credential
        """
        label = f"{descriptor.label} Test"

        if not descriptor.is_available:
            return TranscriptionResult.failed(
                f"{descriptor.label} is not configured (no API key).",
                label,
                ErrorCategory.CONFIGURATION,
            )
        if descriptor.identifier != ASSEMBLYAI:
            return TranscriptionResult.failed(
                f"Connection test is not supported for {descriptor.label}.",
                label,
                ErrorCategory.UNSUPPORTED_RUNTIME,
            )

        cfg = self.config.assemblyai
        provider = AssemblyAIProvider(cfg, http_client=self.http_client)
        job = TranscriptionJob()
        logger.info(f"Testing {descriptor.label} with fixture {cfg.test_audio_url}")

        try:
            async with provider.http_session(cfg.request_timeout) as client:
                status = await provider.run_job(
                    client,
                    job,
                    audio_url=cfg.test_audio_url,
                    submission={"language_code": "en"},
                    poll_interval=cfg.test_poll_interval,
                    max_poll_attempts=cfg.test_max_poll_attempts,
                )
        except UnauthorizedCredentialError as e:
            logger.error(f"{descriptor.label} rejected the API key: {e.message}")
            return TranscriptionResult.failed(
                f"The {descriptor.label} API key is invalid or blocked.",
                label,
                ErrorCategory.UNAUTHORIZED,
            )
        except TranscriptionError as e:
            logger.error(f"{descriptor.label} connection test failed: {e.message}")
            if e.status_code is not None:
                message = f"{descriptor.label} service error {e.status_code}."
            else:
                message = classify_error(e)[1]
            return TranscriptionResult.failed(message, label, e.category)
        except Exception as e:
            category, message = classify_error(e)
            logger.exception(f"{descriptor.label} connection test failed: {e}")
            return TranscriptionResult.failed(message, label, category)

        preview = (status.text or "").strip()[:PREVIEW_LENGTH]
        logger.info(f"{descriptor.label} connection OK after {job.poll_attempts} poll(s)")
        return TranscriptionResult.succeeded(f"Connection OK: {preview}", label, 1.0)
