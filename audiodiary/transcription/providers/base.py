"""
Transcription Provider Protocol

Defines the TranscriberProvider protocol for transcription provider
implementations, and BaseTranscriptionProvider, which every concrete
provider extends.

The base class owns the boundary rule: transcribe() never raises. Internal
steps raise TranscriptionError subclasses (or let transport exceptions
escape); the base class logs the technical detail and converts the
exception into a failed TranscriptionResult with a stable user-facing
message.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Protocol, Tuple, Union, runtime_checkable

import httpx

from audiodiary.transcription.audio import AudioAsset, ensure_asset
from audiodiary.transcription.errors import TranscriptionError
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.utils.error_messages import classify_error


logger = logging.getLogger(__name__)

AssetLike = Union[AudioAsset, str, os.PathLike]


@runtime_checkable
class TranscriberProvider(Protocol):
    """
    Protocol for transcription provider implementations.

    All providers implement this protocol so the orchestrator can treat
    cloud services, on-device recognition and the local mock alike.

    Example:
        >>> provider = AssemblyAIProvider(config.assemblyai)
        >>> if not provider.validate_requirements():
        ...     result = await provider.transcribe(asset, language="lv")
        ...     print(result.text)
    """

    label: str

    async def transcribe(
        self, asset: AssetLike, language: Optional[str] = None
    ) -> TranscriptionResult:
        """
        Transcribe the recording and return a normalized result.

        Never raises: every failure is reported as a failed
        TranscriptionResult whose error_message is safe to show to the user.

        Args:
            asset: AudioAsset or path to the recording
            language: Optional language hint ("lv", "lv-LV", "auto")

        Returns:
            TranscriptionResult
        """
        ...

    def get_engine_info(self) -> Tuple[str, str]:
        """
        Return the provider name and model/version used for transcription.

        Returns:
            Tuple of (provider_name, version_info)
        """
        ...

    def validate_requirements(self) -> List[str]:
        """
        Validate provider requirements and return any errors.

        Returns:
            List of error messages. Empty list means the provider is usable.
        """
        ...


class BaseTranscriptionProvider:
    """Shared boundary handling for concrete providers.

    Subclasses implement ``_transcribe(asset, language)`` and may raise;
    ``transcribe()`` is the only public entry point.

    Network providers accept an optional ``http_client``. When one is given
    it is reused (and never closed here); otherwise each transcription opens
    and closes its own client.
    """

    label = "Transcription"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self._http_client = http_client

    async def transcribe(
        self, asset: AssetLike, language: Optional[str] = None
    ) -> TranscriptionResult:
        try:
            asset = ensure_asset(asset)
            return await self._transcribe(asset, language)
        except TranscriptionError as e:
            category, message = classify_error(e)
            logger.error(f"{self.label} transcription failed [{category.value}]: {e.message}")
        except Exception as e:
            category, message = classify_error(e)
            logger.exception(f"{self.label} transcription failed [{category.value}]: {e}")
        return TranscriptionResult.failed(message, self.label, category)

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        raise NotImplementedError

    @asynccontextmanager
    async def http_session(self, timeout: float) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client
