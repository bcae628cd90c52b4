"""
On-device Speech Recognition Provider

Wraps a runtime-supplied, callback-driven recognition engine (a browser's
built-in recognizer, a platform speech service, an embedded model) in the
provider contract. No network call is made by this module.

Events arrive through callbacks, possibly from a foreign thread. They are
funnelled into a single asyncio future: the first terminal event (result,
error, end or cancel) settles it and every later event is ignored.
"""
import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

from audiodiary.transcription.audio import AudioAsset
from audiodiary.transcription.config import OnDeviceSpeechConfig
from audiodiary.transcription.errors import ConfigurationError, UnsupportedRuntimeError
from audiodiary.transcription.languages import to_bcp47
from audiodiary.transcription.models import TranscriptionResult
from audiodiary.transcription.providers.base import BaseTranscriptionProvider
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages


logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, Optional[float], bool], None]
ErrorCallback = Callable[[str], None]
EndCallback = Callable[[], None]

# Engine error code -> (category, user-facing message)
ENGINE_ERRORS = {
    "no-speech": (ErrorCategory.EMPTY_RESULT, "No speech was heard. Speak louder or closer to the microphone."),
    "audio-capture": (ErrorCategory.INVALID_AUDIO, "Microphone problem: no audio could be captured."),
    "not-allowed": (ErrorCategory.UNAUTHORIZED, "Microphone permission has not been granted."),
    "service-not-allowed": (ErrorCategory.UNAUTHORIZED, "The speech recognition service is not allowed here."),
    "network": (ErrorCategory.UNCLASSIFIED, "Network error during speech recognition."),
    "aborted": (ErrorCategory.UNCLASSIFIED, "Speech recognition was stopped."),
    "language-not-supported": (
        ErrorCategory.BAD_REQUEST,
        "The selected language is not supported by on-device recognition.",
    ),
}

NO_RESULT_MESSAGE = "No speech was recognised. Try again."
START_FAILED_MESSAGE = "Speech recognition could not be started."
TIMEOUT_MESSAGE = "Speech recognition did not finish in time."


def describe_engine_error(code: str) -> Tuple[ErrorCategory, str]:
    """Stable (category, message) for an engine error code."""
    return ENGINE_ERRORS.get(code, (ErrorCategory.UNCLASSIFIED, f"Speech recognition error: {code}"))


@runtime_checkable
class SpeechRecognitionEngine(Protocol):
    """Runtime recognition capability.

    ``start`` begins recognition and returns immediately; outcomes are
    reported through the callbacks. ``on_result(text, confidence, is_final)``
    may fire several times when interim results are requested.
    """

    def start(
        self,
        language: str,
        on_result: ResultCallback,
        on_error: ErrorCallback,
        on_end: EndCallback,
        *,
        source: Optional[AudioAsset] = None,
        continuous: bool = False,
        interim_results: bool = False,
    ) -> None:
        ...

    def stop(self) -> None:
        ...


class RecognitionHandle:
    """One running single-shot recognition.

    Await ``result()`` (or the handle itself) for the outcome; ``cancel()``
    stops the engine and settles the handle with an "aborted" failure
    unless it already settled.
    """

    def __init__(
        self,
        engine: SpeechRecognitionEngine,
        label: str,
        default_confidence: float,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._engine = engine
        self._label = label
        self._default_confidence = default_confidence
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    # Engine callbacks --------------------------------------------------

    def on_result(self, text: str, confidence: Optional[float] = None, is_final: bool = True) -> None:
        if not is_final:
            return
        if text and text.strip():
            outcome = TranscriptionResult.succeeded(
                text.strip(),
                self._label,
                confidence if confidence is not None else self._default_confidence,
            )
        else:
            outcome = TranscriptionResult.failed(NO_RESULT_MESSAGE, self._label, ErrorCategory.EMPTY_RESULT)
        self._settle(outcome)

    def on_error(self, code: str) -> None:
        category, message = describe_engine_error(code)
        logger.warning(f"On-device recognition error: {code}")
        self._settle(TranscriptionResult.failed(message, self._label, category))

    def on_end(self) -> None:
        self._settle(TranscriptionResult.failed(NO_RESULT_MESSAGE, self._label, ErrorCategory.EMPTY_RESULT))

    # Control -----------------------------------------------------------

    def cancel(self) -> None:
        """Stop recognition; a no-op once the handle has settled."""
        if self.done:
            return
        try:
            self._engine.stop()
        except Exception as e:
            logger.warning(f"Engine stop failed: {e}")
        category, message = describe_engine_error("aborted")
        self._settle(TranscriptionResult.failed(message, self._label, category))

    async def result(self, timeout: Optional[float] = None) -> TranscriptionResult:
        """Wait for the single terminal outcome.

        Args:
            timeout: Seconds to wait; None or 0 waits indefinitely

        Returns:
            TranscriptionResult; a timeout stops the engine and yields a
            failed result in the timeout category
        """
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout or None)
        except asyncio.TimeoutError:
            logger.warning(f"On-device recognition timed out after {timeout}s")
            try:
                self._engine.stop()
            except Exception as e:
                logger.warning(f"Engine stop failed: {e}")
            self._set_once(TranscriptionResult.failed(TIMEOUT_MESSAGE, self._label, ErrorCategory.TIMEOUT))
            return self._future.result()

    def fail(self, message: str, category: ErrorCategory) -> None:
        """Settle with a failure raised outside the engine callbacks."""
        self._settle(TranscriptionResult.failed(message, self._label, category))

    def __await__(self):
        return self.result().__await__()

    def _settle(self, outcome: TranscriptionResult) -> None:
        # Callbacks may come from an engine thread; resolve on the loop
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._set_once, outcome)

    def _set_once(self, outcome: TranscriptionResult) -> None:
        if not self._future.done():
            self._future.set_result(outcome)
        else:
            logger.debug("Ignoring recognition event after terminal outcome")


class OnDeviceSpeechProvider(BaseTranscriptionProvider):
    """
    Transcribes with the runtime's own speech recognizer.

    Example:
        >>> provider = OnDeviceSpeechProvider(OnDeviceSpeechConfig(), engine=engine)
        >>> handle = provider.start_recognition("lv-LV")
        >>> result = await handle
    """

    label = "On-device speech recognition"

    def __init__(self, config: OnDeviceSpeechConfig, engine: Optional[SpeechRecognitionEngine] = None):
        if not isinstance(config, OnDeviceSpeechConfig):
            raise ConfigurationError(
                f"Expected OnDeviceSpeechConfig, got {type(config).__name__}"
            )
        super().__init__()
        self.config = config
        self.engine = engine

    @property
    def is_supported(self) -> bool:
        return self.engine is not None

    def start_recognition(
        self,
        language: Optional[str] = None,
        source: Optional[AudioAsset] = None,
    ) -> RecognitionHandle:
        """Start single-shot recognition and return its handle.

        Raises:
            UnsupportedRuntimeError: If no engine is available
        """
        if self.engine is None:
            raise UnsupportedRuntimeError("On-device speech recognition is not available in this runtime")

        locale = to_bcp47(language, default=self.config.default_language)
        handle = RecognitionHandle(self.engine, self.label, self.config.default_confidence)
        logger.debug(f"Starting on-device recognition ({locale})")
        try:
            self.engine.start(
                locale,
                handle.on_result,
                handle.on_error,
                handle.on_end,
                source=source,
                continuous=False,
                interim_results=False,
            )
        except Exception as e:
            logger.error(f"On-device recognition failed to start: {e}")
            handle.fail(START_FAILED_MESSAGE, ErrorCategory.UNSUPPORTED_RUNTIME)
        return handle

    def start_live_recognition(
        self,
        on_text: Callable[[str, bool], None],
        on_error: Callable[[str], None],
        language: Optional[str] = None,
    ) -> Callable[[], None]:
        """Continuous recognition with interim results.

        ``on_text(text, is_final)`` receives every interim and final
        transcript; ``on_error`` receives a user-facing message.

        Returns:
            Callable that stops recognition
        """
        if self.engine is None:
            on_error(ErrorMessages.user_message(ErrorCategory.UNSUPPORTED_RUNTIME))
            return lambda: None

        engine = self.engine

        def handle_result(text: str, confidence: Optional[float], is_final: bool) -> None:
            if text:
                on_text(text, is_final)

        def handle_error(code: str) -> None:
            on_error(describe_engine_error(code)[1])

        engine.start(
            to_bcp47(language, default=self.config.default_language),
            handle_result,
            handle_error,
            lambda: None,
            continuous=True,
            interim_results=True,
        )
        return engine.stop

    async def _transcribe(self, asset: AudioAsset, language: Optional[str]) -> TranscriptionResult:
        handle = self.start_recognition(language, source=asset)
        return await handle.result(self.config.recognition_timeout)

    def get_engine_info(self) -> Tuple[str, str]:
        return ("on-device-speech", type(self.engine).__name__ if self.engine else "unavailable")

    def validate_requirements(self) -> List[str]:
        if self.engine is None:
            return ["No on-device speech recognition engine is available in this runtime"]
        return []

