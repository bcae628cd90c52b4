"""
Unit Tests: OnDeviceSpeechProvider

A scripted fake engine stands in for the runtime recognizer.

**Test Coverage:**
- Final results, interim results and default confidence
- Engine error codes mapped to categories and messages
- First terminal event wins
- Start failures, missing engine, timeout and cancellation
- Events delivered from a foreign thread
- Continuous live recognition
"""

import threading

import pytest

from audiodiary.transcription.config import OnDeviceSpeechConfig
from audiodiary.transcription.providers.on_device_speech import (
    NO_RESULT_MESSAGE,
    START_FAILED_MESSAGE,
    TIMEOUT_MESSAGE,
    OnDeviceSpeechProvider,
    SpeechRecognitionEngine,
    describe_engine_error,
)
from audiodiary.utils.error_messages import ErrorCategory, ErrorMessages


# ============================================================================
# Fake engine
# ============================================================================

class FakeEngine:
    """Records start() arguments and replays a script of callback events."""

    def __init__(self, script=None, fail_on_start=False):
        self.script = script or (lambda on_result, on_error, on_end: None)
        self.fail_on_start = fail_on_start
        self.started = []
        self.stopped = 0

    def start(self, language, on_result, on_error, on_end, *, source=None, continuous=False, interim_results=False):
        self.started.append(dict(language=language, source=source, continuous=continuous, interim=interim_results))
        if self.fail_on_start:
            raise RuntimeError("microphone busy")
        self.script(on_result, on_error, on_end)

    def stop(self):
        self.stopped += 1


def make_provider(engine, **overrides):
    return OnDeviceSpeechProvider(OnDeviceSpeechConfig(**overrides), engine=engine)


def test_fake_engine_satisfies_protocol():
    assert isinstance(FakeEngine(), SpeechRecognitionEngine)


# ============================================================================
# Test: Single-shot recognition
# ============================================================================

@pytest.mark.asyncio
async def test_final_result(make_audio):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_result("Labdien", 0.8, True))
    path = make_audio(5_000)

    result = await make_provider(engine).transcribe(path, language="lv")

    assert result.success
    assert result.text == "Labdien"
    assert result.confidence == 0.8
    assert result.provider_label == "On-device speech recognition"
    assert engine.started[0]["language"] == "lv-LV"
    assert engine.started[0]["source"].location == path
    assert engine.started[0]["continuous"] is False


@pytest.mark.asyncio
async def test_missing_confidence_uses_default(make_audio):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_result("Sveiki", None, True))

    result = await make_provider(engine, default_confidence=0.7).transcribe(make_audio(5_000))

    assert result.confidence == 0.7


@pytest.mark.asyncio
async def test_zero_confidence_is_kept(make_audio):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_result("Sveiki", 0.0, True))

    result = await make_provider(engine, default_confidence=0.7).transcribe(make_audio(5_000))

    assert result.success
    assert result.confidence == 0.0


@pytest.mark.asyncio
async def test_interim_results_are_ignored(make_audio):
    def script(on_result, on_error, on_end):
        on_result("Lab", 0.3, False)
        on_result("Labrīt visiem", 0.9, True)

    result = await make_provider(FakeEngine(script)).transcribe(make_audio(5_000))

    assert result.text == "Labrīt visiem"


@pytest.mark.asyncio
async def test_first_terminal_event_wins(make_audio):
    def script(on_result, on_error, on_end):
        on_result("Pirmais", 0.9, True)
        on_error("network")
        on_end()

    result = await make_provider(FakeEngine(script)).transcribe(make_audio(5_000))

    assert result.success
    assert result.text == "Pirmais"


@pytest.mark.asyncio
async def test_blank_final_result_is_empty(make_audio):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_result("   ", 0.9, True))

    result = await make_provider(engine).transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.EMPTY_RESULT
    assert result.error_message == NO_RESULT_MESSAGE


@pytest.mark.asyncio
async def test_end_without_result(make_audio):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_end())

    result = await make_provider(engine).transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.EMPTY_RESULT


@pytest.mark.asyncio
@pytest.mark.parametrize("code,category", [
    ("no-speech", ErrorCategory.EMPTY_RESULT),
    ("audio-capture", ErrorCategory.INVALID_AUDIO),
    ("not-allowed", ErrorCategory.UNAUTHORIZED),
    ("language-not-supported", ErrorCategory.BAD_REQUEST),
    ("something-new", ErrorCategory.UNCLASSIFIED),
])
async def test_engine_errors(make_audio, code, category):
    engine = FakeEngine(lambda on_result, on_error, on_end: on_error(code))

    result = await make_provider(engine).transcribe(make_audio(5_000))

    assert result.error_category is category
    assert result.error_message == describe_engine_error(code)[1]


@pytest.mark.asyncio
async def test_start_failure(make_audio):
    result = await make_provider(FakeEngine(fail_on_start=True)).transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.UNSUPPORTED_RUNTIME
    assert result.error_message == START_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_no_engine_is_unsupported(make_audio):
    provider = make_provider(None)

    result = await provider.transcribe(make_audio(5_000))

    assert not provider.is_supported
    assert result.error_category is ErrorCategory.UNSUPPORTED_RUNTIME
    assert provider.validate_requirements()


@pytest.mark.asyncio
async def test_timeout_stops_engine(make_audio):
    engine = FakeEngine()

    result = await make_provider(engine, recognition_timeout=0.05).transcribe(make_audio(5_000))

    assert result.error_category is ErrorCategory.TIMEOUT
    assert result.error_message == TIMEOUT_MESSAGE
    assert engine.stopped == 1


@pytest.mark.asyncio
async def test_result_from_engine_thread(make_audio):
    def script(on_result, on_error, on_end):
        threading.Timer(0.01, on_result, args=("No cita pavediena", 0.85, True)).start()

    result = await make_provider(FakeEngine(script), recognition_timeout=5).transcribe(make_audio(5_000))

    assert result.success
    assert result.text == "No cita pavediena"


# ============================================================================
# Test: Handle control
# ============================================================================

@pytest.mark.asyncio
async def test_cancel_settles_as_aborted():
    engine = FakeEngine()
    handle = make_provider(engine).start_recognition("en")

    handle.cancel()
    result = await handle

    assert engine.stopped == 1
    assert result.error_message == describe_engine_error("aborted")[1]
    assert handle.done


@pytest.mark.asyncio
async def test_cancel_after_result_is_noop():
    engine = FakeEngine(lambda on_result, on_error, on_end: on_result("Done", 0.9, True))
    handle = make_provider(engine).start_recognition("en")

    result = await handle
    handle.cancel()

    assert result.success
    assert engine.stopped == 0


# ============================================================================
# Test: Live recognition
# ============================================================================

def test_live_recognition_forwards_interim_and_final():
    def script(on_result, on_error, on_end):
        on_result("Lab", None, False)
        on_result("Labdien", 0.9, True)
        on_result("", None, False)
        on_error("no-speech")

    engine = FakeEngine(script)
    texts, errors = [], []

    stop = make_provider(engine).start_live_recognition(
        lambda text, is_final: texts.append((text, is_final)), errors.append, language="lv"
    )

    assert texts == [("Lab", False), ("Labdien", True)]
    assert errors == [describe_engine_error("no-speech")[1]]
    assert engine.started[0]["continuous"] is True
    assert engine.started[0]["interim"] is True
    stop()
    assert engine.stopped == 1


def test_live_recognition_without_engine():
    errors = []

    stop = make_provider(None).start_live_recognition(lambda text, final: None, errors.append)
    stop()

    assert errors == [ErrorMessages.user_message(ErrorCategory.UNSUPPORTED_RUNTIME)]
