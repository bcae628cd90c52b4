"""
Pytest configuration and fixtures for test isolation.
"""
import os

import pytest


# Environment variables that would make a real provider "available"
PROVIDER_ENV_VARS = (
    "ASSEMBLYAI_API_KEY",
    "OPENAI_API_KEY",
    "GOOGLE_SPEECH_API_KEY",
    "AZURE_SPEECH_KEY",
    "AZURE_SPEECH_REGION",
    "AUDIODIARY_PRIORITY",
    "AUDIODIARY_LANGUAGE",
    "AUDIODIARY_LOCAL_TRANSCRIPTION",
    "AUDIODIARY_PREFLIGHT_VALIDATION",
)

WAV_HEADER = b"RIFF\x24\x00\x00\x00WAVE"


@pytest.fixture(autouse=True)
def isolate_tests(monkeypatch):
    """
    Automatically isolate each test from the developer's credentials and
    AUDIODIARY_* overrides so provider selection is deterministic.
    """
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("AUDIODIARY_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True, scope="function")
def reset_environment():
    """Reset environment variables between tests."""
    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def make_audio(tmp_path):
    """Factory writing a fake recording of an exact byte size.

    The payload starts with a WAV header (when large enough) so container
    sniffing recognises it.
    """
    def _make(size: int, name: str = "entry.wav", header: bytes = WAV_HEADER) -> str:
        path = tmp_path / name
        if size >= len(header):
            data = header + b"\x00" * (size - len(header))
        else:
            data = b"\x00" * size
        path.write_bytes(data)
        return str(path)
    return _make


@pytest.fixture
def audio_file(make_audio):
    """A medium-quality, admissible recording (~3 s by the size estimate)."""
    return make_audio(100_000)
