"""
Transcription Providers

Provider implementations follow the {deployment}_{service}.py naming pattern.

Available Providers:
    - AssemblyAIProvider: AssemblyAI upload-and-poll API (cloud_assemblyai.py)
    - CloudOpenAIWhisperProvider: OpenAI Whisper API (cloud_openai_whisper.py)
    - GoogleSpeechProvider: Google Speech-to-Text (cloud_google_speech.py)
    - AzureSpeechProvider: Azure Speech short-audio REST (cloud_azure_speech.py)
    - OnDeviceSpeechProvider: runtime speech recognizer (on_device_speech.py)
    - LocalMockProvider: simulated output for offline use (local_mock.py)

All providers implement the TranscriberProvider protocol defined in base.py.
"""

from audiodiary.transcription.providers.base import BaseTranscriptionProvider, TranscriberProvider

__all__ = [
    "BaseTranscriptionProvider",
    "TranscriberProvider",
]
