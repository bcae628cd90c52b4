"""
Transcription Configuration Management

This module provides configuration classes for transcription providers,
audio quality thresholds and the local simulation mode. It handles
configuration loading from YAML files with environment variable substitution
and precedence rules.

All configuration objects are frozen: they are built once at process start
and handed to the registry, factory and orchestrator, which never read
ambient global state.

Configuration Precedence (highest to lowest):
1. Explicit values in the YAML file (after ${VAR:-default} substitution)
2. Environment variables (ASSEMBLYAI_API_KEY, OPENAI_API_KEY, AUDIODIARY_*, ...)
3. System defaults
"""

import os
import re
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Dict, Any, Tuple
from pathlib import Path
import yaml

from audiodiary.transcription.errors import ConfigurationError


# Values shipped in sample configs that must never count as a credential
PLACEHOLDER_PREFIXES = ("YOUR_", "<")

DEFAULT_PRIORITY = ("assemblyai", "openai", "google", "azure")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def is_real_credential(value: Optional[str]) -> bool:
    """Return True when value looks like an actual credential.

    None, blank strings and placeholders such as ``YOUR_OPENAI_API_KEY``
    are not credentials.
    """
    if value is None:
        return False
    stripped = value.strip()
    if not stripped:
        return False
    return not stripped.upper().startswith(PLACEHOLDER_PREFIXES)


@dataclass(frozen=True)
class AssemblyAIConfig:
    """Configuration for the AssemblyAI upload-and-poll provider.

    Attributes:
        api_key: AssemblyAI API key
        base_url: API root; upload, transcript and status paths hang off it
        poll_interval: Seconds to wait before each status check
        max_poll_attempts: Status checks before giving up with a timeout
        request_timeout: Per-request HTTP timeout in seconds
        max_upload_bytes: Provider-side payload ceiling
        small_payload_bytes: Payloads below this size are logged as suspicious
        nano_languages: Language codes that need the lightweight "nano" model
        test_audio_url: Known-good public recording used by the connection test
        test_poll_interval: Poll interval for the connection test
        test_max_poll_attempts: Poll budget for the connection test
    """
    api_key: Optional[str] = None
    base_url: str = "https://api.assemblyai.com"
    poll_interval: float = 1.5
    max_poll_attempts: int = 20
    request_timeout: float = 60.0
    max_upload_bytes: int = 50 * 1024 * 1024
    small_payload_bytes: int = 1000
    nano_languages: Tuple[str, ...] = ("lv", "et", "lt", "sk", "sl", "hr", "bg")
    test_audio_url: str = (
        "https://github.com/AssemblyAI-Examples/audio-examples/raw/main/"
        "20230607_me_canadian_english.wav"
    )
    test_poll_interval: float = 3.0
    test_max_poll_attempts: int = 30


@dataclass(frozen=True)
class WhisperAPIConfig:
    """Configuration for the OpenAI Whisper API provider.

    Attributes:
        api_key: OpenAI API key
        base_url: Optional API base URL override (proxies, compatible servers)
        model: Whisper model to use (whisper-1)
        temperature: Sampling temperature (0.0 to 1.0)
        response_format: Response format requested from the API
        timeout: API request timeout in seconds
        default_confidence: Confidence reported, the API returns none
    """
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "whisper-1"
    temperature: float = 0.0
    response_format: str = "verbose_json"
    timeout: float = 60.0
    default_confidence: float = 0.95


@dataclass(frozen=True)
class GoogleSpeechConfig:
    """Configuration for the Google Speech-to-Text provider."""
    api_key: Optional[str] = None
    endpoint: str = "https://speech.googleapis.com/v1/speech:recognize"
    encoding: str = "WEBM_OPUS"
    sample_rate_hertz: int = 48000
    alternative_language_codes: Tuple[str, ...] = ("en-US", "ru-RU")
    model: str = "latest_long"
    enable_automatic_punctuation: bool = True
    enable_word_confidence: bool = True
    timeout: float = 60.0


@dataclass(frozen=True)
class AzureSpeechConfig:
    """Configuration for the Azure Speech short-audio REST provider."""
    api_key: Optional[str] = None
    region: str = "eastus"
    timeout: float = 60.0


@dataclass(frozen=True)
class OnDeviceSpeechConfig:
    """Configuration for on-device recognition.

    Attributes:
        default_language: BCP-47 tag used when the caller gives no hint
        recognition_timeout: Seconds to wait for a terminal event (0 disables)
        default_confidence: Confidence reported when the engine gives none
    """
    default_language: str = "lv-LV"
    recognition_timeout: float = 30.0
    default_confidence: float = 0.9


@dataclass(frozen=True)
class LocalTranscriptionConfig:
    """Configuration for the local simulation mode.

    Attributes:
        enabled: Route every request to the local mock
        processing_delay: Simulated processing time in seconds
        min_confidence: Lower bound of the simulated confidence
        max_confidence: Upper bound of the simulated confidence
        seed: Optional seed for reproducible mock output
    """
    enabled: bool = False
    processing_delay: float = 2.0
    min_confidence: float = 0.85
    max_confidence: float = 1.0
    seed: Optional[int] = None


@dataclass(frozen=True)
class AudioQualityConfig:
    """Thresholds for quality classification and admission checks.

    Attributes:
        bytes_per_second: Assumed encoded bytes per second of speech; the
            duration estimate is file size divided by this value
        high_quality_threshold: Files larger than this are high quality
        low_quality_threshold: Files smaller than this are low quality
        min_recording_duration: Shortest admissible estimated duration (s)
        max_recording_duration: Longest admissible estimated duration (s)
        max_file_size: Largest admissible file in bytes
        very_small_file_threshold: Files below this size get a warning
    """
    bytes_per_second: int = 32000
    high_quality_threshold: int = 200000
    low_quality_threshold: int = 50000
    min_recording_duration: float = 1.0
    max_recording_duration: float = 300.0
    max_file_size: int = 25 * 1024 * 1024
    very_small_file_threshold: int = 10000


@dataclass(frozen=True)
class TranscriptionConfig:
    """Main configuration class for the transcription core.

    Attributes:
        assemblyai: AssemblyAI provider configuration
        whisper_api: OpenAI Whisper provider configuration
        google_speech: Google Speech provider configuration
        azure_speech: Azure Speech provider configuration
        on_device: On-device recognition configuration
        local_transcription: Local simulation mode configuration
        audio_quality: Quality and admission thresholds
        priority: Provider identifiers in selection order
        default_language: Language used when the caller gives no hint
        preflight_validation: Run the validator before transcribing and
            attach its warnings to the result
    """
    assemblyai: AssemblyAIConfig = field(default_factory=AssemblyAIConfig)
    whisper_api: WhisperAPIConfig = field(default_factory=WhisperAPIConfig)
    google_speech: GoogleSpeechConfig = field(default_factory=GoogleSpeechConfig)
    azure_speech: AzureSpeechConfig = field(default_factory=AzureSpeechConfig)
    on_device: OnDeviceSpeechConfig = field(default_factory=OnDeviceSpeechConfig)
    local_transcription: LocalTranscriptionConfig = field(default_factory=LocalTranscriptionConfig)
    audio_quality: AudioQualityConfig = field(default_factory=AudioQualityConfig)
    priority: Tuple[str, ...] = DEFAULT_PRIORITY
    default_language: str = "lv"
    preflight_validation: bool = True

    # Environment variables for well-known settings; every other field
    # falls back to AUDIODIARY_<SECTION>_<FIELD>.
    ENV_OVERRIDES = {
        ("assemblyai", "api_key"): "ASSEMBLYAI_API_KEY",
        ("whisper_api", "api_key"): "OPENAI_API_KEY",
        ("google_speech", "api_key"): "GOOGLE_SPEECH_API_KEY",
        ("azure_speech", "api_key"): "AZURE_SPEECH_KEY",
        ("azure_speech", "region"): "AZURE_SPEECH_REGION",
        ("local_transcription", "enabled"): "AUDIODIARY_LOCAL_TRANSCRIPTION",
    }

    SECTIONS = {
        "assemblyai": AssemblyAIConfig,
        "whisper_api": WhisperAPIConfig,
        "google_speech": GoogleSpeechConfig,
        "azure_speech": AzureSpeechConfig,
        "on_device": OnDeviceSpeechConfig,
        "local_transcription": LocalTranscriptionConfig,
        "audio_quality": AudioQualityConfig,
    }

    @classmethod
    def load_from_yaml(cls, config_path: str) -> "TranscriptionConfig":
        """Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to config.yaml file

        Returns:
            TranscriptionConfig instance with loaded configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping, got {type(config_data).__name__}"
            )

        return cls.from_dict(config_data)

    @classmethod
    def from_env(cls) -> "TranscriptionConfig":
        """Build configuration from environment variables and defaults only."""
        return cls.from_dict({})

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "TranscriptionConfig":
        """Build configuration from an already parsed mapping.

        Args:
            config_data: Mapping with optional per-section sub-mappings

        Returns:
            TranscriptionConfig instance
        """
        sections = {}
        for section_name, section_cls in cls.SECTIONS.items():
            section_data = config_data.get(section_name) or {}
            if not isinstance(section_data, dict):
                raise ConfigurationError(f"Section '{section_name}' must be a mapping")
            sections[section_name] = cls._build_section(section_name, section_cls, section_data)

        priority = config_data.get('priority')
        if priority is None:
            env_priority = os.getenv('AUDIODIARY_PRIORITY')
            priority = env_priority.split(',') if env_priority else DEFAULT_PRIORITY
        if isinstance(priority, str):
            priority = priority.split(',')

        return cls(
            priority=tuple(p.strip().lower() for p in priority if p and p.strip()),
            default_language=cls._resolve_value(
                config_data.get('default_language'), 'AUDIODIARY_LANGUAGE', 'lv'
            ),
            preflight_validation=_to_bool(cls._resolve_value(
                config_data.get('preflight_validation'), 'AUDIODIARY_PREFLIGHT_VALIDATION', True
            )),
            **sections,
        )

    @classmethod
    def _build_section(cls, section_name: str, section_cls: type, data: Dict[str, Any]):
        """Resolve every field of one section and coerce it to the default's type."""
        defaults = section_cls()
        values = {}
        for f in fields(section_cls):
            env_var = cls.ENV_OVERRIDES.get(
                (section_name, f.name),
                f"AUDIODIARY_{section_name.upper()}_{f.name.upper()}",
            )
            default = getattr(defaults, f.name)
            raw = cls._resolve_value(data.get(f.name), env_var, default)
            try:
                values[f.name] = _coerce(raw, default, f.type)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid value for {section_name}.{f.name}: {raw!r} ({e})"
                )
        return section_cls(**values)

    @staticmethod
    def _resolve_value(config_value: Any, env_var: str, default: Any) -> Any:
        """Resolve configuration value with precedence rules.

        Precedence (highest to lowest):
        1. Explicit config value (if not None and not empty string)
        2. Environment variable
        3. Default value

        Supports environment variable substitution syntax: ${VAR_NAME:-default}

        Args:
            config_value: Value from configuration file
            env_var: Environment variable name to check
            default: Default value if neither config nor env var is set

        Returns:
            Resolved configuration value
        """
        if isinstance(config_value, str) and '${' in config_value:
            # Pattern: ${VAR_NAME:-default_value} or ${VAR_NAME}
            pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

            def replace_env_var(match):
                var_name = match.group(1)
                var_default = match.group(2) if match.group(2) is not None else ''
                return os.getenv(var_name, var_default)

            config_value = re.sub(pattern, replace_env_var, config_value)

            if config_value == '':
                config_value = None

        if config_value is not None and config_value != '':
            return config_value

        env_value = os.getenv(env_var)
        if env_value is not None and env_value != '':
            return env_value

        return default

    def with_overrides(self, **changes) -> "TranscriptionConfig":
        """Return a copy with top-level fields replaced (CLI flags, tests)."""
        return replace(self, **changes)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _coerce(value: Any, default: Any, field_type: Any = None) -> Any:
    """Coerce a resolved value to the type of the field's default."""
    if value is None or value is default:
        return value
    if isinstance(default, bool):
        return _to_bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, tuple):
        if isinstance(value, str):
            value = value.split(',')
        return tuple(str(v).strip() for v in value)
    if default is None and field_type == Optional[int]:
        return int(value)
    return value
