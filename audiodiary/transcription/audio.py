"""
Recorded audio handles and container sniffing.

AudioAsset is the read-only handle the recording subsystem hands to the
transcription core. The core never writes to it; providers read the
payload once per transcription attempt.
"""
import logging
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse

from audiodiary.transcription.errors import AssetUnavailableError


logger = logging.getLogger(__name__)

# Number of leading bytes inspected when sniffing a container
HEADER_SIZE = 12

_EXTENSION_MIME_TYPES = {
    ".m4a": "audio/mp4",
    ".mp4": "audio/mp4",
    ".aac": "audio/aac",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".opus": "audio/ogg",
    ".flac": "audio/flac",
    ".amr": "audio/amr",
    ".3gp": "audio/3gpp",
    ".caf": "audio/x-caf",
}


def sniff_container(header: bytes) -> Optional[str]:
    """Identify the audio container from its leading bytes.

    Args:
        header: First bytes of the payload (12 are enough)

    Returns:
        MIME type, or None when the signature is not recognised
    """
    if len(header) >= 12 and header[:4] == b"RIFF" and header[8:12] == b"WAVE":
        return "audio/wav"
    if len(header) >= 8 and header[4:8] == b"ftyp":
        if header[8:11] == b"3gp":
            return "audio/3gpp"
        return "audio/mp4"
    if header[:4] == b"OggS":
        return "audio/ogg"
    if header[:4] == b"fLaC":
        return "audio/flac"
    if header[:4] == b"\x1a\x45\xdf\xa3":
        return "audio/webm"
    if header[:6] == b"#!AMR\n":
        return "audio/amr"
    if header[:4] == b"caff":
        return "audio/x-caf"
    if header[:3] == b"ID3":
        return "audio/mpeg"
    if len(header) >= 2 and header[0] == 0xFF and (header[1] & 0xE0) == 0xE0:
        # MPEG frame sync; 0xFFF1/0xFFF9 is ADTS AAC
        if (header[1] & 0xF6) == 0xF0:
            return "audio/aac"
        return "audio/mpeg"
    return None


def describe_header(header: bytes) -> str:
    """Hex dump of the leading bytes for debug logs."""
    return " ".join(f"{b:02x}" for b in header[:HEADER_SIZE])


def _location_to_path(location: str) -> Path:
    if location.startswith("file://"):
        return Path(unquote(urlparse(location).path))
    return Path(location)


@dataclass(frozen=True)
class AudioAsset:
    """Handle to a recorded audio clip.

    Attributes:
        location: File path or file:// URI of the recording
        byte_length: Size of the recording in bytes
        mime_hint: Container MIME type, sniffed or guessed from the extension
    """
    location: str
    byte_length: int
    mime_hint: Optional[str] = None

    @classmethod
    def from_path(cls, location: Union[str, os.PathLike]) -> "AudioAsset":
        """Create an asset from a local path or file:// URI.

        Raises:
            AssetUnavailableError: If the file does not exist or cannot be read
        """
        location = os.fspath(location)
        path = _location_to_path(location)
        try:
            if not path.is_file():
                raise AssetUnavailableError(f"Audio file not found: {location}")
            byte_length = path.stat().st_size
            with open(path, "rb") as f:
                header = f.read(HEADER_SIZE)
        except OSError as e:
            raise AssetUnavailableError(f"Cannot read audio file {location}: {e}")

        mime_hint = sniff_container(header) or _guess_mime_type(path)
        return cls(location=location, byte_length=byte_length, mime_hint=mime_hint)

    @property
    def path(self) -> Path:
        return _location_to_path(self.location)

    @property
    def filename(self) -> str:
        return self.path.name or "audio"

    def exists(self) -> bool:
        return self.path.is_file()

    def read_bytes(self) -> bytes:
        """Read the whole payload.

        Raises:
            AssetUnavailableError: If the file vanished or cannot be read
        """
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise AssetUnavailableError(f"Cannot read audio file {self.location}: {e}")


def _guess_mime_type(path: Path) -> Optional[str]:
    suffix = path.suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(str(path))
    return guessed


def ensure_asset(asset: Union["AudioAsset", str, os.PathLike]) -> AudioAsset:
    """Accept either an AudioAsset or a path and return an AudioAsset."""
    if isinstance(asset, AudioAsset):
        return asset
    return AudioAsset.from_path(asset)
