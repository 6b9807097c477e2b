"""
Audio file validation.

Checks format (MIME type, with an extension fallback for generic types), size
and duration limits before anything is sent to the transcription model.
"""

from pathlib import PurePath

from pydantic import BaseModel

from smelt.utils.errors import (
    CorruptedFileError,
    DurationExceededError,
    FileTooLargeError,
    InvalidFormatError,
)

MAX_FILE_SIZE_BYTES = 25 * 1024 * 1024
MAX_DURATION_SECONDS = 30 * 60

SUPPORTED_FORMATS: dict[str, list[str]] = {
    "mp3": ["audio/mpeg", "audio/mp3"],
    "wav": ["audio/wav", "audio/wave", "audio/x-wav"],
    "m4a": ["audio/m4a", "audio/x-m4a", "audio/mp4", "audio/x-m4a-protected"],
    "ogg": ["audio/ogg", "application/ogg"],
    "flac": ["audio/flac", "audio/x-flac"],
    "aac": ["audio/aac", "audio/x-aac"],
    "webm": ["audio/webm"],
}

EXTENSION_MAP: dict[str, str] = {f".{fmt}": fmt for fmt in SUPPORTED_FORMATS}

# MIME types too generic to trust; the extension decides instead
_GENERIC_MIME_TYPES = {"application/octet-stream", "audio/basic"}


class AudioValidationResult(BaseModel):
    format: str
    mime_type: str
    size_bytes: int


def validate_format(mime_type: str, filename: str | None = None) -> tuple[str, str]:
    """
    Resolve the audio format of a file.

    Returns:
        (format, normalized MIME type)

    Raises:
        InvalidFormatError: If neither MIME type nor extension is supported
    """
    normalized = mime_type.lower()

    for fmt, mime_types in SUPPORTED_FORMATS.items():
        if normalized in mime_types:
            return fmt, normalized

    if filename and normalized in _GENERIC_MIME_TYPES:
        fmt = EXTENSION_MAP.get(PurePath(filename).suffix.lower())
        if fmt:
            return fmt, SUPPORTED_FORMATS[fmt][0]

    raise InvalidFormatError(f"UNSUPPORTED FORMAT: {mime_type}. USE MP3, WAV, M4A, OGG, FLAC, OR AAC")


def validate_size(size_bytes: int) -> None:
    if size_bytes > MAX_FILE_SIZE_BYTES:
        size_mb = size_bytes / (1024 * 1024)
        raise FileTooLargeError(f"FILE SIZE {size_mb:.1f}MB EXCEEDS 25MB LIMIT")
    if size_bytes == 0:
        raise CorruptedFileError("FILE IS EMPTY")


def validate_duration(duration_seconds: float) -> None:
    if duration_seconds > MAX_DURATION_SECONDS:
        minutes = -(-duration_seconds // 60)
        raise DurationExceededError(f"DURATION {int(minutes)} MINUTES EXCEEDS 30 MINUTE LIMIT")


def validate_audio_file(mime_type: str, filename: str | None, size_bytes: int) -> AudioValidationResult:
    """
    Validate an audio file's size and format.

    Size is checked first since it is the cheapest check.
    """
    validate_size(size_bytes)
    fmt, normalized = validate_format(mime_type, filename)
    return AudioValidationResult(format=fmt, mime_type=normalized, size_bytes=size_bytes)


def is_supported_audio_format(mime_type: str) -> bool:
    normalized = mime_type.lower()
    return any(normalized in mime_types for mime_types in SUPPORTED_FORMATS.values())
