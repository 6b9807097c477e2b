"""
Audio input checks.
"""

from smelt.audio.validation import (
    AudioValidationResult,
    is_supported_audio_format,
    validate_audio_file,
    validate_duration,
    validate_format,
    validate_size,
)

__all__ = [
    "AudioValidationResult",
    "is_supported_audio_format",
    "validate_audio_file",
    "validate_duration",
    "validate_format",
    "validate_size",
]
