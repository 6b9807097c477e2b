"""
Exception hierarchy for the smelt service.

Every failure the core can surface is one of these classes. Each carries a
stable ``error_code`` and a user-facing ``message`` so a single renderer can
display any of them via ``to_dict()``.
"""

from typing import Any


class SmeltError(Exception):
    """
    Base exception for all smelt errors.

    All application errors should inherit from this class.
    """

    status_code: int = 500

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """
        Initialize a smelt error.

        Args:
            message: Human-readable error message
            error_code: Optional error code for categorization
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Render the error as the ``{code, message}`` pair shown to users."""
        return {"code": self.error_code, "message": self.message}


class InternalError(SmeltError):
    """Raised when an unexpected error occurs."""

    def __init__(self, message: str = "SOMETHING WENT WRONG. TRY AGAIN") -> None:
        super().__init__(message, error_code="internal_error")


class ConfigurationError(SmeltError):
    """
    Raised when there's an error in application configuration.

    A missing provider credential is the typical case. It cannot be retried away.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="configuration_error")


class NotFoundError(SmeltError):
    """Raised when a requested resource doesn't exist."""

    status_code = 404


class PromptNotFoundError(NotFoundError):
    """Raised when a predefined or custom prompt cannot be resolved."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="prompt_not_found")


# LLM provider errors


class LLMError(SmeltError):
    """Base class for failures talking to the LLM provider."""

    status_code = 502


class LLMTimeoutError(LLMError):
    """Raised when a provider request exceeds its per-attempt deadline."""

    status_code = 504

    def __init__(self, message: str = "LLM REQUEST TIMED OUT") -> None:
        super().__init__(message, error_code="llm_timeout")


class LLMRateLimitError(LLMError):
    """
    Raised when the provider keeps answering 429 after all retries.

    Carries the last known Retry-After hint in seconds, if any.
    """

    status_code = 429

    def __init__(self, retry_after: float | None = None) -> None:
        super().__init__("RATE LIMIT EXCEEDED. TRY AGAIN LATER", error_code="llm_rate_limit")
        self.retry_after = retry_after


class LLMAPIError(LLMError):
    """Generic provider failure: terminal 4xx, exhausted 5xx, or an unusable body."""

    def __init__(self, message: str = "LLM SERVICE UNAVAILABLE", status: int | None = None) -> None:
        super().__init__(message, error_code="llm_api_error")
        self.status = status


class LLMServerError(LLMAPIError):
    """Provider answered with a 5xx. Retryable."""


class LLMConnectionError(LLMAPIError):
    """Transport-level failure before any response arrived. Retryable."""


# Processing errors


class TranscriptionError(SmeltError):
    """Raised when audio could not be turned into a transcript."""

    def __init__(self, message: str = "TRANSCRIPTION FAILED") -> None:
        super().__init__(message, error_code="transcription_failed")


class SynthesisError(SmeltError):
    """
    Raised when applying a named prompt fails.

    Always attributed to the prompt that caused it.
    """

    def __init__(self, prompt_name: str, message: str | None = None) -> None:
        super().__init__(
            message or f'SYNTHESIS FAILED FOR "{prompt_name}"',
            error_code="synthesis_failed",
        )
        self.prompt_name = prompt_name


class ChannelError(SmeltError):
    """The progress channel transport reported an error."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="channel_error")


class ConnectionLostError(SmeltError):
    """The progress channel for a job was lost while the job was still open."""

    def __init__(self, message: str = "CONNECTION LOST. CHECK YOUR INTERNET AND TRY AGAIN") -> None:
        super().__init__(message, error_code="connection_lost")


# Audio validation errors


class FileTooLargeError(SmeltError):
    status_code = 413

    def __init__(self, message: str = "FILE TOO LARGE. MAX 25MB ALLOWED") -> None:
        super().__init__(message, error_code="file_too_large")


class InvalidFormatError(SmeltError):
    status_code = 415

    def __init__(self, message: str = "INVALID FILE FORMAT") -> None:
        super().__init__(message, error_code="invalid_format")


class DurationExceededError(SmeltError):
    status_code = 413

    def __init__(self, message: str = "AUDIO TOO LONG. MAX 30 MINUTES ALLOWED") -> None:
        super().__init__(message, error_code="duration_exceeded")


class CorruptedFileError(SmeltError):
    status_code = 422

    def __init__(self, message: str = "FILE APPEARS CORRUPTED") -> None:
        super().__init__(message, error_code="corrupted_file")


def to_smelt_error(exc: BaseException) -> SmeltError:
    """
    Convert any caught failure into a SmeltError.

    Smelt errors pass through unchanged; anything else becomes an InternalError.
    """
    if isinstance(exc, SmeltError):
        return exc
    return InternalError()
