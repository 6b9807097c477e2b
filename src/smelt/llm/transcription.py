"""
Audio transcription on top of the completion gateway.

Audio is sent to a multimodal model as an inline base64 data URL together with
a fixed instruction asking for a verbatim transcript.
"""

import base64

from smelt.llm.gateway import CompletionGateway
from smelt.models.llm import (
    AudioPart,
    CompletionOptions,
    CompletionRequest,
    CompletionResult,
    Message,
    TextPart,
)
from smelt.models.synthesis import TranscriptionResult
from smelt.utils.errors import SmeltError, TranscriptionError
from smelt.utils.logging import get_logger

logger = get_logger(__name__)

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this audio recording. Output ONLY the transcript text, with no additional "
    "commentary, labels, or formatting. Preserve the speaker's words exactly as spoken, "
    "including filler words, corrections, and natural speech patterns. If there are multiple "
    "speakers, indicate speaker changes with a simple line break."
)
TRANSCRIPTION_TEMPERATURE = 0.1
TRANSCRIPTION_MAX_TOKENS = 16384
EMPTY_TRANSCRIPTION_MESSAGE = "NO TRANSCRIPTION RESPONSE"
TEXT_INPUT_MODEL = "text-input"


def build_transcription_request(audio_base64: str, mime_type: str, model: str) -> CompletionRequest:
    """Build the single-message multimodal request for one audio payload."""
    message = Message(
        role="user",
        content=(
            TextPart(text=TRANSCRIPTION_INSTRUCTION),
            AudioPart.from_base64(audio_base64, mime_type),
        ),
    )
    return CompletionRequest(
        model=model,
        messages=(message,),
        temperature=TRANSCRIPTION_TEMPERATURE,
        max_tokens=TRANSCRIPTION_MAX_TOKENS,
    )


async def transcribe_audio(
    gateway: CompletionGateway,
    audio_base64: str,
    mime_type: str,
    options: CompletionOptions | None = None,
) -> CompletionResult:
    """
    Transcribe base64-encoded audio with the extended transcription timeout.

    Gateway errors pass through unchanged. A response without choices raises
    LLMAPIError("NO TRANSCRIPTION RESPONSE").

    Args:
        gateway: Completion gateway to send the request through
        audio_base64: Base64 audio payload, already validated
        mime_type: MIME type of the payload
        options: Optional model and credential overrides

    Returns:
        CompletionResult whose content is the raw transcript
    """
    options = options or CompletionOptions()
    request = build_transcription_request(
        audio_base64,
        mime_type,
        options.model or gateway.config.default_transcription_model,
    )
    return await gateway.complete(
        request,
        api_key=options.api_key,
        timeout=gateway.config.transcription_timeout,
        empty_response_message=EMPTY_TRANSCRIPTION_MESSAGE,
    )


async def transcribe_audio_bytes(
    gateway: CompletionGateway,
    data: bytes,
    mime_type: str,
    options: CompletionOptions | None = None,
) -> TranscriptionResult:
    """
    Transcribe raw audio bytes and return the trimmed transcript.

    Classified errors propagate as-is; anything else is wrapped in
    TranscriptionError.
    """
    try:
        audio_base64 = base64.b64encode(data).decode("ascii")
        result = await transcribe_audio(gateway, audio_base64, mime_type, options)
    except SmeltError:
        raise
    except Exception as exc:
        logger.error(
            "Transcription failed",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        message = f"TRANSCRIPTION FAILED: {exc}" if str(exc) else "TRANSCRIPTION FAILED"
        raise TranscriptionError(message) from exc

    return TranscriptionResult(transcript=result.content.strip(), model=result.model)


def process_text_input(text: str) -> TranscriptionResult:
    """Pasted text needs no transcription; it is passed through trimmed."""
    return TranscriptionResult(transcript=text.strip(), model=TEXT_INPUT_MODEL)
