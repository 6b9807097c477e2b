"""
LLM provider access: the completion gateway and the transcription adapter.
"""

from smelt.llm.gateway import CompletionGateway
from smelt.llm.transcription import (
    process_text_input,
    transcribe_audio,
    transcribe_audio_bytes,
)

__all__ = [
    "CompletionGateway",
    "process_text_input",
    "transcribe_audio",
    "transcribe_audio_bytes",
]
