"""
Data models for the smelt service.
"""

from smelt.models.llm import (
    AudioPart,
    CompletionOptions,
    CompletionRequest,
    CompletionResult,
    GatewayConfig,
    Message,
    TextPart,
    TokenUsage,
)
from smelt.models.smelt import (
    JobStatus,
    SmeltCompletedEvent,
    SmeltFailedEvent,
    SmeltFileProgress,
    SmeltInput,
    SmeltProgress,
    SmeltProgressEvent,
    SmeltResult,
    SmeltSubmission,
)
from smelt.models.synthesis import (
    MultiPromptSynthesis,
    PromptSpec,
    SynthesisResult,
    TranscriptionResult,
    TranscriptSection,
)

__all__ = [
    # LLM
    "AudioPart",
    "CompletionOptions",
    "CompletionRequest",
    "CompletionResult",
    "GatewayConfig",
    "Message",
    "TextPart",
    "TokenUsage",
    # Smelt
    "JobStatus",
    "SmeltCompletedEvent",
    "SmeltFailedEvent",
    "SmeltFileProgress",
    "SmeltInput",
    "SmeltProgress",
    "SmeltProgressEvent",
    "SmeltResult",
    "SmeltSubmission",
    # Synthesis
    "MultiPromptSynthesis",
    "PromptSpec",
    "SynthesisResult",
    "TranscriptionResult",
    "TranscriptSection",
]
