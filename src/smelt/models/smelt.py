"""
Smelt job models and progress channel payloads.

A smelt is one unit of submitted work: one or more audio files or text blocks,
optionally with selected prompts. The payload models here are the exact shapes
exchanged on the progress channel keyed by ``smelt:<id>``.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, NonNegativeInt, model_validator

SmeltStage = Literal[
    "pending",
    "validating",
    "decoding",
    "transcribing",
    "synthesizing",
    "completed",
    "failed",
]
SmeltFileStatus = Literal["pending", "processing", "completed", "failed"]
SmeltMode = Literal["separate", "combined"]
InputType = Literal["audio", "text"]


class JobStatus(str, Enum):
    """Client-side lifecycle of a smelt. PROCESSING is the only non-terminal state."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PROCESSING


class SmeltProgress(BaseModel):
    percentage: int = Field(ge=0, le=100)
    stage: SmeltStage
    message: str = ""


class SmeltFileProgress(BaseModel):
    id: str
    status: SmeltFileStatus
    progress: int = Field(default=0, ge=0, le=100)


class SmeltResult(BaseModel):
    """One output document of a completed smelt."""

    file_id: str | None = None
    filename: str
    content: str


class SmeltProgressEvent(BaseModel):
    smelt_id: str
    status: SmeltStage
    progress: SmeltProgress
    files: list[SmeltFileProgress] = Field(default_factory=list)


class SmeltCompletedEvent(BaseModel):
    smelt_id: str
    status: Literal["completed"] = "completed"
    results: list[SmeltResult] = Field(default_factory=list)


class SmeltFailedEvent(BaseModel):
    smelt_id: str
    status: Literal["failed"] = "failed"
    error_code: str
    error_message: str


class SmeltInput(BaseModel):
    """
    One input of a submission: an audio file or a pasted text block.

    Audio inputs carry raw bytes; text inputs carry the text itself.
    """

    id: str
    filename: str
    input_type: InputType = "audio"
    mime_type: str | None = None
    data: bytes | None = None
    text: str | None = None
    duration_seconds: float | None = Field(default=None, ge=0)

    @property
    def size_bytes(self) -> NonNegativeInt:
        return len(self.data or b"")

    @model_validator(mode="after")
    def _check_payload(self) -> "SmeltInput":
        if self.input_type == "audio" and self.data is None:
            raise ValueError("audio input requires data")
        if self.input_type == "text" and not (self.text and self.text.strip()):
            raise ValueError("text input requires non-empty text")
        return self


class SmeltSubmission(BaseModel):
    """Everything the processing pipeline needs to run one smelt."""

    smelt_id: str
    mode: SmeltMode = "separate"
    inputs: list[SmeltInput] = Field(min_length=1)
    default_prompt_names: list[str] = Field(default_factory=list)
    custom_prompt: str | None = None
