"""
Models for transcription and prompt synthesis results.
"""

from pydantic import BaseModel, Field


class PromptSpec(BaseModel):
    """A named instruction body applied to a transcript."""

    name: str = Field(min_length=1, description="Display name, used as the section label")
    content: str = Field(description="System-style instruction body")


class SynthesisResult(BaseModel):
    """
    Output of one prompt applied to one transcript.

    A list of these is ordered: insertion order is application order is
    display order.
    """

    prompt_name: str
    content: str
    model: str


class MultiPromptSynthesis(BaseModel):
    """Combined document plus the per-prompt results it was built from."""

    combined: str
    results: list[SynthesisResult] = Field(default_factory=list)


class TranscriptSection(BaseModel):
    """One input file's transcript, used when combining several files."""

    filename: str
    transcript: str


class TranscriptionResult(BaseModel):
    transcript: str
    model: str
