"""
Data models for requests to and responses from the LLM provider.

Messages follow the OpenAI-compatible chat format used by OpenRouter. Audio is
sent inline as a data URL inside an ``image_url`` content part, which is how the
provider accepts binary payloads for multimodal models.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class TextPart(BaseModel):
    """Text content part of a multimodal message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class DataURL(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(description="data:<mime>;base64,<payload>")


class AudioPart(BaseModel):
    """Inline audio reference, encoded as a base64 data URL."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    image_url: DataURL

    @classmethod
    def from_base64(cls, audio_base64: str, mime_type: str) -> "AudioPart":
        return cls(image_url=DataURL(url=f"data:{mime_type};base64,{audio_base64}"))


ContentPart = Annotated[TextPart | AudioPart, Field(discriminator="type")]


class Message(BaseModel):
    """
    A single chat message.

    System messages carry instructions, user messages carry the payload.
    Messages are immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str | tuple[ContentPart, ...]


class CompletionRequest(BaseModel):
    """One provider call. Serializes to the provider's JSON body."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    messages: tuple[Message, ...] = Field(min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1)

    def to_payload(self) -> dict:
        """Return the JSON body sent to the chat completions endpoint."""
        return self.model_dump(mode="json")


class TokenUsage(BaseModel):
    """Token counts reported by the provider, echoed unchanged."""

    prompt_tokens: NonNegativeInt = 0
    completion_tokens: NonNegativeInt = 0
    total_tokens: NonNegativeInt = 0


class CompletionResult(BaseModel):
    """Result of a successful completion. Never partially populated."""

    content: str
    model: str
    usage: TokenUsage | None = None


class CompletionOptions(BaseModel):
    """Per-call overrides accepted by the high-level LLM helpers."""

    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)
    api_key: str | None = Field(default=None, description="Caller key, wins over the fallback")


class GatewayConfig(BaseModel):
    """
    Explicit configuration for a CompletionGateway.

    Built from Settings via ``Settings.gateway_config`` or directly in tests.
    """

    api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    fallback_api_key: str | None = None
    referer: str = "https://smelt.app"
    title: str = "SMELT"

    default_text_model: str = "anthropic/claude-3.5-sonnet"
    default_transcription_model: str = "google/gemini-2.5-pro-preview"

    request_timeout: float = Field(default=120.0, gt=0)
    transcription_timeout: float = Field(default=180.0, gt=0)

    max_retries: int = Field(default=3, ge=0)
    initial_retry_delay: float = Field(default=1.0, ge=0)
    max_retry_delay: float = Field(default=30.0, gt=0)
    jitter_ratio: float = Field(default=0.3, ge=0, le=1)
