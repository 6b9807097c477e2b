"""
Configuration management using Pydantic Settings.

This module handles all environment-based configuration for the smelt service,
including the LLM provider connection, model defaults, retry policy and logging.
"""

from typing import TYPE_CHECKING, Any

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from smelt.models.llm import GatewayConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    The gateway never reads these directly; ``gateway_config`` builds the explicit
    configuration object it is constructed with.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Deployment environment",
        pattern="^(development|staging|production|test)$",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="json",
        description="Logging format",
        pattern="^(json|standard)$",
    )

    # LLM provider
    openrouter_api_key: str | None = Field(
        default=None,
        description="System-wide fallback key, used when the caller supplies none",
    )
    openrouter_api_url: HttpUrl = Field(
        default=HttpUrl("https://openrouter.ai/api/v1/chat/completions"),
        description="Chat completions endpoint",
    )
    app_referer: str = Field(
        default="https://smelt.app",
        description="Value of the HTTP-Referer attribution header",
    )
    app_title: str = Field(
        default="SMELT",
        description="Value of the X-Title attribution header",
    )

    # Models
    default_text_model: str = Field(
        default="anthropic/claude-3.5-sonnet",
        description="Model used for plain completions and synthesis",
    )
    default_transcription_model: str = Field(
        default="google/gemini-2.5-pro-preview",
        description="Multimodal model used for audio transcription",
    )

    # Timeouts
    request_timeout: float = Field(
        default=120.0,
        description="Per-attempt timeout in seconds for completions",
        ge=1,
        le=600,
    )
    transcription_timeout: float = Field(
        default=180.0,
        description="Per-attempt timeout in seconds for audio transcription",
        ge=1,
        le=900,
    )

    # Retry Configuration
    retry_max_retries: int = Field(
        default=3,
        description="Retries after the first attempt for retryable errors",
        ge=0,
        le=10,
    )
    retry_initial_delay: float = Field(
        default=1.0,
        description="Base delay in seconds for exponential backoff",
        ge=0,
        le=30,
    )
    retry_max_delay: float = Field(
        default=30.0,
        description="Ceiling in seconds for any single backoff delay",
        ge=1,
        le=300,
    )
    retry_jitter_ratio: float = Field(
        default=0.3,
        description="Maximum random fraction of the computed delay added as jitter",
        ge=0,
        le=1,
    )

    # Progress subscription
    subscription_max_retries: int = Field(
        default=3,
        description="Reconnect attempts before a progress subscription gives up",
        ge=0,
        le=10,
    )

    def get_log_config(self) -> dict[str, Any]:
        """Get logging configuration dictionary."""
        return {
            "level": self.log_level,
            "format": self.log_format,
        }

    @property
    def gateway_config(self) -> "GatewayConfig":
        """
        Build the explicit configuration for a CompletionGateway.

        Returns:
            GatewayConfig populated from these settings
        """
        # Lazy import to avoid circular dependencies
        from smelt.models.llm import GatewayConfig

        return GatewayConfig(
            api_url=str(self.openrouter_api_url),
            fallback_api_key=self.openrouter_api_key,
            referer=self.app_referer,
            title=self.app_title,
            default_text_model=self.default_text_model,
            default_transcription_model=self.default_transcription_model,
            request_timeout=self.request_timeout,
            transcription_timeout=self.transcription_timeout,
            max_retries=self.retry_max_retries,
            initial_retry_delay=self.retry_initial_delay,
            max_retry_delay=self.retry_max_delay,
            jitter_ratio=self.retry_jitter_ratio,
        )
