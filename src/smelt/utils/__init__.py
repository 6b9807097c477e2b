"""
Utility modules for the smelt service.

This module provides error handling, logging, retry and prompt helpers.
"""

from smelt.utils.errors import (
    ConfigurationError,
    LLMAPIError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    SmeltError,
    SynthesisError,
    TranscriptionError,
)
from smelt.utils.logging import get_logger, setup_logging
from smelt.utils.prompts import load_prompts

__all__ = [
    # Errors
    "SmeltError",
    "ConfigurationError",
    "LLMError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "SynthesisError",
    "TranscriptionError",
    # Logging
    "get_logger",
    "setup_logging",
    # Prompts
    "load_prompts",
]
