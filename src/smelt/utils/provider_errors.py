"""
Provider exception mapping utilities.

Maps HTTP responses and transport exceptions to the LLM error classes so that
nothing unclassified ever leaves the gateway.
"""

import asyncio

import httpx

from smelt.utils.errors import (
    LLMAPIError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMServerError,
    LLMTimeoutError,
)
from smelt.utils.logging import get_logger
from smelt.utils.retry import parse_retry_after

logger = get_logger(__name__)

FALLBACK_TRANSPORT_MESSAGE = "REQUEST FAILED AFTER RETRIES"


def extract_error_message(response: httpx.Response) -> str:
    """
    Pull ``error.message`` out of a provider error body.

    Returns a generic status message when the body is not the expected JSON.
    """
    try:
        body = response.json()
        message = body["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None

    if isinstance(message, str) and message:
        return message
    return f"API request failed with status {response.status_code}"


def map_error_response(response: httpx.Response) -> LLMError:
    """
    Map a non-2xx provider response to an LLM error.

    Args:
        response: Provider response with an error status

    Returns:
        LLMRateLimitError for 429, LLMServerError for 5xx, LLMAPIError otherwise
    """
    status = response.status_code

    if status == 429:
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        logger.debug(
            "Mapping 429 response to LLMRateLimitError",
            extra={"status_code": status, "retry_after": retry_after},
        )
        return LLMRateLimitError(retry_after=retry_after)

    message = extract_error_message(response)
    if status >= 500:
        logger.debug(
            "Mapping 5xx response to LLMServerError",
            extra={"status_code": status, "original_error": message},
        )
        return LLMServerError(message, status=status)

    logger.debug(
        "Mapping error response to LLMAPIError",
        extra={"status_code": status, "original_error": message},
    )
    return LLMAPIError(message, status=status)


def map_provider_exception(exc: BaseException) -> LLMError:
    """
    Map an exception raised while talking to the provider to an LLM error.

    Deadline aborts become LLMTimeoutError. Every other failure is treated as a
    transport problem and becomes a retryable LLMConnectionError.

    Args:
        exc: Exception caught around the HTTP call

    Returns:
        Mapped LLM error (the original if it already is one)
    """
    if isinstance(exc, LLMError):
        return exc

    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        logger.debug(
            "Mapping timeout to LLMTimeoutError",
            extra={"error_type": type(exc).__name__},
        )
        return LLMTimeoutError()

    message = str(exc) or FALLBACK_TRANSPORT_MESSAGE
    logger.debug(
        f"Mapping {type(exc).__name__} to LLMConnectionError",
        extra={"error_type": type(exc).__name__, "original_error": message},
    )
    return LLMConnectionError(message)
