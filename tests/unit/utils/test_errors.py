"""
Unit tests for the error hierarchy and provider error mapping.
"""

import asyncio

import httpx
import pytest

from smelt.utils.errors import (
    ConfigurationError,
    InternalError,
    LLMAPIError,
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMServerError,
    LLMTimeoutError,
    SmeltError,
    SynthesisError,
    to_smelt_error,
)
from smelt.utils.provider_errors import (
    extract_error_message,
    map_error_response,
    map_provider_exception,
)


class TestErrorHierarchy:
    def test_to_dict(self):
        assert ConfigurationError("NO KEY").to_dict() == {"code": "configuration_error", "message": "NO KEY"}

    def test_llm_errors_share_base(self):
        for error in (LLMTimeoutError(), LLMRateLimitError(), LLMAPIError(), LLMServerError(), LLMConnectionError()):
            assert isinstance(error, LLMError)
            assert isinstance(error, SmeltError)

    def test_default_messages(self):
        assert LLMTimeoutError().message == "LLM REQUEST TIMED OUT"
        assert LLMRateLimitError().message == "RATE LIMIT EXCEEDED. TRY AGAIN LATER"
        assert LLMAPIError().message == "LLM SERVICE UNAVAILABLE"
        assert InternalError().message == "SOMETHING WENT WRONG. TRY AGAIN"

    def test_synthesis_error_names_prompt(self):
        error = SynthesisError("Summary")

        assert error.prompt_name == "Summary"
        assert str(error) == 'SYNTHESIS FAILED FOR "Summary"'

    def test_to_smelt_error(self):
        original = LLMTimeoutError()

        assert to_smelt_error(original) is original
        converted = to_smelt_error(KeyError("x"))
        assert isinstance(converted, InternalError)
        assert converted.error_code == "internal_error"


class TestMapErrorResponse:
    """Test HTTP status classification."""

    def test_rate_limit_with_retry_after(self):
        error = map_error_response(httpx.Response(429, headers={"Retry-After": "3"}))

        assert isinstance(error, LLMRateLimitError)
        assert error.retry_after == 3.0

    def test_rate_limit_without_retry_after(self):
        error = map_error_response(httpx.Response(429))

        assert isinstance(error, LLMRateLimitError)
        assert error.retry_after is None

    @pytest.mark.parametrize("status", [500, 502, 503, 504])
    def test_server_errors(self, status):
        error = map_error_response(httpx.Response(status))

        assert isinstance(error, LLMServerError)
        assert error.status == status

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_client_errors(self, status):
        error = map_error_response(httpx.Response(status))

        assert type(error) is LLMAPIError
        assert error.message == f"API request failed with status {status}"

    def test_extract_error_message_from_body(self):
        response = httpx.Response(400, json={"error": {"message": "Model not found", "code": 404}})

        assert extract_error_message(response) == "Model not found"

    def test_extract_error_message_unexpected_body(self):
        assert extract_error_message(httpx.Response(400, json={"detail": "x"})) == (
            "API request failed with status 400"
        )
        assert extract_error_message(httpx.Response(400, json=["x"])) == "API request failed with status 400"


class TestMapProviderException:
    """Test transport exception classification."""

    def test_llm_errors_pass_through(self):
        error = LLMAPIError("kept")

        assert map_provider_exception(error) is error

    @pytest.mark.parametrize(
        "exc",
        [asyncio.TimeoutError(), httpx.ReadTimeout("slow"), httpx.ConnectTimeout("slow")],
    )
    def test_timeouts(self, exc):
        assert isinstance(map_provider_exception(exc), LLMTimeoutError)

    def test_transport_errors(self):
        error = map_provider_exception(httpx.ConnectError("refused"))

        assert isinstance(error, LLMConnectionError)
        assert error.message == "refused"

    def test_transport_error_without_message(self):
        assert map_provider_exception(OSError()).message == "REQUEST FAILED AFTER RETRIES"
