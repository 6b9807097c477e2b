"""
Completion gateway for the OpenRouter chat completions API.

Turns a CompletionRequest into a CompletionResult, or fails with exactly one
classified LLM error. The gateway holds no per-job state and is safe to share
between concurrent callers.
"""

import asyncio
import random
from collections.abc import Sequence
from typing import Any

import httpx

from smelt.models.llm import (
    CompletionOptions,
    CompletionRequest,
    CompletionResult,
    GatewayConfig,
    Message,
    TokenUsage,
)
from smelt.utils.errors import ConfigurationError, LLMAPIError, LLMError
from smelt.utils.logging import get_logger
from smelt.utils.provider_errors import map_error_response, map_provider_exception
from smelt.utils.retry import RandomFn, SleepFn, create_provider_retrying

logger = get_logger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096
EMPTY_RESPONSE_MESSAGE = "NO RESPONSE FROM MODEL"


class CompletionGateway:
    """
    Resilient gateway to the LLM provider.

    Enforces a per-attempt timeout, retries rate limits, server errors and
    transport failures with exponential backoff, and classifies every failure.
    """

    def __init__(
        self,
        config: GatewayConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFn = asyncio.sleep,
        rng: RandomFn = random.random,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            config: Explicit provider and retry configuration
            http_client: Optional shared client; created and owned here if omitted
            sleep: Awaitable sleep used between retries
            rng: Random source for backoff jitter
        """
        self.config = config
        self._client = http_client or httpx.AsyncClient()
        self._owns_client = http_client is None
        self._sleep = sleep
        self._rng = rng

    async def __aenter__(self) -> "CompletionGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    def resolve_api_key(self, api_key: str | None = None) -> str:
        """
        Resolve the credential for a call.

        The caller's key takes precedence over the configured fallback key.

        Raises:
            ConfigurationError: If neither key is available
        """
        if api_key:
            return api_key
        if self.config.fallback_api_key:
            return self.config.fallback_api_key
        raise ConfigurationError("OPENROUTER API KEY NOT CONFIGURED")

    def _headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": self.config.referer,
            "X-Title": self.config.title,
        }

    async def complete(
        self,
        request: CompletionRequest,
        api_key: str | None = None,
        timeout: float | None = None,
        empty_response_message: str = EMPTY_RESPONSE_MESSAGE,
    ) -> CompletionResult:
        """
        Send one completion request, retrying transient failures.

        Args:
            request: The request to send
            api_key: Caller credential, falls back to the configured key
            timeout: Per-attempt deadline in seconds (defaults to request_timeout)
            empty_response_message: Error text when the provider returns no choices

        Returns:
            CompletionResult built from the first choice

        Raises:
            ConfigurationError: No usable credential
            LLMTimeoutError: An attempt hit its deadline (never retried)
            LLMRateLimitError: Still rate limited after all retries
            LLMAPIError: Any other provider or transport failure
        """
        key = self.resolve_api_key(api_key)
        deadline = timeout if timeout is not None else self.config.request_timeout
        payload = request.to_payload()

        logger.debug(
            "Sending completion request",
            extra={
                "model": request.model,
                "message_count": len(request.messages),
                "timeout": deadline,
            },
        )

        retrying = create_provider_retrying(self.config, sleep=self._sleep, rng=self._rng)
        try:
            data = await retrying(self._send_once, payload, key, deadline)
        except LLMError as exc:
            logger.error(
                f"Completion request failed: {exc.message}",
                extra={
                    "model": request.model,
                    "error_code": exc.error_code,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        result = self._parse_result(data, request.model, empty_response_message)
        logger.info(
            "Completion request succeeded",
            extra={
                "model": result.model,
                "prompt_tokens": result.usage.prompt_tokens if result.usage else None,
                "completion_tokens": result.usage.completion_tokens if result.usage else None,
            },
        )
        return result

    async def _send_once(self, payload: dict[str, Any], api_key: str, timeout: float) -> dict[str, Any]:
        """
        Perform a single HTTP attempt.

        Raises a classified LLM error on any failure so the retry controller can
        decide whether to try again.
        """
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self.config.api_url,
                    json=payload,
                    headers=self._headers(api_key),
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except Exception as exc:
            raise map_provider_exception(exc) from exc

        if not response.is_success:
            raise map_error_response(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMAPIError("INVALID RESPONSE FROM MODEL", status=response.status_code) from exc

        if not isinstance(data, dict):
            raise LLMAPIError("INVALID RESPONSE FROM MODEL", status=response.status_code)
        return data

    @staticmethod
    def _parse_result(
        data: dict[str, Any], requested_model: str, empty_response_message: str
    ) -> CompletionResult:
        choices = data.get("choices") or []
        if not choices:
            raise LLMAPIError(empty_response_message)

        try:
            content = choices[0]["message"]["content"] or ""
        except (KeyError, TypeError, IndexError) as exc:
            raise LLMAPIError(empty_response_message) from exc

        usage = data.get("usage")
        return CompletionResult(
            content=content,
            model=data.get("model") or requested_model,
            usage=TokenUsage.model_validate(usage) if isinstance(usage, dict) else None,
        )

    async def create_completion(
        self,
        messages: Sequence[Message],
        options: CompletionOptions | None = None,
    ) -> CompletionResult:
        """
        Create a text completion with default model and sampling settings.

        Args:
            messages: Ordered chat messages
            options: Optional per-call overrides

        Returns:
            CompletionResult from the provider
        """
        options = options or CompletionOptions()
        request = CompletionRequest(
            model=options.model or self.config.default_text_model,
            messages=tuple(messages),
            temperature=options.temperature if options.temperature is not None else DEFAULT_TEMPERATURE,
            max_tokens=options.max_tokens or DEFAULT_MAX_TOKENS,
        )
        return await self.complete(request, api_key=options.api_key)
