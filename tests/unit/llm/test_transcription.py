"""
Unit tests for audio transcription.
"""

import base64

import httpx
import pytest

from smelt.llm.transcription import (
    TRANSCRIPTION_INSTRUCTION,
    build_transcription_request,
    process_text_input,
    transcribe_audio,
    transcribe_audio_bytes,
)
from smelt.models.llm import CompletionOptions, GatewayConfig
from smelt.utils.errors import LLMAPIError, LLMTimeoutError
from tests.helpers import completion_body, request_json


class TestBuildTranscriptionRequest:
    """Test the multimodal request shape."""

    def test_single_user_message_with_instruction_and_audio(self):
        request = build_transcription_request("QUJD", "audio/mpeg", "google/gemini-2.5-pro-preview")

        payload = request.to_payload()
        assert payload["model"] == "google/gemini-2.5-pro-preview"
        assert payload["temperature"] == 0.1
        assert payload["max_tokens"] == 16384
        assert len(payload["messages"]) == 1

        message = payload["messages"][0]
        assert message["role"] == "user"
        assert message["content"] == [
            {"type": "text", "text": TRANSCRIPTION_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": "data:audio/mpeg;base64,QUJD"}},
        ]


class TestTranscribeAudio:
    """Test transcription through the gateway."""

    async def test_uses_extended_transcription_timeout(self, make_gateway):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion_body())

        gateway = make_gateway(handler)

        await transcribe_audio(gateway, "QUJD", "audio/wav")

        assert requests[0].extensions["timeout"]["read"] == 180.0

    async def test_transcription_timeout_comes_from_config(self, make_gateway):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion_body())

        config = GatewayConfig(fallback_api_key="sk-fallback", request_timeout=7.0, transcription_timeout=42.0)
        gateway = make_gateway(handler, config=config)

        await transcribe_audio(gateway, "QUJD", "audio/wav")

        assert requests[0].extensions["timeout"] == {
            "connect": 42.0,
            "read": 42.0,
            "write": 42.0,
            "pool": 42.0,
        }

    async def test_uses_transcription_model_by_default(self, make_gateway):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion_body(content="hello world"))

        gateway = make_gateway(handler)

        result = await transcribe_audio(gateway, "QUJD", "audio/wav")

        assert result.content == "hello world"
        assert request_json(requests[0])["model"] == "google/gemini-2.5-pro-preview"

    async def test_model_override(self, make_gateway):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion_body())

        gateway = make_gateway(handler)

        await transcribe_audio(gateway, "QUJD", "audio/wav", CompletionOptions(model="openai/gpt-4o-audio"))

        assert request_json(requests[0])["model"] == "openai/gpt-4o-audio"

    async def test_empty_choices_uses_transcription_message(self, make_gateway):
        gateway = make_gateway(lambda r: httpx.Response(200, json=completion_body(choices=[])))

        with pytest.raises(LLMAPIError) as exc_info:
            await transcribe_audio(gateway, "QUJD", "audio/wav")

        assert exc_info.value.message == "NO TRANSCRIPTION RESPONSE"

    async def test_gateway_errors_pass_through(self, make_gateway):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow")

        gateway = make_gateway(handler)

        with pytest.raises(LLMTimeoutError):
            await transcribe_audio(gateway, "QUJD", "audio/wav")


class TestTranscribeAudioBytes:
    async def test_encodes_bytes_and_trims_transcript(self, make_gateway):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=completion_body(content="  spoken words \n", model="g/m"))

        gateway = make_gateway(handler)

        result = await transcribe_audio_bytes(gateway, b"\x00\x01audio", "audio/ogg")

        assert result.transcript == "spoken words"
        assert result.model == "g/m"
        url = request_json(requests[0])["messages"][0]["content"][1]["image_url"]["url"]
        assert url == "data:audio/ogg;base64," + base64.b64encode(b"\x00\x01audio").decode("ascii")

    async def test_classified_errors_are_not_wrapped(self, make_gateway):
        gateway = make_gateway(lambda r: httpx.Response(400, json={"error": {"message": "bad audio"}}))

        with pytest.raises(LLMAPIError) as exc_info:
            await transcribe_audio_bytes(gateway, b"abc", "audio/wav")

        assert exc_info.value.message == "bad audio"


class TestProcessTextInput:
    def test_passes_text_through_trimmed(self):
        result = process_text_input("  pasted notes \n")

        assert result.transcript == "pasted notes"
        assert result.model == "text-input"
