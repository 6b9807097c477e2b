"""Shared test helpers."""

import json
from typing import Any

import httpx


class SleepRecorder:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def completion_body(content: str = "Hello", model: str = "test/model", **extra: Any) -> dict:
    """Build a successful provider response body."""
    body = {
        "id": "gen-1",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }
    body.update(extra)
    return body


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)
