"""
Progress channel contract.

The real-time pub/sub transport is an external collaborator. This module
defines the narrow surface the core relies on: opening a topic with message
and status handlers, closing it, and publishing events to it.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol


class ChannelStatus(str, Enum):
    """Connection status notifications emitted by a transport."""

    SUBSCRIBED = "SUBSCRIBED"
    CHANNEL_ERROR = "CHANNEL_ERROR"
    TIMED_OUT = "TIMED_OUT"
    CLOSED = "CLOSED"


class ChannelEvent(str, Enum):
    PROGRESS = "progress"
    COMPLETED = "completed"
    FAILED = "failed"


MessageHandler = Callable[[str, dict[str, Any]], None]
StatusHandler = Callable[[ChannelStatus, Exception | None], None]


class ChannelConnection(Protocol):
    def close(self) -> None: ...


class ProgressTransport(Protocol):
    """Subscriber side of the progress channel."""

    def open(
        self,
        topic: str,
        on_message: MessageHandler,
        on_status: StatusHandler,
    ) -> ChannelConnection: ...


class ProgressPublisher(Protocol):
    """Publisher side of the progress channel."""

    async def send(self, topic: str, event: str, payload: dict[str, Any]) -> None: ...


def smelt_topic(smelt_id: str) -> str:
    """Channel name for a smelt's progress events."""
    return f"smelt:{smelt_id}"
