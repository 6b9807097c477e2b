"""
Client-side subscriptions to smelt progress channels.

``subscribe_to_smelt`` holds a single channel connection. ``subscribe_with_retry``
wraps it in a small state machine that reconnects after transport errors and
only reports ``on_error`` once it gives up. No progress, completion or failure
callback runs after ``unsubscribe()``, and ``unsubscribe()`` is idempotent.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from smelt.models.smelt import SmeltCompletedEvent, SmeltFailedEvent, SmeltProgressEvent
from smelt.realtime.channel import (
    ChannelConnection,
    ChannelEvent,
    ChannelStatus,
    ProgressTransport,
    smelt_topic,
)
from smelt.utils.errors import ChannelError
from smelt.utils.logging import get_logger
from smelt.utils.retry import SleepFn

logger = get_logger(__name__)


@dataclass(frozen=True)
class SubscriptionCallbacks:
    """Callbacks for smelt subscription events. All are optional."""

    on_progress: Callable[[SmeltProgressEvent], Any] | None = None
    on_completed: Callable[[SmeltCompletedEvent], Any] | None = None
    on_failed: Callable[[SmeltFailedEvent], Any] | None = None
    on_error: Callable[[Exception], Any] | None = None


class SubscriptionHandle:
    """Handle to a single channel connection."""

    def __init__(self, transport: ProgressTransport, smelt_id: str, callbacks: SubscriptionCallbacks) -> None:
        self.smelt_id = smelt_id
        self.topic = smelt_topic(smelt_id)
        self.callbacks = callbacks
        self.closed = False
        self._connection: ChannelConnection | None = None

        connection = transport.open(self.topic, self._on_message, self._on_status)
        if self.closed:
            # Closed while the transport was still opening.
            connection.close()
        else:
            self._connection = connection

    def unsubscribe(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        logger.debug("Unsubscribed from smelt channel", extra={"topic": self.topic})

    def _on_message(self, event: str, payload: dict[str, Any]) -> None:
        if self.closed:
            return

        try:
            if event == ChannelEvent.PROGRESS.value:
                progress = SmeltProgressEvent.model_validate(payload)
                if self.callbacks.on_progress:
                    self.callbacks.on_progress(progress)
            elif event == ChannelEvent.COMPLETED.value:
                completed = SmeltCompletedEvent.model_validate(payload)
                if self.callbacks.on_completed:
                    self.callbacks.on_completed(completed)
                self.unsubscribe()
            elif event == ChannelEvent.FAILED.value:
                failed = SmeltFailedEvent.model_validate(payload)
                if self.callbacks.on_failed:
                    self.callbacks.on_failed(failed)
                self.unsubscribe()
            else:
                logger.debug("Ignoring unknown channel event", extra={"topic": self.topic, "event": event})
        except ValidationError as exc:
            logger.warning(
                "Dropping malformed channel payload",
                extra={"topic": self.topic, "event": event, "error": str(exc)},
            )

    def _on_status(self, status: ChannelStatus, error: Exception | None) -> None:
        if self.closed:
            return

        if status in (ChannelStatus.CHANNEL_ERROR, ChannelStatus.TIMED_OUT):
            detail = str(error) if error else status.value
            logger.warning(
                "Smelt channel error",
                extra={"topic": self.topic, "status": status.value, "error": detail},
            )
            if self.callbacks.on_error:
                self.callbacks.on_error(ChannelError(f"Channel error: {detail}"))
        else:
            logger.debug("Smelt channel status", extra={"topic": self.topic, "status": status.value})


def subscribe_to_smelt(
    transport: ProgressTransport,
    smelt_id: str,
    callbacks: SubscriptionCallbacks,
) -> SubscriptionHandle:
    """
    Subscribe to real-time progress updates for a smelt.

    Automatically unsubscribes when a completed or failed event is received.

    Args:
        transport: Progress channel transport
        smelt_id: The smelt ID to subscribe to
        callbacks: Event callbacks for progress, completion, failure and errors

    Returns:
        Handle with an idempotent unsubscribe method
    """
    return SubscriptionHandle(transport, smelt_id, callbacks)


class SubscriptionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


class RetryingSubscription:
    """
    Subscription that reconnects after transport errors.

    Waits ``2**n`` seconds before the n-th reconnect. After ``max_retries``
    reconnects the next error is passed to ``on_error`` and the subscription
    closes. Reconnects are scheduled on the running event loop.
    """

    def __init__(
        self,
        transport: ProgressTransport,
        smelt_id: str,
        callbacks: SubscriptionCallbacks,
        max_retries: int = 3,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.smelt_id = smelt_id
        self.callbacks = callbacks
        self.max_retries = max_retries
        self.retry_count = 0
        self.state = SubscriptionState.CONNECTING
        self._sleep = sleep
        self._handle: SubscriptionHandle | None = None
        self._retry_task: asyncio.Task | None = None

        self._wrapped = SubscriptionCallbacks(
            on_progress=self._on_progress,
            on_completed=self._on_completed,
            on_failed=self._on_failed,
            on_error=self._on_error,
        )

    def start(self) -> "RetryingSubscription":
        self._attempt()
        return self

    def _attempt(self) -> None:
        if self.state == SubscriptionState.CLOSED:
            return
        self.state = SubscriptionState.CONNECTING
        handle = subscribe_to_smelt(self.transport, self.smelt_id, self._wrapped)
        if self.state == SubscriptionState.CONNECTING:
            self._handle = handle
            self.state = SubscriptionState.CONNECTED
        else:
            handle.unsubscribe()

    def _on_progress(self, payload: SmeltProgressEvent) -> None:
        if self.state != SubscriptionState.CLOSED and self.callbacks.on_progress:
            self.callbacks.on_progress(payload)

    def _on_completed(self, payload: SmeltCompletedEvent) -> None:
        if self.state == SubscriptionState.CLOSED:
            return
        self.state = SubscriptionState.CLOSED
        if self.callbacks.on_completed:
            self.callbacks.on_completed(payload)

    def _on_failed(self, payload: SmeltFailedEvent) -> None:
        if self.state == SubscriptionState.CLOSED:
            return
        self.state = SubscriptionState.CLOSED
        if self.callbacks.on_failed:
            self.callbacks.on_failed(payload)

    def _on_error(self, error: Exception) -> None:
        if self.state in (SubscriptionState.CLOSED, SubscriptionState.RECONNECTING):
            return

        if self._handle is not None:
            self._handle.unsubscribe()
            self._handle = None

        if self.retry_count < self.max_retries:
            self.retry_count += 1
            delay = 2**self.retry_count
            self.state = SubscriptionState.RECONNECTING
            logger.info(
                "Reconnecting to smelt channel",
                extra={
                    "smelt_id": self.smelt_id,
                    "retry_count": self.retry_count,
                    "max_retries": self.max_retries,
                    "delay_seconds": delay,
                },
            )
            self._retry_task = asyncio.get_running_loop().create_task(self._reconnect_after(delay))
            return

        logger.error(
            "Giving up on smelt channel",
            extra={"smelt_id": self.smelt_id, "retry_count": self.retry_count, "error": str(error)},
        )
        self.state = SubscriptionState.CLOSED
        if self.callbacks.on_error:
            self.callbacks.on_error(error)

    async def _reconnect_after(self, delay: float) -> None:
        await self._sleep(delay)
        self._retry_task = None
        if self.state != SubscriptionState.RECONNECTING:
            return

        try:
            self._attempt()
        except Exception as exc:
            logger.warning(
                "Reconnect to smelt channel failed",
                extra={"smelt_id": self.smelt_id, "retry_count": self.retry_count, "error": str(exc)},
            )
            self.state = SubscriptionState.CONNECTED
            self._on_error(ChannelError(f"Channel error: {exc}"))

    def unsubscribe(self) -> None:
        """Tear down the subscription. Safe to call any number of times."""
        self.state = SubscriptionState.CLOSED
        if self._retry_task is not None:
            self._retry_task.cancel()
            self._retry_task = None
        if self._handle is not None:
            self._handle.unsubscribe()
            self._handle = None


def subscribe_with_retry(
    transport: ProgressTransport,
    smelt_id: str,
    callbacks: SubscriptionCallbacks,
    max_retries: int = 3,
    sleep: SleepFn = asyncio.sleep,
) -> RetryingSubscription:
    """
    Subscribe to a smelt with automatic reconnection on channel errors.

    Args:
        transport: Progress channel transport
        smelt_id: The smelt ID to subscribe to
        callbacks: Event callbacks
        max_retries: Reconnect attempts before ``on_error`` fires
        sleep: Awaitable sleep used between reconnects

    Returns:
        Handle with an idempotent unsubscribe method
    """
    return RetryingSubscription(transport, smelt_id, callbacks, max_retries, sleep).start()
