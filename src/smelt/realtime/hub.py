"""
In-process channel hub.

Implements both sides of the progress channel for single-process deployments
and tests: the pipeline publishes through ``send`` and subscribers attach with
``open``. Delivery is synchronous and in publish order.
"""

from collections import defaultdict
from typing import Any

from smelt.realtime.channel import ChannelStatus, MessageHandler, StatusHandler
from smelt.utils.logging import get_logger

logger = get_logger(__name__)


class LocalConnection:
    """One subscriber attached to a topic of a LocalChannelHub."""

    def __init__(
        self,
        hub: "LocalChannelHub",
        topic: str,
        on_message: MessageHandler,
        on_status: StatusHandler,
    ) -> None:
        self.hub = hub
        self.topic = topic
        self.on_message = on_message
        self.on_status = on_status
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.hub._detach(self)


class LocalChannelHub:
    """Topic-keyed pub/sub living in the current process."""

    def __init__(self) -> None:
        self._connections: dict[str, list[LocalConnection]] = defaultdict(list)

    def open(
        self,
        topic: str,
        on_message: MessageHandler,
        on_status: StatusHandler,
    ) -> LocalConnection:
        connection = LocalConnection(self, topic, on_message, on_status)
        self._connections[topic].append(connection)
        logger.debug("Channel subscriber attached", extra={"topic": topic})
        on_status(ChannelStatus.SUBSCRIBED, None)
        return connection

    def _detach(self, connection: LocalConnection) -> None:
        subscribers = self._connections.get(connection.topic)
        if subscribers and connection in subscribers:
            subscribers.remove(connection)
            logger.debug("Channel subscriber detached", extra={"topic": connection.topic})
        if not subscribers:
            self._connections.pop(connection.topic, None)

    async def send(self, topic: str, event: str, payload: dict[str, Any]) -> None:
        for connection in list(self._connections.get(topic, [])):
            if not connection.closed:
                connection.on_message(event, payload)

    def fail_topic(self, topic: str, error: Exception) -> None:
        """Report a transport error to every subscriber of a topic."""
        for connection in list(self._connections.get(topic, [])):
            if not connection.closed:
                connection.on_status(ChannelStatus.CHANNEL_ERROR, error)

    def subscriber_count(self, topic: str) -> int:
        return len(self._connections.get(topic, []))
