"""
Server-side broadcasting of smelt progress events.
"""

from smelt.models.smelt import (
    SmeltCompletedEvent,
    SmeltFailedEvent,
    SmeltFileProgress,
    SmeltProgress,
    SmeltProgressEvent,
    SmeltResult,
    SmeltStage,
)
from smelt.realtime.channel import ChannelEvent, ProgressPublisher, smelt_topic
from smelt.utils.logging import get_logger

logger = get_logger(__name__)


class SmeltBroadcaster:
    """
    Publishes the progress lifecycle of one smelt on its channel.

    Created once per processing run and closed when the run ends. Events sent
    after ``close()`` are dropped.
    """

    def __init__(self, publisher: ProgressPublisher, smelt_id: str) -> None:
        self.publisher = publisher
        self.smelt_id = smelt_id
        self.topic = smelt_topic(smelt_id)
        self.closed = False

    async def _send(self, event: ChannelEvent, payload: dict) -> None:
        if self.closed:
            logger.warning(
                "Broadcasting on a closed channel, event dropped",
                extra={"topic": self.topic, "event": event.value},
            )
            return
        await self.publisher.send(self.topic, event.value, payload)

    async def progress(
        self,
        status: SmeltStage,
        percentage: int,
        message: str,
        files: list[SmeltFileProgress],
    ) -> None:
        event = SmeltProgressEvent(
            smelt_id=self.smelt_id,
            status=status,
            progress=SmeltProgress(percentage=percentage, stage=status, message=message),
            files=files,
        )
        await self._send(ChannelEvent.PROGRESS, event.model_dump(mode="json"))

    async def completed(self, results: list[SmeltResult]) -> None:
        event = SmeltCompletedEvent(smelt_id=self.smelt_id, results=results)
        await self._send(ChannelEvent.COMPLETED, event.model_dump(mode="json"))

    async def failed(self, error_code: str, error_message: str) -> None:
        event = SmeltFailedEvent(
            smelt_id=self.smelt_id,
            error_code=error_code,
            error_message=error_message,
        )
        await self._send(ChannelEvent.FAILED, event.model_dump(mode="json"))

    def close(self) -> None:
        self.closed = True
