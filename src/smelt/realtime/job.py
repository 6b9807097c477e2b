"""
Client-side state machine for one smelt.

States: processing -> completed | failed. Transitions are driven only by
events from the progress subscription. Once terminal, every further event is a
no-op, since reconnect races can redeliver the terminal event.
"""

from smelt.models.smelt import (
    JobStatus,
    SmeltCompletedEvent,
    SmeltFailedEvent,
    SmeltFileProgress,
    SmeltProgress,
    SmeltProgressEvent,
    SmeltResult,
)
from smelt.realtime.subscription import SubscriptionCallbacks
from smelt.utils.errors import ConnectionLostError
from smelt.utils.logging import get_logger

logger = get_logger(__name__)


class SmeltJob:
    """
    Observed state of a single smelt.

    Owned by exactly one job; feed it only events for ``smelt_id``.
    """

    def __init__(self, smelt_id: str) -> None:
        self.smelt_id = smelt_id
        self.status = JobStatus.PROCESSING
        self.progress = SmeltProgress(percentage=0, stage="pending", message="STARTING...")
        self.files: list[SmeltFileProgress] = []
        self.results: list[SmeltResult] = []
        self.error_code: str | None = None
        self.error_message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def files_done(self) -> int:
        return sum(1 for f in self.files if f.status == "completed")

    @property
    def files_total(self) -> int:
        return len(self.files)

    @property
    def error(self) -> dict[str, str] | None:
        """The failure as a ``{code, message}`` pair, or None."""
        if self.status != JobStatus.FAILED:
            return None
        return {"code": self.error_code or "internal_error", "message": self.error_message or ""}

    def _ignore(self, event: str) -> bool:
        if self.is_terminal:
            logger.debug(
                "Ignoring event for finished smelt",
                extra={"smelt_id": self.smelt_id, "event": event, "status": self.status.value},
            )
            return True
        return False

    def handle_progress(self, event: SmeltProgressEvent) -> bool:
        """Update progress counters. Returns False if the event was ignored."""
        if self._ignore("progress"):
            return False
        self.progress = event.progress
        self.files = list(event.files)
        return True

    def handle_completed(self, event: SmeltCompletedEvent) -> bool:
        if self._ignore("completed"):
            return False
        self.results = list(event.results)
        self.progress = SmeltProgress(percentage=100, stage="completed", message="DONE!")
        self.status = JobStatus.COMPLETED
        logger.info(
            "Smelt completed",
            extra={"smelt_id": self.smelt_id, "result_count": len(self.results)},
        )
        return True

    def handle_failed(self, event: SmeltFailedEvent) -> bool:
        return self.fail(event.error_code, event.error_message)

    def fail(self, error_code: str, error_message: str) -> bool:
        if self._ignore("failed"):
            return False
        self.error_code = error_code
        self.error_message = error_message
        self.status = JobStatus.FAILED
        logger.info(
            "Smelt failed",
            extra={"smelt_id": self.smelt_id, "error_code": error_code},
        )
        return True

    def handle_transport_error(self, error: Exception) -> bool:
        """
        Treat a lost subscription as a terminal failure.

        The job may still be running server-side, but the client can no longer
        observe it.
        """
        if self._ignore("transport_error"):
            return False
        logger.warning(
            "Lost progress channel for smelt",
            extra={"smelt_id": self.smelt_id, "error": str(error)},
        )
        lost = ConnectionLostError()
        return self.fail(lost.error_code, lost.message)

    def callbacks(self) -> SubscriptionCallbacks:
        """Subscription callbacks that route channel events into this job."""
        return SubscriptionCallbacks(
            on_progress=self.handle_progress,
            on_completed=self.handle_completed,
            on_failed=self.handle_failed,
            on_error=self.handle_transport_error,
        )
