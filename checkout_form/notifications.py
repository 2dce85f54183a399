"""Notification sinks: where success and failure toasts are delivered."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """A toast-style message for the buyer."""
    title: str
    description: str
    level: str = "info"

    def to_dict(self) -> dict:
        return {"title": self.title, "description": self.description, "level": self.level}


PURCHASE_SUCCEEDED = Notification(
    title="Purchase successful!",
    description="Your digital goods are ready for download.",
)


def payment_failed(reason: str) -> Notification:
    return Notification(title="Payment failed", description=reason, level="error")


class NotificationSink(ABC):
    """Abstract receiver of notifications. The core never renders them."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        ...


class LoggingNotificationSink(NotificationSink):
    """Writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.level == "error" else logging.INFO
        logger.log(level, "%s: %s", notification.title, notification.description)


class InMemoryNotificationSink(NotificationSink):
    """Queues notifications until the UI collects them."""

    def __init__(self):
        self._pending: list[Notification] = []

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def notify(self, notification: Notification) -> None:
        self._pending.append(notification)

    def drain(self) -> list[Notification]:
        """Return queued notifications in arrival order and clear the queue."""
        drained, self._pending = self._pending, []
        return drained
