"""Notification dispatch port"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Notification:
    recipient: str
    subject: str
    html_body: str
    category: str = "general"


@dataclass(frozen=True)
class SendResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class INotificationDispatcher(ABC):
    """Fire-and-forget delivery.

    ``submit`` hands the notification off and returns immediately. It never
    raises: a notification that cannot be enqueued or delivered goes to the
    dead-letter log and is dropped.
    """

    @abstractmethod
    def submit(self, notification: Notification) -> None:
        pass
