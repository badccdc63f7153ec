"""Notification email interface."""

from dataclasses import dataclass
from typing import Protocol

CATEGORIES = ("application_added", "status_changed", "follow_up_reminder")


class NotificationError(Exception):
    """Raised when a notification could not be delivered."""

    pass


@dataclass
class EmailMessage:
    recipient: str
    subject: str
    body: str
    category: str


class EmailNotifier(Protocol):
    """Interface for best-effort notification emails."""

    def send(self, message: EmailMessage) -> None:
        ...


class NotificationInbox(Protocol):
    """Interface for in-app notification rows."""

    def add_notification(self, user_id: str, title: str, message: str, kind: str = "info") -> None:
        ...
