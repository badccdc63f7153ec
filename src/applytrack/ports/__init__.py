"""Ports - interfaces/protocols for external dependencies."""

from .application_store import ApplicationStore, Scope, StoreError
from .completion_store import CompletionStore
from .notifier import EmailMessage, EmailNotifier, NotificationError, NotificationInbox
from .export_sink import ExportSink
from .change_feed import ChangeEvent, ChangeFeed

__all__ = [
    "ApplicationStore",
    "Scope",
    "StoreError",
    "CompletionStore",
    "EmailMessage",
    "EmailNotifier",
    "NotificationError",
    "NotificationInbox",
    "ExportSink",
    "ChangeEvent",
    "ChangeFeed",
]
