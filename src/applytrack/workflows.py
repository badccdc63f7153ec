"""Shared workflow layer between the CLI and the scheduler.

Each function validates input, talks to the ports, and returns plain results.
Store failures propagate as StoreError; notifications are best effort.
"""

import logging
from datetime import datetime
from pathlib import Path

from .adapters.file_completions import FileCompletionStore
from .adapters.file_export import FileExportSink
from .adapters.resend_email import ResendEmailNotifier
from .adapters.supabase_api import SupabaseStore
from .config import APPLYTRACK_HOME, DATA_DIR, Config
from .core.applications import ApplicationRecord, Status, validate_fields
from .core.export import DateRange, ExportFormat, ExportPayload, build_export
from .core.reminders import Reminder, build_reminders, completion_updates
from .ports.application_store import ApplicationStore, Scope, StoreError
from .ports.completion_store import CompletionStore
from .ports.export_sink import ExportSink
from .ports.notifier import EmailMessage, EmailNotifier, NotificationError, NotificationInbox

logger = logging.getLogger(__name__)


class Notifications:
    """In-app and email notifications. Failures are logged, never raised."""

    def __init__(
        self,
        user_id: str = "",
        inbox: NotificationInbox | None = None,
        email: EmailNotifier | None = None,
        recipient: str = "",
    ):
        self.user_id = user_id
        self.inbox = inbox
        self.email = email
        self.recipient = recipient

    def publish(self, title: str, message: str, kind: str, category: str) -> None:
        if self.inbox and self.user_id:
            try:
                self.inbox.add_notification(self.user_id, title, message, kind)
            except StoreError as e:
                logger.warning(f"Failed to record notification '{title}': {e}")

        if self.email and self.recipient:
            try:
                self.email.send(EmailMessage(self.recipient, title, message, category))
            except NotificationError as e:
                logger.warning(f"Failed to send {category} email: {e}")


# ============== Wiring ==============


def get_store(config: Config) -> SupabaseStore:
    return SupabaseStore(config)


def get_completions(config: Config) -> FileCompletionStore:
    """Resolve completion file from config."""
    if config.completion_file:
        return FileCompletionStore(Path(config.completion_file).expanduser())
    return FileCompletionStore(DATA_DIR / "completed_reminders.json")


def get_export_sink(config: Config) -> FileExportSink:
    """Resolve export directory from config."""
    if config.export_dir:
        return FileExportSink(Path(config.export_dir).expanduser())
    return FileExportSink(APPLYTRACK_HOME / "exports")


def get_email_notifier(config: Config) -> ResendEmailNotifier | None:
    if not config.email_notifications or not config.resend_api_key:
        return None
    return ResendEmailNotifier(config.resend_api_key, config.email_from)


def get_notifications(config: Config, store: SupabaseStore) -> Notifications:
    return Notifications(
        user_id=store.session.user_id,
        inbox=store,
        email=get_email_notifier(config),
        recipient=config.notification_email or store.session.email,
    )


# ============== Record operations ==============


def add_application(
    store: ApplicationStore,
    fields: dict,
    notifications: Notifications | None = None,
) -> ApplicationRecord:
    """Validate and create a record, then announce it."""
    record = store.create(validate_fields(fields))
    if notifications:
        notifications.publish(
            "New Job Application Added",
            f"You applied to {record.company} for {record.role}",
            "success",
            "application_added",
        )
    return record


def update_application(
    store: ApplicationStore,
    record_id: str,
    fields: dict,
    notifications: Notifications | None = None,
) -> ApplicationRecord:
    """Validate and apply a partial update. Status changes are announced."""
    cleaned = validate_fields(fields, partial=True)
    record = store.update(record_id, cleaned)
    if notifications and "status" in cleaned:
        notifications.publish(
            "Application Status Updated",
            f"{record.company} - {record.role} status changed to {cleaned['status']}",
            "info",
            "status_changed",
        )
    return record


def delete_application(store: ApplicationStore, record_id: str) -> None:
    store.delete(record_id)


# ============== Reminders ==============


def current_reminders(
    records: list[ApplicationRecord],
    completions: CompletionStore,
    as_of: datetime | None = None,
) -> list[Reminder]:
    return build_reminders(records, completions.load(), as_of)


def find_reminder(
    reminder_id: str,
    records: list[ApplicationRecord],
    completions: CompletionStore,
    as_of: datetime | None = None,
) -> Reminder | None:
    return next(
        (r for r in current_reminders(records, completions, as_of) if r.id == reminder_id),
        None,
    )


def complete_reminder(
    reminder: Reminder,
    records: list[ApplicationRecord],
    store: ApplicationStore,
    completions: CompletionStore,
    as_of: datetime | None = None,
) -> ApplicationRecord:
    """
    Mark a reminder done.

    The id is saved locally first, hiding the reminder immediately. The
    record update follows; if it fails the StoreError propagates and the
    reminder stays hidden until the completion set is reset.
    """
    record = next((r for r in records if r.id == reminder.record_id), None)
    if record is None:
        raise StoreError(f"Application {reminder.record_id} not found")

    completions.add(reminder.id)
    updated = store.update(record.id, completion_updates(reminder, record, as_of))
    logger.info(f"Completed reminder {reminder.id}")
    return updated


def send_reminder_digest(
    store: ApplicationStore,
    scope: Scope,
    completions: CompletionStore,
    email: EmailNotifier,
    recipient: str,
    as_of: datetime | None = None,
) -> int:
    """Email pending reminders. Returns how many were included."""
    reminders = current_reminders(store.list(scope), completions, as_of)
    if not reminders:
        logger.info("No pending reminders, skipping digest")
        return 0

    body = "\n".join(f"[{r.priority.value}] {r.message}" for r in reminders)
    try:
        email.send(
            EmailMessage(
                recipient=recipient,
                subject=f"You have {len(reminders)} pending job search reminders",
                body=body,
                category="follow_up_reminder",
            )
        )
    except NotificationError as e:
        logger.warning(f"Failed to send reminder digest: {e}")
        return 0
    return len(reminders)


# ============== Export ==============


def export_applications(
    records: list[ApplicationRecord],
    fmt: ExportFormat | str,
    date_range: DateRange | str,
    sink: ExportSink,
    as_of: datetime | None = None,
) -> tuple[ExportPayload, str]:
    """Build an export and hand it to the sink. Raises ExportError."""
    payload = build_export(records, fmt, date_range, as_of)
    location = sink.deliver(payload)
    return payload, location


def status_choices() -> list[str]:
    return [s.value for s in Status]
