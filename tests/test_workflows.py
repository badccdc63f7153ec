"""Tests for the shared workflow layer."""

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from applytrack.config import APPLYTRACK_HOME, DATA_DIR, Config
from applytrack.core.applications import ApplicationRecord, Status, ValidationError
from applytrack.core.export import ExportError
from applytrack.core.reminders import STALE_ADDRESSED_MARKER, ReminderType, build_reminders
from applytrack.adapters.file_completions import FileCompletionStore
from applytrack.ports.application_store import Scope, StoreError
from applytrack.ports.notifier import NotificationError
from applytrack.workflows import (
    Notifications,
    add_application,
    complete_reminder,
    current_reminders,
    delete_application,
    export_applications,
    find_reminder,
    get_completions,
    get_email_notifier,
    get_export_sink,
    send_reminder_digest,
    update_application,
)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 0)


@pytest.fixture
def today(now):
    return now.date()


def make(id="r1", status=Status.APPLIED, applied=date(2025, 1, 14), notes="", follow_up=None):
    return ApplicationRecord(
        id=id,
        company="Acme",
        role="Engineer",
        status=status,
        applied_date=applied,
        notes=notes,
        follow_up_date=follow_up,
    )


@pytest.fixture
def store():
    store = MagicMock()
    store.create.side_effect = lambda fields: ApplicationRecord.from_api({"id": "new", **fields})
    store.update.side_effect = lambda record_id, fields: ApplicationRecord.from_api(
        {"id": record_id, "company": "Acme", "role": "Engineer", "applied_date": "2025-01-01", **fields}
    )
    return store


@pytest.fixture
def completions(tmp_path):
    return FileCompletionStore(tmp_path / "completed.json")


class TestWiring:
    def test_completions_default_path(self):
        assert get_completions(Config()).path == DATA_DIR / "completed_reminders.json"

    def test_completions_configured_path(self, tmp_path):
        config = Config(completion_file=str(tmp_path / "c.json"))
        assert get_completions(config).path == tmp_path / "c.json"

    def test_export_dir(self, tmp_path):
        assert get_export_sink(Config()).directory == APPLYTRACK_HOME / "exports"
        assert get_export_sink(Config(export_dir=str(tmp_path))).directory == tmp_path

    def test_email_disabled_by_default(self):
        assert get_email_notifier(Config(resend_api_key="k")) is None
        assert get_email_notifier(Config(email_notifications=True, resend_api_key="k")) is not None


class TestAddApplication:
    def test_validates_before_store(self, store):
        with pytest.raises(ValidationError):
            add_application(store, {"company": "", "role": "Engineer"})
        store.create.assert_not_called()

    def test_creates_and_notifies(self, store):
        inbox = MagicMock()
        email = MagicMock()
        notifications = Notifications("user-1", inbox, email, "me@example.com")

        record = add_application(store, {"company": "Acme", "role": "Engineer"}, notifications)

        assert record.company == "Acme"
        assert store.create.call_args.args[0]["status"] == "Applied"
        inbox.add_notification.assert_called_once_with(
            "user-1", "New Job Application Added", "You applied to Acme for Engineer", "success"
        )
        assert email.send.call_args.args[0].category == "application_added"

    def test_store_error_propagates(self, store):
        store.create.side_effect = StoreError("insert failed")
        with pytest.raises(StoreError):
            add_application(store, {"company": "Acme", "role": "Engineer"})

    def test_notification_failures_do_not_block(self, store):
        inbox = MagicMock()
        inbox.add_notification.side_effect = StoreError("nope")
        email = MagicMock()
        email.send.side_effect = NotificationError("smtp down")
        notifications = Notifications("user-1", inbox, email, "me@example.com")

        record = add_application(store, {"company": "Acme", "role": "Engineer"}, notifications)
        assert record.id == "new"


class TestUpdateApplication:
    def test_status_change_notifies(self, store):
        inbox = MagicMock()
        update_application(store, "r1", {"status": "offer"}, Notifications("user-1", inbox))
        store.update.assert_called_once_with("r1", {"status": "Offer"})
        message = inbox.add_notification.call_args.args[2]
        assert message == "Acme - Engineer status changed to Offer"

    def test_other_fields_do_not_notify(self, store):
        inbox = MagicMock()
        update_application(store, "r1", {"salary": "$100k"}, Notifications("user-1", inbox))
        inbox.add_notification.assert_not_called()

    def test_rejects_empty_role(self, store):
        with pytest.raises(ValidationError):
            update_application(store, "r1", {"role": ""})
        store.update.assert_not_called()


class TestDelete:
    def test_delete(self, store):
        delete_application(store, "r1")
        store.delete.assert_called_once_with("r1")


class TestCompleteReminder:
    def test_follow_up_completion(self, store, completions, now, today):
        record = make(follow_up=today - timedelta(days=1), notes="Applied online.")
        [reminder] = current_reminders([record], completions, now)
        assert reminder.type is ReminderType.FOLLOW_UP

        updated = complete_reminder(reminder, [record], store, completions, now)

        assert updated.follow_up_date == today + timedelta(days=7)
        assert "[2025-01-15]" in updated.notes
        assert updated.notes.startswith("Applied online.")
        assert reminder.id in completions.load()
        assert current_reminders([record], completions, now) == []

    def test_stale_completion_writes_marker(self, store, completions, now, today):
        record = make(applied=today - timedelta(days=20))
        [reminder] = current_reminders([record], completions, now)
        updated = complete_reminder(reminder, [record], store, completions, now)
        assert STALE_ADDRESSED_MARKER in updated.notes

        # Even after the completion set is reset, the marker keeps it quiet
        completions.clear()
        assert build_reminders([updated], completions.load(), now) == []

    def test_store_failure_keeps_reminder_hidden(self, store, completions, now):
        record = make(status=Status.INTERVIEW)
        [reminder] = current_reminders([record], completions, now)
        store.update.side_effect = StoreError("offline")

        with pytest.raises(StoreError):
            complete_reminder(reminder, [record], store, completions, now)

        assert current_reminders([record], completions, now) == []

    def test_unknown_record(self, store, completions, now):
        [reminder] = current_reminders([make(status=Status.INTERVIEW)], completions, now)
        with pytest.raises(StoreError):
            complete_reminder(reminder, [], store, completions, now)
        assert completions.load() == set()

    def test_find_reminder(self, completions, now):
        records = [make(id="x", status=Status.INTERVIEW)]
        assert find_reminder("interview-prep-x", records, completions, now).record_id == "x"
        assert find_reminder("follow-up-x", records, completions, now) is None


class TestReminderDigest:
    def test_sends_digest(self, store, completions, now):
        store.list.return_value = [make(status=Status.INTERVIEW)]
        email = MagicMock()

        sent = send_reminder_digest(store, Scope("user-1"), completions, email, "me@example.com", now)

        assert sent == 1
        message = email.send.call_args.args[0]
        assert message.category == "follow_up_reminder"
        assert "[high] Prepare for interview at Acme" in message.body

    def test_nothing_pending(self, store, completions, now):
        store.list.return_value = []
        email = MagicMock()
        assert send_reminder_digest(store, Scope("user-1"), completions, email, "me@example.com", now) == 0
        email.send.assert_not_called()

    def test_email_failure_is_logged(self, store, completions, now):
        store.list.return_value = [make(status=Status.INTERVIEW)]
        email = MagicMock()
        email.send.side_effect = NotificationError("down")
        assert send_reminder_digest(store, Scope("user-1"), completions, email, "me@example.com", now) == 0


class TestExport:
    def test_delivers_payload(self, now):
        sink = MagicMock()
        sink.deliver.return_value = "/tmp/out.csv"
        payload, location = export_applications([make()], "csv", "all", sink, now)
        assert location == "/tmp/out.csv"
        sink.deliver.assert_called_once_with(payload)

    def test_empty_range_never_reaches_sink(self, now):
        sink = MagicMock()
        old = make(applied=date(2020, 1, 1))
        with pytest.raises(ExportError):
            export_applications([old], "json", "30days", sink, now)
        sink.deliver.assert_not_called()
