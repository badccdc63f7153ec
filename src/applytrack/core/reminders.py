"""Pure reminder rule engine - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from .applications import (
    CLOSED_STATUSES,
    ApplicationRecord,
    Status,
    append_note,
    dated_note,
)

# Marker tokens written into notes so a rule stays quiet once addressed,
# even after the local completion set has been reset.
STALE_ADDRESSED_MARKER = "[stale-addressed]"
PREP_COMPLETED_MARKER = "[interview-prep-done]"

STALE_AFTER_DAYS = 14
STALE_HIGH_AFTER_DAYS = 21
FOLLOW_UP_INTERVAL_DAYS = 7
MAX_COMPLETED = 100


class ReminderType(Enum):
    FOLLOW_UP = "follow-up"
    STALE_APPLICATION = "stale-application"
    INTERVIEW_PREP = "interview-prep"


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


@dataclass
class Reminder:
    """A derived action item. Recomputed on every pass, never stored."""

    type: ReminderType
    priority: Priority
    message: str
    due_date: date
    record_id: str

    @property
    def id(self) -> str:
        return reminder_id(self.type, self.record_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "priority": self.priority.value,
            "message": self.message,
            "dueDate": self.due_date.isoformat(),
            "sourceRecordId": self.record_id,
        }


def reminder_id(kind: ReminderType, record_id: str) -> str:
    return f"{kind.value}-{record_id}"


def follow_up_reminder(record: ApplicationRecord, today: date) -> Reminder | None:
    """Follow-up date reached on an application that is still open."""
    if not record.follow_up_date:
        return None
    if record.follow_up_date > today or record.status in CLOSED_STATUSES:
        return None
    return Reminder(
        type=ReminderType.FOLLOW_UP,
        priority=Priority.HIGH,
        message=f"Follow up with {record.company} about {record.role}",
        due_date=record.follow_up_date,
        record_id=record.id,
    )


def stale_reminder(record: ApplicationRecord, today: date) -> Reminder | None:
    """No movement on an Applied record for two weeks or more."""
    if record.status != Status.APPLIED or record.has_marker(STALE_ADDRESSED_MARKER):
        return None
    days = record.days_since_applied(today)
    if days < STALE_AFTER_DAYS:
        return None
    return Reminder(
        type=ReminderType.STALE_APPLICATION,
        priority=Priority.HIGH if days >= STALE_HIGH_AFTER_DAYS else Priority.MEDIUM,
        message=f"No response from {record.company} for {days} days - consider following up",
        due_date=today,
        record_id=record.id,
    )


def interview_prep_reminder(record: ApplicationRecord, today: date) -> Reminder | None:
    if record.status != Status.INTERVIEW or record.has_marker(PREP_COMPLETED_MARKER):
        return None
    return Reminder(
        type=ReminderType.INTERVIEW_PREP,
        priority=Priority.HIGH,
        message=f"Prepare for interview at {record.company}",
        due_date=today,
        record_id=record.id,
    )


RULES = (follow_up_reminder, stale_reminder, interview_prep_reminder)


def build_reminders(
    records: list[ApplicationRecord],
    completed: set[str] | frozenset[str] = frozenset(),
    as_of: datetime | None = None,
) -> list[Reminder]:
    """
    Evaluate every rule against every record.

    Drops reminders whose id is in the completion set, then sorts by
    priority (high first), keeping encounter order within a priority.
    Pure function - no I/O.
    """
    as_of = as_of or datetime.now()
    today = as_of.date()

    reminders = []
    for record in records:
        for rule in RULES:
            reminder = rule(record, today)
            if reminder and reminder.id not in completed:
                reminders.append(reminder)

    return sorted(reminders, key=lambda r: -r.priority.rank)


def completion_updates(
    reminder: Reminder,
    record: ApplicationRecord,
    as_of: datetime | None = None,
) -> dict:
    """
    Partial store update that marks a reminder as handled on its record.

    Pure function - no I/O.
    """
    as_of = as_of or datetime.now()
    today = as_of.date()

    match reminder.type:
        case ReminderType.FOLLOW_UP:
            next_follow_up = today + timedelta(days=FOLLOW_UP_INTERVAL_DAYS)
            return {
                "follow_up_date": next_follow_up.isoformat(),
                "notes": append_note(
                    record.notes, dated_note("Followed up with company.", today)
                ),
            }
        case ReminderType.STALE_APPLICATION:
            line = dated_note(f"Addressed stale application. {STALE_ADDRESSED_MARKER}", today)
            return {"notes": append_note(record.notes, line)}
        case ReminderType.INTERVIEW_PREP:
            line = dated_note(f"Interview preparation completed. {PREP_COMPLETED_MARKER}", today)
            return {"notes": append_note(record.notes, line)}

    raise ValueError(f"Unknown reminder type: {reminder.type}")


def prune_completions(ids: set[str], limit: int = MAX_COMPLETED) -> set[str]:
    """Reset the completion set once it grows past the limit."""
    if len(ids) > limit:
        return set()
    return ids
