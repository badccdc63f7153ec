"""Pure application record domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class ValidationError(ValueError):
    """Raised when application fields fail validation before a store write."""

    pass


class Status(Enum):
    """Lifecycle stage of an application."""

    APPLIED = "Applied"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    REJECTED = "Rejected"
    ACCEPTED = "Accepted"

    @classmethod
    def parse(cls, value: "str | Status") -> "Status":
        """Parse a status from its value, case-insensitively."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value.lower() == str(value).strip().lower():
                return status
        raise ValidationError(f"Unknown status: {value!r}")


CLOSED_STATUSES = (Status.REJECTED, Status.ACCEPTED)

# Optional text columns, in store column order
OPTIONAL_FIELDS = ("location", "salary", "type", "contact_person", "job_url")


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value.split("T")[0])


@dataclass
class ApplicationRecord:
    """One job application row."""

    id: str
    company: str
    role: str
    status: Status
    applied_date: date
    notes: str = ""
    location: str | None = None
    salary: str | None = None
    job_type: str | None = None
    contact_person: str | None = None
    follow_up_date: date | None = None
    job_url: str | None = None
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def has_marker(self, marker: str) -> bool:
        return marker in self.notes

    def days_since_applied(self, as_of: date | None = None) -> int:
        """Calendar days elapsed since the application date."""
        as_of = as_of or date.today()
        return (as_of - self.applied_date).days

    @classmethod
    def from_api(cls, data: dict) -> "ApplicationRecord":
        """Create a record from a job_applications row."""
        return cls(
            id=str(data["id"]),
            company=data["company"],
            role=data["role"],
            status=Status.parse(data.get("status") or Status.APPLIED.value),
            applied_date=_parse_date(data.get("applied_date")) or date.today(),
            notes=data.get("notes") or "",
            location=data.get("location"),
            salary=data.get("salary"),
            job_type=data.get("type"),
            contact_person=data.get("contact_person"),
            follow_up_date=_parse_date(data.get("follow_up_date")),
            job_url=data.get("job_url"),
            user_id=data.get("user_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_api(self) -> dict:
        """Serialize to a job_applications row."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "company": self.company,
            "role": self.role,
            "status": self.status.value,
            "applied_date": self.applied_date.isoformat(),
            "notes": self.notes,
            "location": self.location,
            "salary": self.salary,
            "type": self.job_type,
            "contact_person": self.contact_person,
            "follow_up_date": self.follow_up_date.isoformat() if self.follow_up_date else None,
            "job_url": self.job_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def validate_fields(fields: dict, partial: bool = False) -> dict:
    """
    Validate and normalize fields for a create (or partial update).

    Returns a new dict in store wire format. Raises ValidationError on empty
    company/role or an unknown status. Pure function - no I/O.
    """
    cleaned = dict(fields)

    for key in ("company", "role"):
        if key in cleaned or not partial:
            value = (cleaned.get(key) or "").strip()
            if not value:
                raise ValidationError(f"{key.capitalize()} is required")
            cleaned[key] = value

    if "status" in cleaned:
        cleaned["status"] = Status.parse(cleaned["status"]).value
    elif not partial:
        cleaned["status"] = Status.APPLIED.value

    for key in ("applied_date", "follow_up_date"):
        value = cleaned.get(key)
        if isinstance(value, date):
            cleaned[key] = value.isoformat()
        elif value:
            try:
                cleaned[key] = date.fromisoformat(str(value).split("T")[0]).isoformat()
            except ValueError:
                raise ValidationError(f"Invalid {key}: {value!r}")

    if not partial and not cleaned.get("applied_date"):
        cleaned["applied_date"] = date.today().isoformat()

    return cleaned


def append_note(notes: str, line: str) -> str:
    """Append a line to notes without touching existing text."""
    if not notes:
        return line
    return f"{notes}\n{line}"


def dated_note(text: str, as_of: date | None = None) -> str:
    """Format a note line stamped with a date: '[2025-01-15] text'."""
    as_of = as_of or date.today()
    return f"[{as_of.isoformat()}] {text}"
