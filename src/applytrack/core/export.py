"""Pure export formatting - no I/O dependencies."""

import csv
import io
import json
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from .analytics import count_by_status, percentage
from .applications import ApplicationRecord, Status


class ExportError(Exception):
    """Raised when an export cannot be produced or delivered."""

    pass


class DateRange(Enum):
    ALL = "all"
    LAST_30_DAYS = "30days"
    LAST_90_DAYS = "90days"
    YEAR = "year"

    @property
    def label(self) -> str:
        return "All time" if self is DateRange.ALL else self.value


class ExportFormat(Enum):
    CSV = "csv"
    JSON = "json"
    REPORT = "report"


@dataclass
class ExportPayload:
    """Serialized export ready for a sink."""

    content: str
    filename: str
    mime_type: str
    count: int


CSV_HEADERS = [
    "Company",
    "Role",
    "Status",
    "Applied Date",
    "Location",
    "Salary",
    "Type",
    "Contact Person",
    "Follow-up Date",
    "Job URL",
    "Notes",
]


def range_cutoff(date_range: DateRange, as_of: date) -> date | None:
    """Earliest applied date included by a range, or None for no limit."""
    match date_range:
        case DateRange.ALL:
            return None
        case DateRange.LAST_30_DAYS:
            return as_of - timedelta(days=30)
        case DateRange.LAST_90_DAYS:
            return as_of - timedelta(days=90)
        case DateRange.YEAR:
            try:
                return as_of.replace(year=as_of.year - 1)
            except ValueError:
                # Feb 29 -> Feb 28
                return as_of.replace(year=as_of.year - 1, day=28)


def filter_by_date_range(
    records: list[ApplicationRecord],
    date_range: "DateRange | str" = DateRange.ALL,
    as_of: datetime | None = None,
) -> list[ApplicationRecord]:
    """Keep records applied on or after the range cutoff (inclusive)."""
    as_of = as_of or datetime.now()
    cutoff = range_cutoff(DateRange(date_range), as_of.date())
    if cutoff is None:
        return list(records)
    return [r for r in records if r.applied_date >= cutoff]


def _csv_row(record: ApplicationRecord) -> list[str]:
    return [
        record.company,
        record.role,
        record.status.value,
        record.applied_date.isoformat(),
        record.location or "",
        record.salary or "",
        record.job_type or "",
        record.contact_person or "",
        record.follow_up_date.isoformat() if record.follow_up_date else "",
        record.job_url or "",
        record.notes or "",
    ]


def to_csv(records: list[ApplicationRecord]) -> str:
    """
    Tabular export: 11-column header, every field quoted.

    The header row is written bare; data rows are fully quoted with embedded
    quotes doubled.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow(_csv_row(record))
    rows = buf.getvalue().rstrip("\n")
    header = ",".join(CSV_HEADERS)
    return f"{header}\n{rows}" if rows else header


def to_json(records: list[ApplicationRecord], as_of: datetime | None = None) -> str:
    """Structured export: timestamp, count and the verbatim rows."""
    as_of = as_of or datetime.now()
    return json.dumps(
        {
            "exportDate": as_of.isoformat(),
            "totalApplications": len(records),
            "applications": [r.to_api() for r in records],
        },
        indent=2,
    )


def parse_json(content: str) -> list[ApplicationRecord]:
    """Parse a structured export back into records."""
    try:
        data = json.loads(content)
        return [ApplicationRecord.from_api(row) for row in data["applications"]]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise ExportError(f"Invalid export document: {e}") from e


def _display_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"


def _format_rate(part: int, total: int) -> str:
    rate = percentage(part, total)
    return f"{rate:.1f}" if total > 0 else "0"


def to_report(
    records: list[ApplicationRecord],
    date_range: "DateRange | str" = DateRange.ALL,
    as_of: datetime | None = None,
) -> str:
    """Narrative plain-text report with summary counts and one block per record."""
    as_of = as_of or datetime.now()
    date_range = DateRange(date_range)
    counts = count_by_status(records)
    total = len(records)

    def n(status: Status) -> int:
        return counts.get(status, 0)

    lines = [
        "JOB APPLICATION TRACKER REPORT",
        f"Generated on: {_display_date(as_of.date())}",
        f"Date Range: {date_range.label}",
        "",
        "SUMMARY STATISTICS:",
        f"- Total Applications: {total}",
        f"- Applied: {n(Status.APPLIED)}",
        f"- Interview Stage: {n(Status.INTERVIEW)}",
        f"- Offers Received: {n(Status.OFFER)}",
        f"- Accepted: {n(Status.ACCEPTED)}",
        f"- Rejected: {n(Status.REJECTED)}",
        "",
        "SUCCESS RATES:",
        f"- Interview Rate: {_format_rate(n(Status.INTERVIEW), total)}%",
        f"- Success Rate: {_format_rate(n(Status.OFFER) + n(Status.ACCEPTED), total)}%",
        "",
        "DETAILED APPLICATIONS:",
    ]

    # Two blank lines between consecutive detail blocks
    for index, record in enumerate(records, start=1):
        if index > 1:
            lines.append("")
        lines.extend(
            [
                "",
                f"{index}. {record.company} - {record.role}",
                f"   Status: {record.status.value}",
                f"   Applied: {_display_date(record.applied_date)}",
                f"   Location: {record.location or 'Not specified'}",
                f"   Salary: {record.salary or 'Not specified'}",
                f"   Notes: {record.notes or 'No notes'}",
            ]
        )

    return "\n".join(lines).strip()


def build_export(
    records: list[ApplicationRecord],
    fmt: "ExportFormat | str",
    date_range: "DateRange | str" = DateRange.ALL,
    as_of: datetime | None = None,
) -> ExportPayload:
    """
    Filter by date range and serialize.

    Raises ExportError when the range selects nothing.
    Pure function - no I/O.
    """
    as_of = as_of or datetime.now()
    fmt = ExportFormat(fmt)
    date_range = DateRange(date_range)
    selected = filter_by_date_range(records, date_range, as_of)

    if not selected:
        raise ExportError("No applications found for the selected date range.")

    stamp = as_of.date().isoformat()
    match fmt:
        case ExportFormat.CSV:
            return ExportPayload(
                content=to_csv(selected),
                filename=f"job-applications-{stamp}.csv",
                mime_type="text/csv;charset=utf-8",
                count=len(selected),
            )
        case ExportFormat.JSON:
            return ExportPayload(
                content=to_json(selected, as_of),
                filename=f"job-applications-{stamp}.json",
                mime_type="application/json",
                count=len(selected),
            )
        case ExportFormat.REPORT:
            return ExportPayload(
                content=to_report(selected, date_range, as_of),
                filename=f"job-applications-report-{stamp}.txt",
                mime_type="text/plain",
                count=len(selected),
            )
