"""Pure aggregation logic over application records - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .applications import ApplicationRecord, Status

RECENT_WINDOW_DAYS = 30
TOP_COMPANIES_LIMIT = 5


@dataclass
class ApplicationStats:
    """Aggregate statistics for a collection of applications."""

    total: int = 0
    status_counts: dict[Status, int] = field(default_factory=dict)
    conversion_rate: float = 0.0
    success_rate: float = 0.0
    rejection_rate: float = 0.0
    recent_count: int = 0
    avg_per_week: float = 0.0
    top_companies: list[tuple[str, int]] = field(default_factory=list)

    def count(self, status: Status) -> int:
        """Count for a status; statuses with no records are absent from status_counts."""
        return self.status_counts.get(status, 0)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "statusCounts": {s.value: n for s, n in self.status_counts.items()},
            "conversionRate": self.conversion_rate,
            "successRate": self.success_rate,
            "rejectionRate": self.rejection_rate,
            "recentCount": self.recent_count,
            "avgPerWeek": self.avg_per_week,
            "topCompanies": [[company, n] for company, n in self.top_companies],
        }


def count_by_status(records: list[ApplicationRecord]) -> dict[Status, int]:
    """Count records per status, only for statuses that occur."""
    counts: dict[Status, int] = {}
    for record in records:
        counts[record.status] = counts.get(record.status, 0) + 1
    return counts


def percentage(part: int, total: int) -> float:
    """100 * part / total, or 0 when total is 0."""
    if total == 0:
        return 0.0
    return part / total * 100


def top_companies(
    records: list[ApplicationRecord], limit: int = TOP_COMPANIES_LIMIT
) -> list[tuple[str, int]]:
    """
    Most frequent companies by exact name.

    Ties keep first-encounter order (dicts preserve insertion, sorted is stable).
    """
    counts: dict[str, int] = {}
    for record in records:
        counts[record.company] = counts.get(record.company, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return ranked[:limit]


def count_recent(
    records: list[ApplicationRecord],
    days: int = RECENT_WINDOW_DAYS,
    as_of: datetime | None = None,
) -> int:
    """Count records applied on or after the cutoff date."""
    as_of = as_of or datetime.now()
    cutoff = as_of.date() - timedelta(days=days)
    return sum(1 for r in records if r.applied_date >= cutoff)


def compute_stats(
    records: list[ApplicationRecord],
    as_of: datetime | None = None,
) -> ApplicationStats:
    """
    Compute dashboard statistics.

    Pure function - no I/O. Rates are percentages in [0, 100]. The weekly
    average always divides the 30-day count by 4.
    """
    as_of = as_of or datetime.now()
    total = len(records)
    counts = count_by_status(records)
    recent = count_recent(records, as_of=as_of)

    return ApplicationStats(
        total=total,
        status_counts=counts,
        conversion_rate=percentage(counts.get(Status.INTERVIEW, 0), total),
        success_rate=percentage(
            counts.get(Status.OFFER, 0) + counts.get(Status.ACCEPTED, 0), total
        ),
        rejection_rate=percentage(counts.get(Status.REJECTED, 0), total),
        recent_count=recent,
        avg_per_week=recent / 4,
        top_companies=top_companies(records),
    )
