"""Pure filter/sort logic for displaying applications - no I/O dependencies."""

from enum import Enum

from .applications import ApplicationRecord, Status


class SortKey(Enum):
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    COMPANY = "company"
    STATUS = "status"


ALL_STATUSES = "all"


def matches_query(record: ApplicationRecord, query: str) -> bool:
    """Case-insensitive substring match on company or role."""
    needle = query.lower()
    return needle in record.company.lower() or needle in record.role.lower()


def filter_by_status(
    records: list[ApplicationRecord], status: "Status | str"
) -> list[ApplicationRecord]:
    if status == ALL_STATUSES:
        return list(records)
    wanted = Status.parse(status)
    return [r for r in records if r.status == wanted]


def sort_records(
    records: list[ApplicationRecord], sort: "SortKey | str" = SortKey.DATE_DESC
) -> list[ApplicationRecord]:
    """
    Stable sort by the given key.

    Equal dates keep their original relative order in both directions.
    """
    sort = SortKey(sort)
    match sort:
        case SortKey.DATE_DESC:
            return sorted(records, key=lambda r: -r.applied_date.toordinal())
        case SortKey.DATE_ASC:
            return sorted(records, key=lambda r: r.applied_date)
        case SortKey.COMPANY:
            return sorted(records, key=lambda r: r.company)
        case SortKey.STATUS:
            return sorted(records, key=lambda r: r.status.value)


def filter_and_sort(
    records: list[ApplicationRecord],
    query: str = "",
    status: "Status | str" = ALL_STATUSES,
    sort: "SortKey | str" = SortKey.DATE_DESC,
) -> list[ApplicationRecord]:
    """
    Filtered, ordered view of records for display.

    Pure function - no I/O.
    """
    matching = [r for r in filter_by_status(records, status) if matches_query(r, query)]
    return sort_records(matching, sort)
