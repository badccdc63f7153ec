"""Functional core - pure business logic with no I/O."""

from .applications import ApplicationRecord, Status, ValidationError, validate_fields
from .analytics import ApplicationStats, compute_stats
from .reminders import Reminder, ReminderType, Priority, build_reminders, completion_updates
from .listing import SortKey, filter_and_sort
from .export import DateRange, ExportFormat, ExportError, ExportPayload, build_export

__all__ = [
    # Applications
    "ApplicationRecord",
    "Status",
    "ValidationError",
    "validate_fields",
    # Analytics
    "ApplicationStats",
    "compute_stats",
    # Reminders
    "Reminder",
    "ReminderType",
    "Priority",
    "build_reminders",
    "completion_updates",
    # Listing
    "SortKey",
    "filter_and_sort",
    # Export
    "DateRange",
    "ExportFormat",
    "ExportError",
    "ExportPayload",
    "build_export",
]
