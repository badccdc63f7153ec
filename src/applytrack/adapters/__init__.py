"""Adapters - I/O implementations of ports."""

from .supabase_api import SupabaseStore, AuthenticationError, authenticate
from .file_completions import FileCompletionStore
from .resend_email import ResendEmailNotifier
from .file_export import FileExportSink
from .polling_feed import PollingChangeFeed

__all__ = [
    "SupabaseStore",
    "AuthenticationError",
    "authenticate",
    "FileCompletionStore",
    "ResendEmailNotifier",
    "FileExportSink",
    "PollingChangeFeed",
]
