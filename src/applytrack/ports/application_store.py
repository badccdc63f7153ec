"""Application store interface."""

from dataclasses import dataclass
from typing import Protocol

from applytrack.core.applications import ApplicationRecord


class StoreError(Exception):
    """Raised when a store read or write fails."""

    pass


@dataclass(frozen=True)
class Scope:
    """Whose records a caller may see. Admins see every row."""

    user_id: str
    is_admin: bool = False


class ApplicationStore(Protocol):
    """Interface for the remote table of application records."""

    def list(self, scope: Scope) -> list[ApplicationRecord]:
        """Records visible to the scope, newest applied date first."""
        ...

    def create(self, fields: dict) -> ApplicationRecord:
        """Insert a record and return it as stored."""
        ...

    def update(self, record_id: str, fields: dict) -> ApplicationRecord:
        """Apply a partial update and return the stored record."""
        ...

    def delete(self, record_id: str) -> None:
        ...
