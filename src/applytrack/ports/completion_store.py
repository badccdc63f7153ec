"""Reminder completion set interface."""

from typing import Protocol


class CompletionStore(Protocol):
    """Interface for the locally persisted set of completed reminder ids."""

    def load(self) -> set[str]:
        ...

    def add(self, reminder_id: str) -> None:
        """Persist an id. May reset the set first once it grows too large."""
        ...

    def clear(self) -> None:
        ...
