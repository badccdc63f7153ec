"""Change notification interface."""

from dataclasses import dataclass
from typing import Protocol

from applytrack.core.applications import ApplicationRecord


@dataclass
class ChangeEvent:
    kind: str  # insert | update | delete
    record: ApplicationRecord


class ChangeFeed(Protocol):
    """Interface for learning that records changed, used to trigger recomputation."""

    def poll(self) -> list[ChangeEvent]:
        """Events since the previous poll. No ordering guarantee."""
        ...
