"""Polling change feed adapter - diffs store snapshots between polls."""

import logging

from applytrack.core.applications import ApplicationRecord
from applytrack.ports.application_store import ApplicationStore, Scope
from applytrack.ports.change_feed import ChangeEvent

logger = logging.getLogger(__name__)


class PollingChangeFeed:
    """
    Change feed built on repeated store reads.

    Implements ChangeFeed protocol. The first poll only records a snapshot.
    """

    def __init__(self, store: ApplicationStore, scope: Scope):
        self.store = store
        self.scope = scope
        self._snapshot: dict[str, ApplicationRecord] | None = None

    @property
    def records(self) -> list[ApplicationRecord]:
        """Records from the latest poll."""
        return list((self._snapshot or {}).values())

    def poll(self) -> list[ChangeEvent]:
        current = {r.id: r for r in self.store.list(self.scope)}
        previous = self._snapshot
        self._snapshot = current

        if previous is None:
            return []

        events = []
        for record_id, record in current.items():
            old = previous.get(record_id)
            if old is None:
                events.append(ChangeEvent("insert", record))
            elif old != record:
                events.append(ChangeEvent("update", record))
        for record_id, record in previous.items():
            if record_id not in current:
                events.append(ChangeEvent("delete", record))

        if events:
            logger.debug(f"Detected {len(events)} changes")
        return events
