"""Export sink interface."""

from typing import Protocol

from applytrack.core.export import ExportPayload


class ExportSink(Protocol):
    """Interface for delivering a serialized export."""

    def deliver(self, payload: ExportPayload) -> str:
        """Deliver the payload. Returns where it went (path, URL, ...)."""
        ...
