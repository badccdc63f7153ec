"""File-based reminder completion set adapter."""

import json
import logging
from pathlib import Path

from applytrack.core.reminders import MAX_COMPLETED, prune_completions

logger = logging.getLogger(__name__)


class FileCompletionStore:
    """
    JSON file holding completed reminder ids.

    Implements CompletionStore protocol. The set is reset once it holds more
    than `limit` ids; the reset happens before an add so the newest id
    always survives it.
    """

    def __init__(self, path: Path | str, limit: int = MAX_COMPLETED):
        self.path = Path(path).expanduser()
        self.limit = limit

    def load(self) -> set[str]:
        """Read completed ids. Missing or unreadable file is an empty set."""
        if not self.path.exists():
            return set()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable completion file {self.path}: {e}")
            return set()
        if not isinstance(data, list):
            logger.warning(f"Ignoring completion file {self.path}: expected a list")
            return set()
        return {str(item) for item in data}

    def _write(self, ids: set[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(sorted(ids)))

    def add(self, reminder_id: str) -> None:
        ids = self.load()
        pruned = prune_completions(ids, self.limit)
        if len(pruned) < len(ids):
            logger.info(f"Completion set exceeded {self.limit} entries, reset")
        pruned.add(reminder_id)
        self._write(pruned)

    def clear(self) -> None:
        self._write(set())
