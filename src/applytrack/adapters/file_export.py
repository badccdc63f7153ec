"""File-based export sink adapter."""

import logging
from pathlib import Path

from applytrack.core.export import ExportError, ExportPayload

logger = logging.getLogger(__name__)


class FileExportSink:
    """Writes exports into a directory. Implements ExportSink protocol."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def deliver(self, payload: ExportPayload) -> str:
        path = self.directory / payload.filename
        tmp = path.with_name(f".{payload.filename}.part")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(payload.content, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise ExportError(f"Could not write {path}: {e}") from e

        logger.info(f"Exported {payload.count} applications to {path}")
        return str(path)
