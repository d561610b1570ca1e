"""JSON batch file loader.

Writes each flushed batch of normalized movies to its own JSON file. Files
are write-once: a name is never reused, and an existing file is truncated
rather than appended to.
"""

import json
import logging
import threading
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from movie_harvester.etl.types import NormalizedMovieData

logger = logging.getLogger(__name__)


class BatchWriteError(Exception):
    """Raised when a batch cannot be durably written."""

    pass


class JSONBatchWriter:
    """Writes batches as JSON arrays named by flush timestamp.

    File names follow ``<prefix>_<YYYYmmdd-HHMMSS-ffffff>_<seq>.json``. The
    sequence number keeps names distinct when two flushes share a timestamp.
    A failed write leaves no file behind.
    """

    def __init__(self, output_dir: Path, prefix: str = "processed_movies") -> None:
        """Initialize writer.

        Args:
            output_dir: Directory for batch files, created on first write.
            prefix: File name prefix.
        """
        self._output_dir = output_dir
        self._prefix = prefix
        self._sequence = 0
        self._lock = threading.Lock()

    def write(self, batch: Sequence[NormalizedMovieData]) -> Path:
        """Write a batch to a new JSON file.

        Args:
            batch: Normalized movies to persist.

        Returns:
            Path of the written file.

        Raises:
            BatchWriteError: On any filesystem or serialization failure.
        """
        path = self._build_path()
        try:
            payload = json.dumps(list(batch), ensure_ascii=False)
            self._output_dir.mkdir(parents=True, exist_ok=True)
            self._write_json(path, payload)
        except (OSError, TypeError, ValueError) as e:
            self._discard(path)
            raise BatchWriteError(f"Failed to write {len(batch)} movies to {path}: {e}") from e

        logger.debug(f"Batch file written: {path.name}")
        return path

    def _build_path(self) -> Path:
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        return self._output_dir / f"{self._prefix}_{timestamp}_{sequence:06d}.json"

    @staticmethod
    def _write_json(path: Path, payload: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)

    @staticmethod
    def _discard(path: Path) -> None:
        """Remove a partially written batch file, if any."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove partial batch file {path}: {e}")
