"""Thread-safe harvest counters.

Workers, the aggregator and any progress reporter touch these counters from
different threads, so every mutation and every read goes through one lock.
"""

import threading
from collections import Counter
from dataclasses import dataclass, field


@dataclass(frozen=True)
class StatsSnapshot:
    """Consistent point-in-time copy of the pipeline counters.

    Attributes:
        queued: Identifiers handed to the work queue.
        fetched: Raw documents received from TMDB.
        normalized: Records forwarded to the aggregator.
        written: Records persisted in batch files.
        dropped: Records lost to failed batch writes.
        batches: Batch files written.
        failures: Per-record failure counts by category.
        files: Written batch file paths, in flush order.
    """

    queued: int = 0
    fetched: int = 0
    normalized: int = 0
    written: int = 0
    dropped: int = 0
    batches: int = 0
    failures: dict[str, int] = field(default_factory=dict)
    files: tuple[str, ...] = ()

    @property
    def total_failures(self) -> int:
        return sum(self.failures.values())

    @property
    def pending(self) -> int:
        """Normalized records not yet written nor dropped."""
        return self.normalized - self.written - self.dropped


class PipelineStats:
    """Mutex-protected counters shared across pipeline threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._queued = 0
        self._fetched = 0
        self._normalized = 0
        self._written = 0
        self._dropped = 0
        self._batches = 0
        self._failures: Counter[str] = Counter()
        self._files: list[str] = []

    def record_queued(self) -> None:
        with self._lock:
            self._queued += 1

    def record_fetched(self) -> None:
        with self._lock:
            self._fetched += 1

    def record_normalized(self) -> None:
        with self._lock:
            self._normalized += 1

    def record_failure(self, category: str) -> None:
        """Count one dropped identifier under ``category``."""
        with self._lock:
            self._failures[category] += 1

    def record_batch_written(self, size: int, path: str) -> None:
        with self._lock:
            self._written += size
            self._batches += 1
            self._files.append(path)

    def record_batch_dropped(self, size: int) -> None:
        with self._lock:
            self._dropped += size

    def snapshot(self) -> StatsSnapshot:
        """Return a consistent copy of every counter."""
        with self._lock:
            return StatsSnapshot(
                queued=self._queued,
                fetched=self._fetched,
                normalized=self._normalized,
                written=self._written,
                dropped=self._dropped,
                batches=self._batches,
                failures=dict(self._failures),
                files=tuple(self._files),
            )
