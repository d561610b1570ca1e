"""Batch aggregator.

Single consumer of normalized movies. Records are accumulated into a batch
which is flushed to the batch writer when it reaches ``batch_size`` or when
``flush_timeout`` seconds have passed since the previous flush, whichever
comes first. Closing the result queue triggers one final flush of any
partial batch.

A failed write drops the batch: it is logged and counted, never retried.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum

from movie_harvester.etl.loaders.json import BatchWriteError
from movie_harvester.etl.pipeline.stats import PipelineStats
from movie_harvester.etl.types import BatchWriter, NormalizedMovieData

logger = logging.getLogger(__name__)

RESULTS_CLOSED = object()
"""Result queue sentinel, enqueued once every worker has exited."""


class AggregatorState(StrEnum):
    """Lifecycle of the aggregator thread."""

    IDLE = "idle"
    FLUSHING = "flushing"
    DRAINING = "draining"
    DONE = "done"


class BatchAggregator(threading.Thread):
    """Accumulates normalized movies and flushes them on size or timeout.

    The batch list is only touched by this thread, so it needs no lock;
    shared totals go through ``PipelineStats``.

    Attributes:
        state: Current lifecycle state.
        done: Event set once the final flush has completed.
    """

    def __init__(
        self,
        result_queue: "queue.Queue[object]",
        writer: BatchWriter,
        stats: PipelineStats,
        batch_size: int,
        flush_timeout: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize aggregator.

        Args:
            result_queue: Queue fed by the workers.
            writer: Durable sink for flushed batches.
            stats: Shared pipeline counters.
            batch_size: Size threshold triggering a flush.
            flush_timeout: Seconds since last flush triggering a flush.
            clock: Monotonic clock in seconds.
        """
        super().__init__(name="batch-aggregator", daemon=True)
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if flush_timeout <= 0:
            raise ValueError("flush_timeout must be > 0")

        self._result_queue = result_queue
        self._writer = writer
        self._stats = stats
        self._batch_size = batch_size
        self._flush_timeout = flush_timeout
        self._clock = clock

        self._batch: list[NormalizedMovieData] = []
        self._last_flush = clock()
        self._state = AggregatorState.IDLE
        self._done = threading.Event()

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def done(self) -> threading.Event:
        return self._done

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Signal that no more records will arrive."""
        self._result_queue.put(RESULTS_CLOSED)

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the final flush.

        Returns:
            True if the aggregator finished within ``timeout``.
        """
        return self._done.wait(timeout)

    def run(self) -> None:
        try:
            self._consume()
        finally:
            self._state = AggregatorState.DONE
            self._done.set()

    # -------------------------------------------------------------------------
    # Event loop
    # -------------------------------------------------------------------------

    def _consume(self) -> None:
        self._last_flush = self._clock()
        while True:
            remaining = self._flush_timeout - (self._clock() - self._last_flush)
            if remaining <= 0:
                self._on_timeout()
                continue

            try:
                item = self._result_queue.get(timeout=remaining)
            except queue.Empty:
                self._on_timeout()
                continue

            if item is RESULTS_CLOSED:
                self._drain()
                return

            self._batch.append(item)  # type: ignore[arg-type]
            if len(self._batch) >= self._batch_size:
                self._flush("size")

    def _on_timeout(self) -> None:
        if self._batch:
            self._flush("timeout")
        else:
            self._last_flush = self._clock()

    def _drain(self) -> None:
        self._state = AggregatorState.DRAINING
        if self._batch:
            self._flush("shutdown")
        logger.info("Result queue closed and drained, aggregator finished")

    def _flush(self, reason: str) -> None:
        """Write the current batch and start a new one.

        Args:
            reason: Trigger, for logging (size, timeout or shutdown).
        """
        previous_state = self._state
        self._state = AggregatorState.FLUSHING
        batch, self._batch = self._batch, []

        logger.info(
            f"Writing batch of {len(batch)} movies at {datetime.now():%H:%M:%S} ({reason})"
        )
        try:
            path = self._writer.write(batch)
        except BatchWriteError as e:
            logger.error(f"Dropping batch of {len(batch)} movies: {e}")
            self._stats.record_batch_dropped(len(batch))
        except Exception:
            logger.exception(f"Dropping batch of {len(batch)} movies after unexpected writer error")
            self._stats.record_batch_dropped(len(batch))
        else:
            self._stats.record_batch_written(len(batch), str(path))
            snapshot = self._stats.snapshot()
            logger.info(
                f"Batch written to {path}: {snapshot.written} written, "
                f"{snapshot.total_failures} failed so far"
            )
        finally:
            self._last_flush = self._clock()
            self._state = (
                AggregatorState.DRAINING
                if previous_state == AggregatorState.DRAINING
                else AggregatorState.IDLE
            )
