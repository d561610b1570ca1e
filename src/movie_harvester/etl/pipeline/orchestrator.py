"""Harvest pipeline orchestrator.

Wires the work queue, worker pool, result queue and aggregator together
and sequences a run:

1. start the workers, then the aggregator;
2. enqueue every identifier, then close the work queue;
3. wait for all workers, close the result queue, wait for the final flush
   (bounded by ``shutdown_timeout``).

Both queues are bounded: a full work queue slows the feed, a full result
queue blocks workers until the aggregator catches up.
"""

import logging
import queue
import threading
from collections.abc import Iterable
from datetime import datetime

from movie_harvester.etl.extractors.tmdb import RateLimiter
from movie_harvester.etl.pipeline.aggregator import BatchAggregator
from movie_harvester.etl.pipeline.stats import PipelineStats, StatsSnapshot
from movie_harvester.etl.pipeline.workers import WorkerPool
from movie_harvester.etl.types import BatchWriter, HarvestResult, MovieFetcher, MovieNormalizer
from movie_harvester.settings import PipelineSettings

logger = logging.getLogger(__name__)


class HarvestPipeline:
    """Runs one bulk harvest over a list of movie identifiers.

    Every collaborator is injected; the pipeline only owns the queues, the
    threads and the cancellation event.

    Attributes:
        stats: Live counters, safe to read from any thread.
    """

    def __init__(
        self,
        fetcher: MovieFetcher,
        normalizer: MovieNormalizer,
        writer: BatchWriter,
        limiter: RateLimiter,
        pipeline_settings: PipelineSettings,
    ) -> None:
        """Initialize pipeline.

        Args:
            fetcher: Raw movie source, shared by all workers.
            normalizer: Raw to fixed-schema converter.
            writer: Durable sink for batches.
            limiter: Process-wide rate limiter.
            pipeline_settings: Pool, batch and queue sizing.
        """
        self._fetcher = fetcher
        self._normalizer = normalizer
        self._writer = writer
        self._limiter = limiter
        self._settings = pipeline_settings
        self._stats = PipelineStats()
        self._cancel = threading.Event()

    @property
    def stats(self) -> PipelineStats:
        return self._stats

    def cancel(self) -> None:
        """Abandon identifiers still waiting for a rate token and stop feeding.

        The pipeline still drains and performs its final flush.
        """
        if not self._cancel.is_set():
            logger.warning("Harvest cancelled, pending movies will be skipped")
        self._cancel.set()

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def run(self, movie_ids: Iterable[int]) -> HarvestResult:
        """Harvest every identifier and return the run summary.

        Args:
            movie_ids: Identifiers to fetch, duplicates included.

        Returns:
            HarvestResult; ``success`` is False only when the final flush did
            not complete within ``shutdown_timeout``.
        """
        started_at = datetime.now()
        logger.info(
            f"Started harvesting at {started_at:%H:%M:%S} with {self._settings.workers} workers, "
            f"{self._limiter.rate:g} req/s (burst {self._limiter.burst})"
        )

        work_queue: queue.Queue[object] = queue.Queue(maxsize=self._settings.work_queue_size)
        result_queue: queue.Queue[object] = queue.Queue(maxsize=self._settings.result_queue_size)

        pool = WorkerPool(
            size=self._settings.workers,
            work_queue=work_queue,
            result_queue=result_queue,
            limiter=self._limiter,
            fetcher=self._fetcher,
            normalizer=self._normalizer,
            stats=self._stats,
            cancel=self._cancel,
            acquire_timeout=self._settings.acquire_timeout,
        )
        aggregator = BatchAggregator(
            result_queue=result_queue,
            writer=self._writer,
            stats=self._stats,
            batch_size=self._settings.batch_size,
            flush_timeout=self._settings.flush_timeout,
        )

        pool.start()
        aggregator.start()

        try:
            self._feed(work_queue, movie_ids)
            pool.close()
            pool.join()
        except KeyboardInterrupt:
            self.cancel()
            pool.close()
            pool.join()

        aggregator.close()
        try:
            drained = aggregator.wait(self._settings.shutdown_timeout)
        except KeyboardInterrupt:
            # The final flush is still running; a second interrupt aborts it
            self.cancel()
            drained = aggregator.wait(self._settings.shutdown_timeout)
        if not drained:
            logger.error(
                f"Aggregator did not finish within {self._settings.shutdown_timeout:g}s, "
                "the last partial batch may be lost"
            )

        duration = (datetime.now() - started_at).total_seconds()
        return self._build_result(self._stats.snapshot(), drained, duration)

    def _feed(self, work_queue: "queue.Queue[object]", movie_ids: Iterable[int]) -> None:
        """Enqueue identifiers until exhausted or cancelled."""
        for movie_id in movie_ids:
            if self._cancel.is_set():
                logger.warning(
                    f"Stopped feeding after {self._stats.snapshot().queued} movies (cancelled)"
                )
                return
            work_queue.put(movie_id)
            self._stats.record_queued()
        logger.info(f"All {self._stats.snapshot().queued} movie ids queued")

    @staticmethod
    def _build_result(snapshot: StatsSnapshot, drained: bool, duration: float) -> HarvestResult:
        logger.info(
            f"Harvest finished in {duration:.2f}s: {snapshot.queued} queued, "
            f"{snapshot.fetched} fetched, {snapshot.normalized} normalized, "
            f"{snapshot.written} written in {snapshot.batches} batches, "
            f"{snapshot.dropped} dropped, {snapshot.pending} unflushed, "
            f"failures={snapshot.failures}"
        )
        return HarvestResult(
            success=drained,
            queued=snapshot.queued,
            fetched=snapshot.fetched,
            normalized=snapshot.normalized,
            written=snapshot.written,
            dropped=snapshot.dropped,
            batches=snapshot.batches,
            failures=snapshot.failures,
            duration_seconds=duration,
            files=list(snapshot.files),
        )
