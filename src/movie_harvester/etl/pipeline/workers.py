"""Fetch-and-normalize worker pool.

Each worker thread loops over the shared work queue: wait for a rate token,
fetch the movie, normalize it and hand it to the aggregator. Any per-movie
failure is logged and counted, and the identifier is dropped. Nothing is
retried.
"""

import logging
import queue
import threading

from movie_harvester.etl.extractors.tmdb import (
    FetchDecodeError,
    FetchStatusError,
    FetchTransportError,
    NormalizeSchemaError,
    RateLimitCancelled,
    RateLimiter,
)
from movie_harvester.etl.pipeline.stats import PipelineStats
from movie_harvester.etl.types import MovieFetcher, MovieNormalizer, NormalizedMovieData

logger = logging.getLogger(__name__)

WORK_DONE = object()
"""Work queue sentinel, one per worker, enqueued after the last identifier."""

# Failure categories, as reported in the run summary
FAILURE_RATE_LIMIT = "rate_limit_cancelled"
FAILURE_TRANSPORT = "fetch_transport"
FAILURE_STATUS = "fetch_status"
FAILURE_DECODE = "fetch_decode"
FAILURE_SCHEMA = "normalize_schema"
FAILURE_UNEXPECTED = "unexpected"

_RECOVERABLE_ERRORS: tuple[tuple[type[Exception], str], ...] = (
    (RateLimitCancelled, FAILURE_RATE_LIMIT),
    (FetchTransportError, FAILURE_TRANSPORT),
    (FetchStatusError, FAILURE_STATUS),
    (FetchDecodeError, FAILURE_DECODE),
    (NormalizeSchemaError, FAILURE_SCHEMA),
)
_RECOVERABLE_TYPES = tuple(error_type for error_type, _ in _RECOVERABLE_ERRORS)


def failure_category(error: Exception) -> str:
    """Map a per-movie exception to its summary category."""
    for error_type, category in _RECOVERABLE_ERRORS:
        if isinstance(error, error_type):
            return category
    return FAILURE_UNEXPECTED


class HarvestWorker(threading.Thread):
    """One fetch-and-normalize unit of the pool."""

    def __init__(
        self,
        index: int,
        work_queue: "queue.Queue[object]",
        result_queue: "queue.Queue[object]",
        limiter: RateLimiter,
        fetcher: MovieFetcher,
        normalizer: MovieNormalizer,
        stats: PipelineStats,
        cancel: threading.Event,
        acquire_timeout: float | None = None,
    ) -> None:
        super().__init__(name=f"harvest-worker-{index}", daemon=True)
        self._work_queue = work_queue
        self._result_queue = result_queue
        self._limiter = limiter
        self._fetcher = fetcher
        self._normalizer = normalizer
        self._stats = stats
        self._cancel = cancel
        self._acquire_timeout = acquire_timeout

    def run(self) -> None:
        """Process identifiers until this worker's sentinel is received."""
        while True:
            movie_id = self._work_queue.get()
            if movie_id is WORK_DONE:
                return
            movie = self._harvest(movie_id)
            if movie is not None:
                self._stats.record_normalized()
                # Blocks while the aggregator is behind; this is the back-pressure path
                self._result_queue.put(movie)

    def _harvest(self, movie_id: int) -> NormalizedMovieData | None:
        """Rate-gate, fetch and normalize one movie.

        Returns:
            Normalized movie, or None when the identifier was dropped.
        """
        try:
            self._limiter.acquire(cancel=self._cancel, timeout=self._acquire_timeout)
            raw = self._fetcher.get_movie_full(movie_id)
            self._stats.record_fetched()
            return self._normalizer.normalize_movie(raw)
        except _RECOVERABLE_TYPES as e:
            category = failure_category(e)
            logger.warning(f"Skipping movie {movie_id} [{category}]: {e}")
            self._stats.record_failure(category)
        except Exception:
            logger.exception(f"Skipping movie {movie_id} [{FAILURE_UNEXPECTED}]")
            self._stats.record_failure(FAILURE_UNEXPECTED)
        return None


class WorkerPool:
    """Fixed-size pool of harvest workers sharing one work queue."""

    def __init__(
        self,
        size: int,
        work_queue: "queue.Queue[object]",
        result_queue: "queue.Queue[object]",
        limiter: RateLimiter,
        fetcher: MovieFetcher,
        normalizer: MovieNormalizer,
        stats: PipelineStats,
        cancel: threading.Event,
        acquire_timeout: float | None = None,
    ) -> None:
        if size < 1:
            raise ValueError("Worker pool size must be >= 1")
        self._size = size
        self._work_queue = work_queue
        self._closed = False
        self._workers = [
            HarvestWorker(
                index,
                work_queue,
                result_queue,
                limiter,
                fetcher,
                normalizer,
                stats,
                cancel,
                acquire_timeout,
            )
            for index in range(size)
        ]

    def start(self) -> None:
        for worker in self._workers:
            worker.start()
        logger.debug(f"Started {self._size} harvest workers")

    def close(self) -> None:
        """Close the work queue: workers exit once the queued ids are drained."""
        if self._closed:
            return
        self._closed = True
        for _ in range(self._size):
            self._work_queue.put(WORK_DONE)

    def join(self) -> None:
        """Wait for every worker to exit."""
        for worker in self._workers:
            worker.join()
