"""Concurrent harvest pipeline.

Usage:
    from movie_harvester.etl.pipeline import HarvestPipeline

    pipeline = HarvestPipeline(client, TMDBNormalizer(), writer, limiter, settings.pipeline)
    result = pipeline.run(movie_ids)
"""

from movie_harvester.etl.pipeline.aggregator import AggregatorState, BatchAggregator
from movie_harvester.etl.pipeline.orchestrator import HarvestPipeline
from movie_harvester.etl.pipeline.stats import PipelineStats, StatsSnapshot
from movie_harvester.etl.pipeline.workers import WorkerPool

__all__ = [
    "AggregatorState",
    "BatchAggregator",
    "HarvestPipeline",
    "PipelineStats",
    "StatsSnapshot",
    "WorkerPool",
]
