"""ETL loaders package.

Provides the durable sink for flushed batches.
"""

from movie_harvester.etl.loaders.json import BatchWriteError, JSONBatchWriter

__all__ = [
    "BatchWriteError",
    "JSONBatchWriter",
]
