"""JSON batch file loader."""

from movie_harvester.etl.loaders.json.loader import BatchWriteError, JSONBatchWriter

__all__ = ["BatchWriteError", "JSONBatchWriter"]
