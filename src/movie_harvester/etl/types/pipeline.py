"""Harvest pipeline data types.

Protocols for the pipeline's pluggable collaborators and the TypedDict
returned once a run has drained.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import NotRequired, Protocol, TypedDict

from movie_harvester.etl.types.tmdb import NormalizedMovieData, TMDBRawMovie


class MovieFetcher(Protocol):
    """Fetches one raw movie document by identifier."""

    def get_movie_full(self, movie_id: int) -> TMDBRawMovie: ...


class MovieNormalizer(Protocol):
    """Converts a raw movie document into the fixed schema."""

    def normalize_movie(self, raw: TMDBRawMovie) -> NormalizedMovieData: ...


class BatchWriter(Protocol):
    """Durably writes one batch, raising ``BatchWriteError`` on failure."""

    def write(self, batch: Sequence[NormalizedMovieData]) -> Path: ...


class HarvestResult(TypedDict):
    """Result of a harvest run."""

    success: bool
    queued: int
    fetched: int
    normalized: int
    written: int
    dropped: int
    batches: int
    failures: dict[str, int]
    duration_seconds: float
    files: NotRequired[list[str]]
