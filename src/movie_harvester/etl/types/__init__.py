"""ETL data types package.

Usage:
    from movie_harvester.etl.types import NormalizedMovieData, HarvestResult
"""

from movie_harvester.etl.types.pipeline import (
    BatchWriter,
    HarvestResult,
    MovieFetcher,
    MovieNormalizer,
)
from movie_harvester.etl.types.tmdb import (
    ActorData,
    CountryData,
    DirectorData,
    LocalReleaseDateData,
    NormalizedMovieData,
    ReleaseData,
    TMDBRawMovie,
)

__all__ = [
    # TMDB
    "TMDBRawMovie",
    "NormalizedMovieData",
    "ReleaseData",
    "LocalReleaseDateData",
    "CountryData",
    "ActorData",
    "DirectorData",
    # Pipeline
    "MovieFetcher",
    "MovieNormalizer",
    "BatchWriter",
    "HarvestResult",
]
