"""TMDB extractor package.

Classes:
    TMDBClient: HTTP client for the movie endpoint.
    TMDBNormalizer: Raw document to fixed schema.
    RateLimiter: Process-wide token bucket.

Exceptions:
    TMDBClientError: Base client error.
    FetchTransportError: Network failure.
    FetchStatusError: Non-200 response.
    FetchDecodeError: Body is not a JSON object.
    NormalizeSchemaError: Document without usable ID.
    RateLimitCancelled: Token wait abandoned.

Usage:
    from movie_harvester.etl.extractors.tmdb import TMDBClient, TMDBNormalizer

    with TMDBClient(settings.tmdb) as client:
        movie = TMDBNormalizer().normalize_movie(client.get_movie_full(550))
"""

from movie_harvester.etl.extractors.tmdb.client import (
    FetchDecodeError,
    FetchStatusError,
    FetchTransportError,
    TMDBClient,
    TMDBClientError,
)
from movie_harvester.etl.extractors.tmdb.normalizer import (
    NormalizeSchemaError,
    TMDBNormalizer,
)
from movie_harvester.etl.extractors.tmdb.rate_limiter import RateLimitCancelled, RateLimiter

__all__ = [
    "TMDBClient",
    "TMDBNormalizer",
    "RateLimiter",
    "TMDBClientError",
    "FetchTransportError",
    "FetchStatusError",
    "FetchDecodeError",
    "NormalizeSchemaError",
    "RateLimitCancelled",
]
