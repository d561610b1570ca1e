"""Extractors package: identifier source and TMDB movie fetching."""

from movie_harvester.etl.extractors.movie_ids import MovieIdFileError, read_movie_ids

__all__ = ["MovieIdFileError", "read_movie_ids"]
