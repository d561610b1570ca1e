"""TMDB movie data types.

TypedDict definitions for the fixed-schema movie records written to the
batch files. Raw API responses are kept as plain ``dict[str, Any]`` and are
only read through ``movie_harvester.etl.utils.json_fields``.
"""

from typing import Any, TypedDict

TMDBRawMovie = dict[str, Any]
"""Decoded ``/movie/{id}`` response body, shape not trusted."""


class LocalReleaseDateData(TypedDict):
    """One dated release inside a country group."""

    note: str
    release_date: str
    type: int


class ReleaseData(TypedDict):
    """Release dates of a movie for a single country."""

    iso_3166_1: str
    local_release_dates: list[LocalReleaseDateData]


class CountryData(TypedDict):
    """Production country."""

    iso_3166_1: str
    name: str


class ActorData(TypedDict):
    """Lead cast member, ``order`` is the zero-based billing rank."""

    id: int
    name: str
    order: int


class DirectorData(TypedDict):
    """Crew member credited with the ``Director`` job."""

    id: int
    name: str


class NormalizedMovieData(TypedDict):
    """Movie record as persisted in batch files.

    ``poster_path`` is None when TMDB has no poster; every list defaults to
    empty when its source section is missing or malformed.
    """

    id: int
    original_language: str
    original_title: str
    title: str
    poster_path: str | None
    popularity: float
    runtime: int
    budget: int
    release_date: str
    release_dates: list[ReleaseData]
    genres: list[int]
    production_countries: list[CountryData]
    actors: list[ActorData]
    directors: list[DirectorData]
