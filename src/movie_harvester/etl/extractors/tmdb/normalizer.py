"""TMDB data normalizer.

Transforms raw ``/movie/{id}`` responses (with ``release_dates`` and
``credits`` appended) into fixed-schema records ready to be written.
Only the movie ID is mandatory; every other field falls back to its empty
value when absent or of the wrong type.
"""

import logging
from typing import Any

from movie_harvester.etl.types import (
    ActorData,
    CountryData,
    DirectorData,
    LocalReleaseDateData,
    NormalizedMovieData,
    ReleaseData,
    TMDBRawMovie,
)
from movie_harvester.etl.utils.json_fields import (
    as_int,
    get_float,
    get_int,
    get_list,
    get_object,
    get_optional_str,
    get_str,
    iter_objects,
)

logger = logging.getLogger(__name__)


class NormalizeSchemaError(Exception):
    """Raised when a raw document lacks a usable movie ID."""

    pass


class TMDBNormalizer:
    """Normalizes TMDB movie documents.

    Sub-sections are normalized independently so a malformed section only
    empties that section, never the whole record.
    """

    # Credits filters
    DIRECTOR_JOB = "Director"
    MAX_ACTOR_ORDER = 5

    # -------------------------------------------------------------------------
    # Movie Normalization
    # -------------------------------------------------------------------------

    def normalize_movie(self, raw: TMDBRawMovie) -> NormalizedMovieData:
        """Normalize a TMDB movie document.

        Args:
            raw: Decoded response body.

        Returns:
            Normalized movie record.

        Raises:
            NormalizeSchemaError: If the document or its ID is unusable.
        """
        if not isinstance(raw, dict):
            raise NormalizeSchemaError(f"Expected a JSON object, got {type(raw).__name__}")

        movie_id = as_int(raw.get("id"))
        if movie_id is None or movie_id <= 0:
            raise NormalizeSchemaError(f"Missing or invalid movie id: {raw.get('id')!r}")

        credits = get_object(raw, "credits") or {}

        return NormalizedMovieData(
            id=movie_id,
            original_language=get_str(raw, "original_language"),
            original_title=get_str(raw, "original_title"),
            title=get_str(raw, "title"),
            poster_path=get_optional_str(raw, "poster_path"),
            popularity=get_float(raw, "popularity"),
            runtime=get_int(raw, "runtime"),
            budget=get_int(raw, "budget"),
            release_date=get_str(raw, "release_date"),
            release_dates=self.normalize_release_dates(raw.get("release_dates")),
            genres=self.normalize_genres(get_list(raw, "genres")),
            production_countries=self.normalize_countries(get_list(raw, "production_countries")),
            actors=self.extract_actors(get_list(credits, "cast")),
            directors=self.extract_directors(get_list(credits, "crew")),
        )

    # -------------------------------------------------------------------------
    # Release Dates
    # -------------------------------------------------------------------------

    def normalize_release_dates(self, section: Any) -> list[ReleaseData]:
        """Normalize the appended ``release_dates`` section.

        Expected shape: ``{"results": [{"iso_3166_1": "US", "release_dates": [...]}]}``.
        A country group whose date list is not a list is dropped; a malformed
        entry inside a group is dropped on its own.

        Args:
            section: Raw ``release_dates`` value, any type.

        Returns:
            One entry per usable country group, in source order.
        """
        if not isinstance(section, dict):
            return []

        releases: list[ReleaseData] = []
        for group in iter_objects(get_list(section, "results")):
            entries = get_list(group, "release_dates")
            if entries is None:
                logger.debug(f"Skipping release group without date list: {group.get('iso_3166_1')!r}")
                continue

            local_dates = [
                parsed
                for parsed in (self._parse_local_release_date(entry) for entry in entries)
                if parsed is not None
            ]
            releases.append(
                ReleaseData(
                    iso_3166_1=get_str(group, "iso_3166_1"),
                    local_release_dates=local_dates,
                )
            )
        return releases

    @staticmethod
    def _parse_local_release_date(entry: Any) -> LocalReleaseDateData | None:
        """Parse one dated release, or None when malformed.

        ``release_date`` (string) and ``type`` (integer) are required;
        ``note`` defaults to an empty string.
        """
        if not isinstance(entry, dict):
            return None
        release_date = entry.get("release_date")
        release_type = as_int(entry.get("type"))
        if not isinstance(release_date, str) or release_type is None:
            return None
        return LocalReleaseDateData(
            note=get_str(entry, "note"),
            release_date=release_date,
            type=release_type,
        )

    # -------------------------------------------------------------------------
    # Genres & Countries
    # -------------------------------------------------------------------------

    @staticmethod
    def normalize_genres(raw_genres: list[Any] | None) -> list[int]:
        """Keep genre IDs only, in source order, without duplicates."""
        genre_ids: list[int] = []
        for genre in iter_objects(raw_genres):
            genre_id = as_int(genre.get("id"))
            if genre_id is not None and genre_id not in genre_ids:
                genre_ids.append(genre_id)
        return genre_ids

    @staticmethod
    def normalize_countries(raw_countries: list[Any] | None) -> list[CountryData]:
        """Normalize production countries, skipping entries without code or name."""
        countries: list[CountryData] = []
        for country in iter_objects(raw_countries):
            code = country.get("iso_3166_1")
            name = country.get("name")
            if isinstance(code, str) and isinstance(name, str):
                countries.append(CountryData(iso_3166_1=code, name=name))
        return countries

    # -------------------------------------------------------------------------
    # Credits
    # -------------------------------------------------------------------------

    def extract_actors(self, cast: list[Any] | None) -> list[ActorData]:
        """Extract lead actors, i.e. cast entries with billing order 0-4.

        The filter is on the ``order`` value, not a count: sparse or
        duplicated orders can yield fewer or more than five entries.

        Args:
            cast: Raw ``credits.cast`` list.

        Returns:
            Lead actors in source order.
        """
        actors: list[ActorData] = []
        for member in iter_objects(cast):
            order = as_int(member.get("order"))
            if order is None or not 0 <= order < self.MAX_ACTOR_ORDER:
                continue
            actors.append(
                ActorData(
                    id=get_int(member, "id"),
                    name=get_str(member, "name"),
                    order=order,
                )
            )
        return actors

    def extract_directors(self, crew: list[Any] | None) -> list[DirectorData]:
        """Extract crew members whose job is exactly ``Director``."""
        return [
            DirectorData(id=get_int(member, "id"), name=get_str(member, "name"))
            for member in iter_objects(crew)
            if member.get("job") == self.DIRECTOR_JOB
        ]
