"""TMDB API configuration settings."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TMDBSettings(BaseSettings):
    """TMDB API configuration.

    Attributes:
        access_token: TMDB v4 read access token (required at run time).
        base_url: TMDB API base URL.
        language: Language for API responses.
        append_to_response: Sub-resources fetched with each movie.
        requests_per_second: Steady outbound request rate.
        burst: Token bucket capacity.
        request_timeout: HTTP timeout in seconds.
    """

    access_token: str = Field(
        default="",
        validation_alias=AliasChoices("TMDB_ACCESS_TOKEN", "API_ACCESS_TOKEN"),
    )
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        alias="TMDB_BASE_URL",
    )
    language: str = Field(default="en-US", alias="TMDB_LANGUAGE")
    append_to_response: str = Field(
        default="release_dates,credits",
        alias="TMDB_APPEND_TO_RESPONSE",
    )

    # Rate limiting
    requests_per_second: float = Field(default=50.0, gt=0, alias="TMDB_REQUESTS_PER_SECOND")
    burst: int = Field(default=1, ge=1, alias="TMDB_BURST")

    request_timeout: float = Field(default=30.0, gt=0, alias="TMDB_REQUEST_TIMEOUT")
    user_agent: str = Field(
        default="movie-harvester/1.0",
        alias="USER_AGENT",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if TMDB access token is configured."""
        return bool(self.access_token and self.access_token != "your_access_token_here")
