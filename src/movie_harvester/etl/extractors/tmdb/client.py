"""TMDB API client.

Handles HTTP communication with The Movie Database API: bearer
authentication, request building and classification of failures. The
client performs no retries and no rate limiting of its own; pacing is the
caller's job through the shared ``RateLimiter``.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

from movie_harvester.etl.types import TMDBRawMovie
from movie_harvester.settings import TMDBSettings

logger = logging.getLogger(__name__)


class TMDBClientError(Exception):
    """Base exception for TMDB client errors."""

    pass


class FetchTransportError(TMDBClientError):
    """Raised on network or transport failure (DNS, connect, timeout, reset)."""

    pass


class FetchStatusError(TMDBClientError):
    """Raised when TMDB answers with a non-200 status code."""

    def __init__(self, status_code: int, endpoint: str) -> None:
        super().__init__(f"TMDB API error {status_code}: {endpoint}")
        self.status_code = status_code
        self.endpoint = endpoint


class FetchDecodeError(TMDBClientError):
    """Raised when the response body is not a JSON object."""

    pass


class TMDBClient:
    """Thread-safe HTTP client for the TMDB movie endpoint.

    One instance is shared by all workers; the underlying ``httpx.Client``
    pools connections across threads.
    """

    def __init__(
        self,
        tmdb_settings: TMDBSettings,
        max_connections: int = 100,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize TMDB client.

        Args:
            tmdb_settings: TMDB configuration (token, URL, language).
            max_connections: Connection pool size, usually the worker count.
            transport: Optional transport override, used by tests.
        """
        self._settings = tmdb_settings
        self._max_connections = max_connections
        self._transport = transport
        self._client: httpx.Client | None = None

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    def __enter__(self) -> "TMDBClient":
        """Enter context and create HTTP client."""
        self._client = httpx.Client(
            base_url=self._settings.base_url,
            timeout=self._settings.request_timeout,
            headers={
                "accept": "application/json",
                "Authorization": f"Bearer {self._settings.access_token}",
                "User-Agent": self._settings.user_agent,
            },
            limits=httpx.Limits(
                max_connections=self._max_connections,
                max_keepalive_connections=self._max_connections,
            ),
            transport=self._transport,
        )
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    def _get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a single GET request.

        Args:
            endpoint: API endpoint path.
            params: Optional query parameters.

        Returns:
            JSON response as dictionary.

        Raises:
            TMDBClientError: If the client is used outside its context.
            FetchTransportError: On network failure.
            FetchStatusError: On any status other than 200.
            FetchDecodeError: When the body is not a JSON object.
        """
        if self._client is None:
            msg = "Client not initialized. Use context manager."
            raise TMDBClientError(msg)

        request_params: dict[str, Any] = {"language": self._settings.language}
        if params:
            request_params.update(params)

        try:
            response = self._client.get(endpoint, params=request_params)
        except httpx.HTTPError as e:
            raise FetchTransportError(f"{type(e).__name__} on {endpoint}: {e}") from e

        return self._handle_response(response, endpoint)

    @staticmethod
    def _handle_response(
        response: httpx.Response,
        endpoint: str,
    ) -> dict[str, Any]:
        """Check status and decode the body as a JSON object.

        Raises:
            FetchStatusError: When status is not 200.
            FetchDecodeError: When the body is not a JSON object.
        """
        if response.status_code != 200:
            if response.status_code == 429:
                logger.warning(
                    f"Rate limited by TMDB on {endpoint}, "
                    f"Retry-After={response.headers.get('Retry-After', '?')}"
                )
            raise FetchStatusError(response.status_code, endpoint)

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchDecodeError(f"Invalid JSON body for {endpoint}: {e}") from e

        if not isinstance(payload, dict):
            raise FetchDecodeError(
                f"Expected a JSON object for {endpoint}, got {type(payload).__name__}"
            )
        return payload

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    def get_movie_full(self, movie_id: int) -> TMDBRawMovie:
        """Get a movie with its release dates and credits in one request.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Raw movie document.
        """
        params = {"append_to_response": self._settings.append_to_response}
        return self._get(f"/movie/{movie_id}", params)
