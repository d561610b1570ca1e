"""Shared pytest fixtures."""

import copy
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path
from typing import Any

import pytest

from movie_harvester.etl.loaders.json import BatchWriteError
from movie_harvester.etl.utils import logger as logger_module
from movie_harvester.settings import get_settings

RAW_MOVIE: dict[str, Any] = {
    "id": 550,
    "original_language": "en",
    "original_title": "Fight Club",
    "title": "Fight Club",
    "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
    "popularity": 61.416,
    "runtime": 139,
    "budget": 63000000,
    "release_date": "1999-10-15",
    "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
    "production_countries": [
        {"iso_3166_1": "DE", "name": "Germany"},
        {"iso_3166_1": "US", "name": "United States of America"},
    ],
    "release_dates": {
        "results": [
            {
                "iso_3166_1": "US",
                "release_dates": [
                    {"certification": "R", "note": "", "release_date": "1999-10-15T00:00:00.000Z", "type": 3},
                    {"certification": "R", "note": "DVD", "release_date": "2000-06-06T00:00:00.000Z", "type": 5},
                ],
            },
            {
                "iso_3166_1": "DE",
                "release_dates": [
                    {"note": "", "release_date": "1999-11-11T00:00:00.000Z", "type": 3},
                ],
            },
        ]
    },
    "credits": {
        "cast": [
            {"id": 819, "name": "Edward Norton", "order": 0},
            {"id": 287, "name": "Brad Pitt", "order": 1},
            {"id": 1283, "name": "Helena Bonham Carter", "order": 2},
            {"id": 7470, "name": "Meat Loaf", "order": 3},
            {"id": 7499, "name": "Jared Leto", "order": 4},
            {"id": 7471, "name": "Zach Grenier", "order": 5},
        ],
        "crew": [
            {"id": 7467, "name": "David Fincher", "job": "Director"},
            {"id": 7469, "name": "Jim Uhls", "job": "Screenplay"},
            {"id": 7474, "name": "Ross Grayson Bell", "job": "Producer"},
        ],
    },
}


@pytest.fixture(autouse=True)
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Pin environment variables and run every test from a clean directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("API_ACCESS_TOKEN", raising=False)
    monkeypatch.setenv("TMDB_ACCESS_TOKEN", "test_access_token_1234567890")
    monkeypatch.setenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
    monkeypatch.setenv("TMDB_LANGUAGE", "en-US")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    for var in (
        "HARVEST_WORKERS",
        "HARVEST_BATCH_SIZE",
        "HARVEST_FLUSH_TIMEOUT",
        "HARVEST_IDS_FILE",
        "HARVEST_OUTPUT_DIR",
        "HARVEST_FILE_PREFIX",
        "HARVEST_WORK_QUEUE_SIZE",
        "HARVEST_RESULT_QUEUE_SIZE",
        "HARVEST_SHUTDOWN_TIMEOUT",
        "HARVEST_ACQUIRE_TIMEOUT",
        "TMDB_REQUESTS_PER_SECOND",
        "TMDB_BURST",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    """Force settings to be reloaded from the patched environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_loggers() -> Iterator[None]:
    """Drop cached loggers so handlers never outlive a test's captured streams."""
    yield
    for cached in logger_module._LOGGERS_CACHE.values():
        for handler in list(cached.handlers):
            handler.close()
            cached.removeHandler(handler)
        cached.propagate = True
    logger_module._LOGGERS_CACHE.clear()


@pytest.fixture
def make_raw_movie() -> Callable[..., dict[str, Any]]:
    """Factory for raw TMDB movie documents with per-test overrides."""

    def _make(**overrides: Any) -> dict[str, Any]:
        raw = copy.deepcopy(RAW_MOVIE)
        raw.update(overrides)
        return raw

    return _make


# -------------------------------------------------------------------------
# Pipeline helpers
# -------------------------------------------------------------------------


class RecordingWriter:
    """In-memory batch writer; fails the calls listed in ``fail_on``."""

    def __init__(self, fail_on: Sequence[int] = (), delay: float = 0.0) -> None:
        self.batches: list[list[dict[str, Any]]] = []
        self.calls = 0
        self._fail_on = set(fail_on)
        self._delay = delay
        self._lock = threading.Lock()

    def write(self, batch: Sequence[Any]) -> Path:
        if self._delay:
            time.sleep(self._delay)
        with self._lock:
            self.calls += 1
            call = self.calls
            if call in self._fail_on:
                raise BatchWriteError(f"disk full on call {call}")
            self.batches.append(list(batch))
        return Path(f"batch_{call:06d}.json")

    @property
    def written_ids(self) -> list[int]:
        with self._lock:
            return [movie["id"] for batch in self.batches for movie in batch]


@pytest.fixture
def make_writer() -> Callable[..., RecordingWriter]:
    """Factory for in-memory batch writers."""
    return RecordingWriter


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    """Poll a predicate until it holds or the timeout expires."""

    def _wait(predicate: Callable[[], bool], timeout: float = 3.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()

    return _wait
