"""Fixtures for the threaded pipeline and CLI tests."""

import json
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from movie_harvester.etl.extractors.tmdb import FetchStatusError


class FakeTMDBClient:
    """Thread-safe stand-in for ``TMDBClient`` serving generated documents.

    Identifiers listed in ``missing`` answer 404.
    """

    def __init__(self, *args: Any, missing: set[int] | None = None, **kwargs: Any) -> None:
        self.missing = missing or set()
        self.requested: list[int] = []
        self._lock = threading.Lock()

    def __enter__(self) -> "FakeTMDBClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    def get_movie_full(self, movie_id: int) -> dict[str, Any]:
        with self._lock:
            self.requested.append(movie_id)
        if movie_id in self.missing:
            raise FetchStatusError(404, f"/movie/{movie_id}")
        return {
            "id": movie_id,
            "title": f"Movie {movie_id}",
            "original_language": "en",
            "genres": [{"id": 27, "name": "Horror"}],
            "credits": {
                "cast": [{"id": movie_id * 10, "name": "Lead", "order": 0}],
                "crew": [{"id": movie_id * 10 + 1, "name": "Boss", "job": "Director"}],
            },
        }


@pytest.fixture
def fake_client() -> FakeTMDBClient:
    return FakeTMDBClient()


@pytest.fixture
def write_ids(tmp_path: Path) -> Callable[[list[int]], Path]:
    """Write an identifier file and return its path."""

    def _write(ids: list[int]) -> Path:
        path = tmp_path / "movie_ids.json"
        path.write_text(json.dumps([{"id": movie_id} for movie_id in ids]), encoding="utf-8")
        return path

    return _write


def read_batches(output_dir: Path) -> list[list[dict[str, Any]]]:
    return [
        json.loads(path.read_text(encoding="utf-8"))
        for path in sorted(output_dir.glob("*.json"))
    ]


@pytest.fixture
def load_batches() -> Callable[[Path], list[list[dict[str, Any]]]]:
    """Read every batch file of a directory in name order."""
    return read_batches
