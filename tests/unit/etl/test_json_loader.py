"""Unit tests for the JSON batch writer."""

import json
from pathlib import Path

import pytest

from movie_harvester.etl.loaders.json.loader import BatchWriteError, JSONBatchWriter


def _movie(movie_id: int) -> dict:
    return {"id": movie_id, "title": f"Movie {movie_id}", "poster_path": None, "genres": [27]}


@pytest.mark.unit
class TestJSONBatchWriter:
    @staticmethod
    def test_writes_json_array(tmp_path: Path) -> None:
        writer = JSONBatchWriter(tmp_path / "out")
        path = writer.write([_movie(1), _movie(2)])

        assert path.parent == tmp_path / "out"
        assert json.loads(path.read_text(encoding="utf-8")) == [_movie(1), _movie(2)]

    @staticmethod
    def test_file_name_uses_prefix(tmp_path: Path) -> None:
        path = JSONBatchWriter(tmp_path, prefix="batch").write([_movie(1)])
        assert path.name.startswith("batch_")
        assert path.suffix == ".json"

    @staticmethod
    def test_consecutive_writes_never_share_a_file(tmp_path: Path) -> None:
        writer = JSONBatchWriter(tmp_path)
        paths = {writer.write([_movie(i)]) for i in range(5)}
        assert len(paths) == 5
        assert len(list(tmp_path.glob("*.json"))) == 5

    @staticmethod
    def test_unicode_preserved(tmp_path: Path) -> None:
        movie = {"id": 1, "title": "Amélie"}
        path = JSONBatchWriter(tmp_path).write([movie])
        assert "Amélie" in path.read_text(encoding="utf-8")

    @staticmethod
    def test_unwritable_directory_raises(tmp_path: Path) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(BatchWriteError, match="1 movies"):
            JSONBatchWriter(blocker / "out").write([_movie(1)])

    @staticmethod
    def test_unserializable_record_leaves_no_file(tmp_path: Path) -> None:
        batch = [{"id": 1, "title": "ok"}, {"id": 2, "bad": object()}]
        with pytest.raises(BatchWriteError):
            JSONBatchWriter(tmp_path).write(batch)  # type: ignore[arg-type]
        assert list(tmp_path.glob("*.json")) == []

    @staticmethod
    def test_interrupted_write_removes_partial_file(
        tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def disk_full(path: Path, payload: str) -> None:
            path.write_text(payload[: len(payload) // 2], encoding="utf-8")
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(JSONBatchWriter, "_write_json", staticmethod(disk_full))

        with pytest.raises(BatchWriteError, match="No space left"):
            JSONBatchWriter(tmp_path).write([_movie(1), _movie(2)])
        assert list(tmp_path.glob("*.json")) == []
