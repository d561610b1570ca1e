"""Unit tests for the JSON field accessors."""

import pytest

from movie_harvester.etl.utils.json_fields import (
    as_float,
    as_int,
    get_float,
    get_int,
    get_list,
    get_object,
    get_optional_str,
    get_str,
    iter_objects,
)


@pytest.mark.unit
class TestNumbers:
    @staticmethod
    @pytest.mark.parametrize(
        "value, expected",
        [(3, 3), (3.0, 3), (-2, -2), (3.5, None), (True, None), ("3", None), (None, None)],
    )
    def test_as_int(value, expected) -> None:
        assert as_int(value) == expected

    @staticmethod
    @pytest.mark.parametrize(
        "value, expected",
        [(3, 3.0), (2.5, 2.5), (False, None), ("2.5", None), (None, None)],
    )
    def test_as_float(value, expected) -> None:
        assert as_float(value) == expected

    @staticmethod
    def test_get_int_default() -> None:
        assert get_int({}, "runtime") == 0
        assert get_int({"runtime": None}, "runtime", default=-1) == -1
        assert get_int({"runtime": 90}, "runtime") == 90

    @staticmethod
    def test_get_float_default() -> None:
        assert get_float({"popularity": "high"}, "popularity") == 0.0
        assert get_float({"popularity": 1}, "popularity") == 1.0


@pytest.mark.unit
class TestStrings:
    @staticmethod
    def test_get_str() -> None:
        assert get_str({"title": "Alien"}, "title") == "Alien"
        assert get_str({"title": 1979}, "title") == ""
        assert get_str({}, "title", default="?") == "?"

    @staticmethod
    @pytest.mark.parametrize("data", [{}, {"poster_path": None}, {"poster_path": ""}, {"poster_path": 1}])
    def test_get_optional_str_absent(data) -> None:
        assert get_optional_str(data, "poster_path") is None

    @staticmethod
    def test_get_optional_str_present() -> None:
        assert get_optional_str({"poster_path": "/a.jpg"}, "poster_path") == "/a.jpg"


@pytest.mark.unit
class TestContainers:
    @staticmethod
    def test_get_object() -> None:
        assert get_object({"credits": {"cast": []}}, "credits") == {"cast": []}
        assert get_object({"credits": []}, "credits") is None

    @staticmethod
    def test_get_list() -> None:
        assert get_list({"genres": [1]}, "genres") == [1]
        assert get_list({"genres": {"id": 1}}, "genres") is None

    @staticmethod
    def test_iter_objects_skips_non_objects() -> None:
        assert iter_objects([{"a": 1}, 2, "x", None, {"b": 2}]) == [{"a": 1}, {"b": 2}]
        assert iter_objects(None) == []
