"""Total accessors for loosely-typed JSON documents.

Each accessor reads one key from a decoded JSON object and returns either
the value coerced to the requested type or a caller-chosen fallback. None of
them raise: a missing key, a ``null`` and a type mismatch all yield the
fallback, so every field read declares its own failure mode.
"""

from typing import Any

JSONObject = dict[str, Any]


def as_int(value: Any) -> int | None:
    """Coerce a JSON number to int.

    Integral floats (``12.0``) are accepted since JSON decoders may produce
    them; booleans and fractional floats are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def as_float(value: Any) -> float | None:
    """Coerce a JSON number to float, rejecting booleans."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def get_int(data: JSONObject, key: str, default: int = 0) -> int:
    value = as_int(data.get(key))
    return default if value is None else value


def get_float(data: JSONObject, key: str, default: float = 0.0) -> float:
    value = as_float(data.get(key))
    return default if value is None else value


def get_str(data: JSONObject, key: str, default: str = "") -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def get_optional_str(data: JSONObject, key: str) -> str | None:
    """Return a non-empty string, or None for absent, null, empty or non-string."""
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def get_object(data: JSONObject, key: str) -> JSONObject | None:
    value = data.get(key)
    return value if isinstance(value, dict) else None


def get_list(data: JSONObject, key: str) -> list[Any] | None:
    value = data.get(key)
    return value if isinstance(value, list) else None


def iter_objects(items: list[Any] | None) -> list[JSONObject]:
    """Keep only the JSON objects of a list, silently skipping other values."""
    if not items:
        return []
    return [item for item in items if isinstance(item, dict)]
