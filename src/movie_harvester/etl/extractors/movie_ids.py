"""Movie identifier source.

Reads the JSON file listing the movies to harvest, an array of objects
``[{"id": 550}, {"id": 551}, ...]``. Extra keys on each object are ignored;
duplicates are kept and harvested independently.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class MovieIdFileError(Exception):
    """Raised when the identifier file is missing or malformed."""

    pass


class MovieIdEntry(BaseModel):
    """One entry of the identifier file."""

    model_config = ConfigDict(extra="ignore")

    id: StrictInt = Field(gt=0)


_ENTRIES_ADAPTER = TypeAdapter(list[MovieIdEntry])


def read_movie_ids(path: Path) -> list[int]:
    """Load movie identifiers from a JSON file.

    Args:
        path: JSON file containing an array of ``{"id": <int>}`` objects.

    Returns:
        Identifiers in file order.

    Raises:
        MovieIdFileError: If the file cannot be read or is not the expected shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MovieIdFileError(f"Cannot read movie id file {path}: {e}") from e

    try:
        entries = _ENTRIES_ADAPTER.validate_python(json.loads(raw))
    except json.JSONDecodeError as e:
        raise MovieIdFileError(f"Invalid JSON in {path}: {e}") from e
    except ValidationError as e:
        raise MovieIdFileError(
            f"Unexpected content in {path}: {e.error_count()} invalid entries, first: "
            f"{e.errors()[0]['loc']} {e.errors()[0]['msg']}"
        ) from e

    movie_ids = [entry.id for entry in entries]
    logger.info(f"Loaded {len(movie_ids)} movie ids from {path}")
    return movie_ids
