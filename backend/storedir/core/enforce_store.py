"""Store Input Enforcement: validation and normalization before any write.

Invariants:
    - Pure functions: no IO, no async, no DB
    - name is trimmed and non-empty; description trimmed, empty -> None
    - location.address trimmed and non-empty
    - location.coordinates is exactly two numbers [lng, lat] within WGS84 bounds
    - author_id is required on create and never accepted on update
    - rating is an integer within MIN_RATING..MAX_RATING
    - Every failure raises InputValidationError naming the offending field
    - Tags are kept verbatim: insertion order, duplicates and spelling untouched
"""

from numbers import Real
from uuid import UUID

from storedir.core.domain_types import MAX_RATING, MIN_RATING
from storedir.core.errors import InputValidationError

_IMMUTABLE_FIELDS = ("id", "slug", "author_id", "created_at")


def _clean_text(value, field: str, required: bool) -> str | None:
    if value is None:
        if required:
            raise InputValidationError(f"{field} is required", field)
        return None
    if not isinstance(value, str):
        raise InputValidationError(f"{field} must be a string", field)
    value = value.strip()
    if not value:
        if required:
            raise InputValidationError(f"{field} cannot be empty or whitespace", field)
        return None
    return value


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def check_coordinates(coordinates) -> list[float]:
    """Return [lng, lat] as floats or raise on anything else."""
    field = "location.coordinates"
    if coordinates is None:
        raise InputValidationError("You must supply coordinates", field)
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2:
        raise InputValidationError(
            "coordinates must be exactly [longitude, latitude]", field,
        )
    if not all(_is_number(c) for c in coordinates):
        raise InputValidationError("coordinates must be numeric", field)
    lng, lat = float(coordinates[0]), float(coordinates[1])
    if not -180.0 <= lng <= 180.0:
        raise InputValidationError("longitude must be within -180..180", field)
    if not -90.0 <= lat <= 90.0:
        raise InputValidationError("latitude must be within -90..90", field)
    return [lng, lat]


def check_location(location) -> dict:
    if not isinstance(location, dict):
        raise InputValidationError("You must supply a location", "location")
    address = _clean_text(location.get("address"), "location.address", True)
    coordinates = check_coordinates(location.get("coordinates"))
    return {"type": "Point", "coordinates": coordinates, "address": address}


def check_author_id(author_id) -> UUID:
    if not author_id:
        raise InputValidationError("You must supply an author", "author_id")
    if isinstance(author_id, UUID):
        return author_id
    try:
        return UUID(str(author_id))
    except ValueError:
        raise InputValidationError("author_id is not a valid id", "author_id")


def check_tags(tags) -> list[str]:
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple)) or not all(isinstance(t, str) for t in tags):
        raise InputValidationError("tags must be a list of strings", "tags")
    return list(tags)


def validate_store_input(data: dict) -> dict:
    """Validate and normalize a create payload; returns a new dict."""
    name = _clean_text(data.get("name"), "name", True)
    return {
        "name": name,
        "description": _clean_text(data.get("description"), "description", False),
        "tags": check_tags(data.get("tags")),
        "location": check_location(data.get("location")),
        "photo": _clean_text(data.get("photo"), "photo", False),
        "author_id": check_author_id(data.get("author_id")),
    }


def validate_store_changes(changes: dict) -> dict:
    """Validate a partial update; only keys present in changes are returned."""
    for key in _IMMUTABLE_FIELDS:
        if key in changes:
            raise InputValidationError(f"{key} cannot be changed", key)
    cleaned: dict = {}
    if "name" in changes:
        cleaned["name"] = _clean_text(changes["name"], "name", True)
    if "description" in changes:
        cleaned["description"] = _clean_text(
            changes["description"], "description", False,
        )
    if "tags" in changes:
        cleaned["tags"] = check_tags(changes["tags"])
    if "location" in changes:
        cleaned["location"] = check_location(changes["location"])
    if "photo" in changes:
        cleaned["photo"] = _clean_text(changes["photo"], "photo", False)
    return cleaned


def check_rating(rating) -> int:
    if not isinstance(rating, int) or isinstance(rating, bool):
        raise InputValidationError("rating must be an integer", "rating")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InputValidationError(
            f"rating must be between {MIN_RATING} and {MAX_RATING}", "rating",
        )
    return rating
